#
# Copyright 2026 pdfium-xcframework Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""
Swift Package Manager manifest generation.
"""

from pathlib import Path
from typing import Optional

from .config import ApplePackageConfig, write_manifest

# PackageDescription names of our platform keys
PLATFORM_TO_SPM = {
    "ios": "iOS",
    "macos": "macOS",
    "maccatalyst": "macCatalyst",
}


def spm_version_literal(version: str) -> str:
    """
    13.0 -> .v13, 10.15 -> .v10_15

    PackageDescription only names major versions for iOS 13+, so a
    trailing .0 is dropped.
    """
    parts = version.split(".")
    while len(parts) > 1 and parts[-1] == "0":
        parts.pop()
    return ".v" + "_".join(parts)


class SPMGenerator:
    """Render Package.swift for the binary XCFramework target."""

    def __init__(self, config: ApplePackageConfig):
        self.config = config
        self.package_swift_path: Optional[Path] = None

    def render(self) -> str:
        name = self.config.name
        platform_lines = []
        for platform in self.config.platforms:
            spm_name = PLATFORM_TO_SPM.get(platform.name)
            if spm_name:
                platform_lines.append(f"        .{spm_name}({spm_version_literal(platform.min_version)})")

        lines = [
            f"// swift-tools-version:{self.config.swift_tools_version}",
            "import PackageDescription",
            "",
            "let package = Package(",
            f'    name: "{name}",',
        ]
        if platform_lines:
            lines.append("    platforms: [")
            lines.append(",\n".join(platform_lines))
            lines.append("    ],")
        lines.extend([
            "    products: [",
            "        .library(",
            f'            name: "{name}",',
            f'            targets: ["{name}"]',
            "        )",
            "    ],",
            "    targets: [",
            "        .binaryTarget(",
            f'            name: "{name}",',
            f'            url: "{self.config.release_url}",',
            f'            checksum: "{self.config.checksum}"',
            "        )",
            "    ]",
            ")",
        ])
        return "\n".join(lines) + "\n"

    def generate_package_swift(self, output_dir) -> Path:
        """
        Write Package.swift into output_dir.

        Returns:
            Path to generated Package.swift file
        """
        self.package_swift_path = write_manifest(Path(output_dir) / "Package.swift", self.render())
        return self.package_swift_path
