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
CocoaPods podspec generation.
"""

from pathlib import Path
from typing import Optional

from .config import ApplePackageConfig, write_manifest


class PodspecGenerator:
    """Render <name>.podspec for the hosted XCFramework zip."""

    # CocoaPods uses different platform names than our internal names
    PLATFORM_TO_COCOAPODS = {
        "ios": "ios",
        "macos": "osx",
    }

    def __init__(self, config: ApplePackageConfig):
        self.config = config
        self.podspec_path: Optional[Path] = None

    def _escape_string(self, s: str) -> str:
        """Escape single quotes for Ruby single-quoted strings."""
        return s.replace("\\", "\\\\").replace("'", "\\'")

    def render(self) -> str:
        config = self.config
        lines = [
            "Pod::Spec.new do |s|",
            f"  s.name             = '{config.name}'",
            f"  s.version          = '{config.version}'",
            f"  s.summary          = '{self._escape_string(config.summary)}'",
            "  s.description      = <<-DESC",
        ]
        for line in config.description.splitlines():
            lines.append(f"    {line}")
        lines.extend([
            "  DESC",
            "",
            f"  s.homepage         = '{config.homepage}'",
        ])
        if config.license_file:
            lines.append(f"  s.license          = {{ :type => '{config.license}', :file => '{config.license_file}' }}")
        else:
            lines.append(f"  s.license          = {{ :type => '{config.license}' }}")
        lines.extend([
            f"  s.author           = {{ '{config.name} XCFramework' => '{config.homepage}' }}",
            "  s.source           = {",
            f"    :http => '{config.release_url}',",
            f"    :sha256 => '{config.checksum}'",
            "  }",
            "",
        ])
        for platform in config.platforms:
            pod_platform = self.PLATFORM_TO_COCOAPODS.get(platform.name)
            if pod_platform:
                lines.append(f"  s.{pod_platform}.deployment_target = '{platform.min_version}'")
        lines.extend([
            "",
            f"  s.vendored_frameworks = '{config.xcframework_name}'",
            "  s.requires_arc = true",
            "end",
        ])
        return "\n".join(lines) + "\n"

    def generate_podspec(self, output_dir) -> Path:
        """
        Write <name>.podspec into output_dir.

        Returns:
            Path to generated podspec file
        """
        output_path = Path(output_dir) / f"{self.config.name}.podspec"
        self.podspec_path = write_manifest(output_path, self.render())
        return self.podspec_path
