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
Apple package manifest configuration.

Resolves what Package.swift and the podspec need from the build's version
record, PDFIUM.toml and environment variables.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pdfium_xcframework.build_scripts.build_config import (
    DEFAULT_FRAMEWORK_NAME,
    DEFAULT_GITHUB_REPO,
    DEFAULT_VERSION,
    expand_env,
)

PLACEHOLDER_CHECKSUM = "REPLACE_WITH_CHECKSUM"


@dataclass
class PackagePlatform:
    """Minimum deployment target of one platform."""
    name: str  # ios, macos, maccatalyst
    min_version: str


@dataclass
class ApplePackageConfig:
    """Everything the manifest generators render."""
    name: str = DEFAULT_FRAMEWORK_NAME
    version: str = DEFAULT_VERSION
    github_repo: str = DEFAULT_GITHUB_REPO
    zip_name: str = f"{DEFAULT_FRAMEWORK_NAME}.xcframework.zip"
    checksum: str = PLACEHOLDER_CHECKSUM
    summary: str = "PDFium XCFramework for iOS and macOS"
    description: str = (
        "PDFium is an open-source PDF rendering engine from the Chromium project.\n"
        "This pod provides a pre-built XCFramework for iOS, macOS, and Mac Catalyst."
    )
    license: str = "BSD-3-Clause"
    license_file: str = "LICENSE"
    swift_tools_version: str = "5.9"
    platforms: List[PackagePlatform] = field(default_factory=lambda: [
        PackagePlatform("ios", "13.0"),
        PackagePlatform("macos", "10.15"),
        PackagePlatform("maccatalyst", "13.0"),
    ])

    @classmethod
    def load(
        cls,
        project_config: Optional[Dict[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
        **overrides,
    ) -> "ApplePackageConfig":
        """
        Create a config from PDFIUM.toml's [framework]/[publish] sections.

        GITHUB_REPO and VERSION environment variables override the file;
        keyword overrides win over both.
        """
        if environ is None:
            environ = os.environ
        project_config = project_config or {}
        framework_config = project_config.get("framework", {})
        publish_config = project_config.get("publish", {})

        config = cls()
        config.name = expand_env(framework_config.get("name", config.name), environ)
        config.zip_name = f"{config.name}.xcframework.zip"
        config.github_repo = environ.get("GITHUB_REPO") or expand_env(
            publish_config.get("github_repo", config.github_repo), environ
        )
        config.version = environ.get("VERSION") or config.version
        for key in ("summary", "description", "license", "license_file"):
            if key in publish_config:
                setattr(config, key, expand_env(publish_config[key], environ))

        platforms = []
        for platform in config.platforms:
            version_key = f"min_{platform.name}_version"
            min_version = expand_env(publish_config.get(version_key, platform.min_version), environ)
            platforms.append(PackagePlatform(platform.name, min_version))
        config.platforms = platforms

        for key, value in overrides.items():
            if value is not None:
                setattr(config, key, value)
        return config

    @property
    def is_placeholder_repo(self) -> bool:
        return self.github_repo == DEFAULT_GITHUB_REPO

    @property
    def homepage(self) -> str:
        return f"https://github.com/{self.github_repo}"

    @property
    def release_url(self) -> str:
        return f"https://github.com/{self.github_repo}/releases/download/v{self.version}/{self.zip_name}"

    @property
    def xcframework_name(self) -> str:
        return f"{self.name}.xcframework"

    def min_version(self, platform: str) -> Optional[str]:
        for p in self.platforms:
            if p.name == platform:
                return p.min_version
        return None

    def validate(self) -> Tuple[bool, List[str]]:
        """
        Validate the configuration.

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        errors = []
        if not self.name:
            errors.append("name is required")
        if not self.version:
            errors.append("version is required")
        if not self.zip_name:
            errors.append("zip_name is required")
        if "/" not in self.github_repo:
            errors.append(f"github_repo must be OWNER/REPO: {self.github_repo}")
        return len(errors) == 0, errors


def write_manifest(path: Path, content: str) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path
