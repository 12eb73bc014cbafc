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
Build configuration for the PDFium XCFramework.

This module holds everything the pipeline needs to know up front:
- The fixed list of platform/architecture archives to repackage
- Which of them are merged into universal (fat) frameworks
- Per-run settings resolved from the command line, environment
  variables, PDFIUM.toml and built-in defaults (in that order)

Every path used by the pipeline is computed here from a configuration's
identity, so no step has to discover another step's output by globbing.
"""

import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .build_errors import BuildError

CONFIG_FILE_NAME = "PDFIUM.toml"

DEFAULT_VERSION = "144.0.7506.0"
DEFAULT_RELEASE_TAG = "chromium/7506"
DEFAULT_WORK_DIR = "./build"
DEFAULT_OUTPUT_DIR = "./output"
DEFAULT_UPSTREAM_REPO = "bblanchon/pdfium-binaries"
DEFAULT_GITHUB_REPO = "OWNER/REPO"

DEFAULT_FRAMEWORK_NAME = "PDFium"
DEFAULT_BUNDLE_IDENTIFIER = "com.pdfium.PDFium"
DEFAULT_MIN_IOS_VERSION = "11.0"
DEFAULT_MIN_MACOS_VERSION = "10.13"
DEFAULT_MIN_CATALYST_VERSION = "11.0"

RELEASE_TAG_PREFIX = "chromium/"
# upstream tags only carry the chromium build number
VERSION_TEMPLATE = "144.0.{chromium_version}.0"

PLATFORM_IPHONE_OS = "iPhoneOS"
PLATFORM_IPHONE_SIMULATOR = "iPhoneSimulator"
PLATFORM_MACOSX = "MacOSX"
VARIANT_CATALYST = "catalyst"

SHALLOW_PLATFORMS = (PLATFORM_IPHONE_OS, PLATFORM_IPHONE_SIMULATOR)


@dataclass(frozen=True)
class BuildConfig:
    """One upstream archive and the framework built from it."""
    name: str
    archive_name: str
    platform: str
    arch: str
    variant: str = ""

    @property
    def internal_name(self) -> str:
        suffix = f"-{self.variant}" if self.variant else ""
        return f"PDFium-{self.platform}-{self.arch}{suffix}"

    @property
    def is_shallow(self) -> bool:
        # iOS device and simulator frameworks are shallow bundles,
        # macOS and Mac Catalyst frameworks use Versions/A
        return self.platform in SHALLOW_PLATFORMS

    @property
    def is_catalyst(self) -> bool:
        return self.variant == VARIANT_CATALYST

    @property
    def supported_platforms(self) -> List[str]:
        if self.is_catalyst:
            return [PLATFORM_MACOSX]
        return [self.platform]

    def describe(self) -> str:
        suffix = f"-{self.variant}" if self.variant else ""
        return f"{self.platform}-{self.arch}{suffix}"


@dataclass(frozen=True)
class FatConfig:
    """Two single-architecture frameworks merged into one."""
    output_name: str
    first: BuildConfig
    second: BuildConfig

    @property
    def is_shallow(self) -> bool:
        return self.first.is_shallow


IOS_CATALYST_ARM64 = BuildConfig(
    "ios-catalyst-arm64", "pdfium-ios-catalyst-arm64.tgz",
    PLATFORM_MACOSX, "arm64", VARIANT_CATALYST,
)
IOS_CATALYST_X64 = BuildConfig(
    "ios-catalyst-x64", "pdfium-ios-catalyst-x64.tgz",
    PLATFORM_MACOSX, "x64", VARIANT_CATALYST,
)
IOS_DEVICE_ARM64 = BuildConfig(
    "ios-device-arm64", "pdfium-ios-device-arm64.tgz",
    PLATFORM_IPHONE_OS, "arm64",
)
IOS_SIMULATOR_ARM64 = BuildConfig(
    "ios-simulator-arm64", "pdfium-ios-simulator-arm64.tgz",
    PLATFORM_IPHONE_SIMULATOR, "arm64",
)
IOS_SIMULATOR_X64 = BuildConfig(
    "ios-simulator-x64", "pdfium-ios-simulator-x64.tgz",
    PLATFORM_IPHONE_SIMULATOR, "x64",
)
MAC_ARM64 = BuildConfig(
    "mac-arm64", "pdfium-mac-arm64.tgz", PLATFORM_MACOSX, "arm64",
)
MAC_X64 = BuildConfig(
    "mac-x64", "pdfium-mac-x64.tgz", PLATFORM_MACOSX, "x64",
)

BUILD_CONFIGS: Tuple[BuildConfig, ...] = (
    IOS_CATALYST_ARM64,
    IOS_CATALYST_X64,
    IOS_DEVICE_ARM64,
    IOS_SIMULATOR_ARM64,
    IOS_SIMULATOR_X64,
    MAC_ARM64,
    MAC_X64,
)

FAT_CONFIGS: Tuple[FatConfig, ...] = (
    FatConfig(PLATFORM_IPHONE_SIMULATOR, IOS_SIMULATOR_ARM64, IOS_SIMULATOR_X64),
    FatConfig(f"{PLATFORM_MACOSX}-{VARIANT_CATALYST}", IOS_CATALYST_ARM64, IOS_CATALYST_X64),
    FatConfig(PLATFORM_MACOSX, MAC_ARM64, MAC_X64),
)

# frameworks that go into the XCFramework without merging
SINGLE_CONFIGS: Tuple[BuildConfig, ...] = (IOS_DEVICE_ARM64,)


def expand_env(value, environ: Optional[Mapping[str, str]] = None):
    """
    Expand environment variables in configuration values.

    Supports ${VAR_NAME} and $VAR_NAME syntax; unknown variables are
    left untouched.
    """
    if not isinstance(value, str):
        return value
    if environ is None:
        environ = os.environ

    pattern1 = re.compile(r'\$\{([^}]+)\}')
    value = pattern1.sub(lambda m: environ.get(m.group(1), m.group(0)), value)

    pattern2 = re.compile(r'\$([A-Za-z_][A-Za-z0-9_]*)')
    value = pattern2.sub(lambda m: environ.get(m.group(1), m.group(0)), value)

    return value


def load_project_config(project_dir=None) -> Dict[str, Any]:
    """
    Load PDFIUM.toml from the project directory.

    Returns an empty dict when the file does not exist. A file that exists
    but cannot be parsed is a build error.
    """
    project_dir = Path(project_dir or os.getcwd())
    config_file = project_dir / CONFIG_FILE_NAME
    if not config_file.is_file():
        return {}
    try:
        with open(config_file, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise BuildError(f"Failed to load {config_file}: {e}") from e


def chromium_version_from_tag(release_tag: str) -> str:
    """chromium/7506 -> 7506"""
    if release_tag.startswith(RELEASE_TAG_PREFIX):
        return release_tag[len(RELEASE_TAG_PREFIX):]
    return release_tag


def resolve_version(
    version_arg: Optional[str],
    environ: Mapping[str, str],
    fetch_latest_tag: Callable[[], str],
) -> Optional[Tuple[str, str]]:
    """
    Resolve the full version and upstream release tag of this build.

    Args:
        version_arg: Chromium build number, "latest" or None
        environ: Environment mapping (VERSION and RELEASE_TAG are read)
        fetch_latest_tag: Called only for "latest", returns the newest tag

    Returns:
        (version, release_tag), or None when nothing selects a version and
        the caller should print usage.
    """
    env_version = environ.get("VERSION") or None
    env_tag = environ.get("RELEASE_TAG") or None

    if version_arg:
        if version_arg == "latest":
            release_tag = fetch_latest_tag()
            chromium_version = chromium_version_from_tag(release_tag)
            if not chromium_version:
                raise BuildError(f"Failed to parse chromium version from tag: {release_tag}")
        else:
            chromium_version = version_arg
            release_tag = f"{RELEASE_TAG_PREFIX}{chromium_version}"
        version = env_version or VERSION_TEMPLATE.format(chromium_version=chromium_version)
        return version, release_tag

    if not env_version and not env_tag:
        return None
    return env_version or DEFAULT_VERSION, env_tag or DEFAULT_RELEASE_TAG


@dataclass
class BuildSettings:
    """Per-run settings shared by every pipeline step."""
    version: str = DEFAULT_VERSION
    release_tag: str = DEFAULT_RELEASE_TAG
    work_dir: Path = Path(DEFAULT_WORK_DIR)
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    build_id: str = ""
    upstream_repo: str = DEFAULT_UPSTREAM_REPO
    github_repo: str = DEFAULT_GITHUB_REPO
    framework_name: str = DEFAULT_FRAMEWORK_NAME
    bundle_identifier: str = DEFAULT_BUNDLE_IDENTIFIER
    min_os_versions: Dict[str, str] = field(default_factory=lambda: {
        "ios": DEFAULT_MIN_IOS_VERSION,
        "macos": DEFAULT_MIN_MACOS_VERSION,
        "catalyst": DEFAULT_MIN_CATALYST_VERSION,
    })

    @classmethod
    def load(
        cls,
        version: str = DEFAULT_VERSION,
        release_tag: str = DEFAULT_RELEASE_TAG,
        environ: Optional[Mapping[str, str]] = None,
        project_config: Optional[Dict[str, Any]] = None,
    ) -> "BuildSettings":
        """
        Build settings from environment variables and PDFIUM.toml.

        Environment variables win over the config file, which wins over
        the built-in defaults.
        """
        if environ is None:
            environ = os.environ
        project_config = project_config or {}
        build_config = project_config.get("build", {})
        framework_config = project_config.get("framework", {})
        publish_config = project_config.get("publish", {})

        def pick(env_key, section, key, default):
            value = environ.get(env_key) if env_key else None
            if not value:
                value = expand_env(section.get(key, default), environ)
            return value

        return cls(
            version=version,
            release_tag=release_tag,
            work_dir=Path(pick("WORK_DIR", build_config, "work_dir", DEFAULT_WORK_DIR)),
            output_dir=Path(pick("OUTPUT_DIR", build_config, "output_dir", DEFAULT_OUTPUT_DIR)),
            build_id=environ.get("BUILD_ID", ""),
            upstream_repo=pick(None, build_config, "upstream_repo", DEFAULT_UPSTREAM_REPO),
            github_repo=pick("GITHUB_REPO", publish_config, "github_repo", DEFAULT_GITHUB_REPO),
            framework_name=pick(None, framework_config, "name", DEFAULT_FRAMEWORK_NAME),
            bundle_identifier=pick(None, framework_config, "bundle_identifier", DEFAULT_BUNDLE_IDENTIFIER),
            min_os_versions={
                "ios": pick(None, framework_config, "min_ios_version", DEFAULT_MIN_IOS_VERSION),
                "macos": pick(None, framework_config, "min_macos_version", DEFAULT_MIN_MACOS_VERSION),
                "catalyst": pick(None, framework_config, "min_catalyst_version", DEFAULT_MIN_CATALYST_VERSION),
            },
        )

    @property
    def base_url(self) -> str:
        return f"https://github.com/{self.upstream_repo}/releases/download/{self.release_tag}"

    @property
    def chromium_version(self) -> str:
        return chromium_version_from_tag(self.release_tag)

    @property
    def framework_bundle_name(self) -> str:
        return f"{self.framework_name}.framework"

    @property
    def xcframework_name(self) -> str:
        return f"{self.framework_name}.xcframework"

    @property
    def xcframework_path(self) -> Path:
        return self.output_dir / self.xcframework_name

    @property
    def frameworks_dir(self) -> Path:
        return self.work_dir / "frameworks"

    def extract_dir(self, config: BuildConfig) -> Path:
        return self.work_dir / "extracted" / config.internal_name

    def framework_path(self, config: BuildConfig) -> Path:
        return self.frameworks_dir / config.internal_name / self.framework_bundle_name

    def fat_framework_path(self, fat_config: FatConfig) -> Path:
        return self.frameworks_dir / fat_config.output_name / self.framework_bundle_name

    def marker_path(self, config: BuildConfig) -> Path:
        return self.work_dir / f".framework_path_{config.name}"

    def min_os_version(self, config: BuildConfig) -> str:
        if config.is_shallow:
            return self.min_os_versions["ios"]
        if config.is_catalyst:
            return self.min_os_versions["catalyst"]
        return self.min_os_versions["macos"]
