#!/usr/bin/env python3
# -- coding: utf-8 --
#
# framework.py
# pdfium-xcframework
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
Apple framework bundle assembly.

Turns an extracted pdfium-binaries archive (lib/libpdfium.dylib, include/,
optionally lib/libpdfium.dylib.dSYM) into a .framework bundle:

iOS device and simulator (shallow bundle):
    PDFium.framework/
    ├── PDFium
    ├── Headers/
    └── Info.plist

macOS and Mac Catalyst (deep bundle):
    PDFium.framework/
    ├── PDFium -> Versions/Current/PDFium
    ├── Headers -> Versions/Current/Headers
    ├── Resources -> Versions/Current/Resources
    └── Versions/
        ├── A/
        │   ├── PDFium
        │   ├── Headers/
        │   └── Resources/Info.plist
        └── Current -> A

The binary is always named after the framework, xcodebuild rejects the
bundle otherwise.
"""

import os
import plistlib
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pdfium_xcframework.utils.log.log_util import log_info, log_warning

from .build_config import BuildConfig, BuildSettings
from .build_errors import AssemblyError
from .build_utils import (
    copy_headers,
    find_files,
    force_symlink,
    make_writable,
    remove_path,
    set_install_name,
)

VERSION_DIR_NAME = "A"
DWARF_SUBPATH = os.path.join("Contents", "Resources", "DWARF")
UPSTREAM_DSYM_SUBPATH = os.path.join("lib", "libpdfium.dylib.dSYM")


@dataclass(frozen=True)
class FrameworkLayout:
    """Where things live inside a framework bundle."""
    root: Path
    name: str
    shallow: bool

    @property
    def content_dir(self) -> Path:
        if self.shallow:
            return self.root
        return self.root / "Versions" / VERSION_DIR_NAME

    @property
    def binary_path(self) -> Path:
        return self.content_dir / self.name

    @property
    def headers_dir(self) -> Path:
        return self.content_dir / "Headers"

    @property
    def resources_dir(self) -> Optional[Path]:
        if self.shallow:
            return None
        return self.content_dir / "Resources"

    @property
    def info_plist_path(self) -> Path:
        if self.shallow:
            return self.root / "Info.plist"
        return self.resources_dir / "Info.plist"

    @property
    def dsym_path(self) -> Path:
        return self.root.with_name(self.root.name + ".dSYM")


def framework_layout(framework_path, shallow: bool) -> FrameworkLayout:
    framework_path = Path(framework_path)
    name = framework_path.name
    if name.endswith(".framework"):
        name = name[:-len(".framework")]
    return FrameworkLayout(framework_path, name, shallow)


def short_version(version: str) -> str:
    """
    CFBundleShortVersionString allows at most three integers.

    144.0.7506.0 -> 144.0.7506
    """
    return ".".join(version.split(".")[:3])


def find_library(extract_dir) -> Path:
    """
    Locate the PDFium binary inside an extracted archive.

    Prefers a dynamic library, falls back to a static archive.

    Raises:
        AssemblyError: no library file found
    """
    candidates = find_files(extract_dir, suffixes=(".dylib",), names=("libpdfium.so",))
    if not candidates:
        candidates = find_files(extract_dir, suffixes=(".a",))
    if not candidates:
        raise AssemblyError(f"No library file found in {extract_dir}")
    return candidates[0]


def build_info_plist(config: BuildConfig, settings: BuildSettings, binary_name: str) -> dict:
    return {
        "CFBundleExecutable": binary_name,
        "CFBundleIdentifier": settings.bundle_identifier,
        "CFBundleInfoDictionaryVersion": "6.0",
        "CFBundleName": settings.framework_name,
        "CFBundlePackageType": "FMWK",
        "CFBundleShortVersionString": short_version(settings.version),
        "CFBundleVersion": settings.version,
        "CFBundleSupportedPlatforms": config.supported_platforms,
        "MinimumOSVersion": settings.min_os_version(config),
    }


def write_info_plist(layout: FrameworkLayout, info: dict) -> Path:
    plist_path = layout.info_plist_path
    os.makedirs(plist_path.parent, exist_ok=True)
    with open(plist_path, "wb") as f:
        plistlib.dump(info, f, sort_keys=False)
    return plist_path


def update_info_plist_executable(layout: FrameworkLayout) -> None:
    """Point CFBundleExecutable at the layout's binary name."""
    plist_path = layout.info_plist_path
    if not plist_path.is_file():
        log_warning(f"Info.plist not found at {plist_path}")
        return
    with open(plist_path, "rb") as f:
        info = plistlib.load(f)
    if info.get("CFBundleExecutable") == layout.name:
        return
    info["CFBundleExecutable"] = layout.name
    write_info_plist(layout, info)


def create_version_symlinks(layout: FrameworkLayout) -> None:
    """Create Versions/Current and the root level aliases of a deep bundle."""
    if layout.shallow:
        return
    versions_dir = layout.root / "Versions"
    force_symlink(VERSION_DIR_NAME, versions_dir / "Current")
    force_symlink(f"Versions/Current/{layout.name}", layout.root / layout.name)
    force_symlink("Versions/Current/Headers", layout.root / "Headers")
    force_symlink("Versions/Current/Resources", layout.root / "Resources")


def rename_dsym_binary(dsym_path, binary_name: str) -> None:
    """Rename the DWARF file inside a dSYM to match the framework binary."""
    dwarf_dir = Path(dsym_path) / DWARF_SUBPATH
    if not dwarf_dir.is_dir():
        return
    entries = sorted(os.listdir(dwarf_dir))
    if not entries:
        return
    old_binary_name = entries[0]
    if old_binary_name != binary_name:
        os.rename(dwarf_dir / old_binary_name, dwarf_dir / binary_name)


def copy_dsym(extract_root, layout: FrameworkLayout) -> Optional[Path]:
    dsym_dir = Path(extract_root) / UPSTREAM_DSYM_SUBPATH
    if not dsym_dir.is_dir():
        log_warning(f"No dSYM found at {dsym_dir} - debug symbols will not be available")
        return None

    log_info("Found dSYM, copying to framework...")
    dsym_path = layout.dsym_path
    remove_path(dsym_path)
    shutil.copytree(dsym_dir, dsym_path, symlinks=True)
    rename_dsym_binary(dsym_path, layout.name)
    return dsym_path


def create_framework(
    library,
    framework_path,
    config: BuildConfig,
    settings: BuildSettings,
    extract_root,
) -> FrameworkLayout:
    """
    Create a framework bundle from an upstream library.

    Args:
        library: Library found by find_library()
        framework_path: Destination .framework path
        config: Configuration the library was built for
        settings: Run settings (version, identifiers)
        extract_root: Root of the extracted archive (include/ and lib/)

    Returns:
        FrameworkLayout: Layout of the created bundle

    Raises:
        ToolError: the install name could not be rewritten
    """
    log_info(f"Creating framework for {config.describe()}...")

    layout = framework_layout(framework_path, config.is_shallow)
    remove_path(layout.root)
    os.makedirs(layout.headers_dir)
    if layout.resources_dir is not None:
        os.makedirs(layout.resources_dir)

    shutil.copy(library, layout.binary_path)
    make_writable(layout.binary_path)
    set_install_name(layout.binary_path, layout.name)

    # headers have to be inside every framework, an XCFramework of
    # frameworks has no shared headers
    header_dir = Path(extract_root) / "include"
    if header_dir.is_dir():
        copy_headers(header_dir, layout.headers_dir)
    else:
        log_warning(f"Headers not found at {header_dir}")

    copy_dsym(extract_root, layout)
    create_version_symlinks(layout)
    write_info_plist(layout, build_info_plist(config, settings, layout.name))
    return layout
