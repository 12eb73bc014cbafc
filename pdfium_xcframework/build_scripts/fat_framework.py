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
Universal framework creation.

xcodebuild accepts a single framework per platform identity, so the arm64
and x86_64 frameworks of the simulator, Mac Catalyst and macOS are merged
with lipo before the XCFramework is assembled.
"""

import shutil
from pathlib import Path
from typing import List, Optional

from pdfium_xcframework.utils.log.log_util import log_error, log_info, log_warning

from .build_config import FAT_CONFIGS, SINGLE_CONFIGS, BuildSettings, FatConfig
from .build_errors import ToolError
from .build_utils import lipo_libs, remove_path, set_install_name
from .framework import (
    DWARF_SUBPATH,
    create_version_symlinks,
    framework_layout,
    update_info_plist_executable,
)


def merge_dsyms(first_dsym: Path, second_dsym: Path, dst_dsym: Path, binary_name: str) -> Optional[Path]:
    """
    Merge two single-architecture dSYM bundles into one.

    The first bundle is the base, its DWARF binary is replaced by the
    lipo of both. Returns None when the merge is not possible.
    """
    first_dwarf = first_dsym / DWARF_SUBPATH / binary_name
    second_dwarf = second_dsym / DWARF_SUBPATH / binary_name
    if not first_dwarf.is_file() or not second_dwarf.is_file():
        log_warning(f"DWARF binary missing, skipping dSYM for {dst_dsym.name}")
        return None

    remove_path(dst_dsym)
    shutil.copytree(first_dsym, dst_dsym, symlinks=True)
    try:
        lipo_libs([first_dwarf, second_dwarf], dst_dsym / DWARF_SUBPATH / binary_name)
    except ToolError as e:
        log_warning(f"Failed to merge dSYM {dst_dsym.name}: {e}")
        remove_path(dst_dsym)
        return None
    return dst_dsym


def create_fat_framework(fat_config: FatConfig, settings: BuildSettings) -> Optional[Path]:
    """
    Merge the two frameworks of a FatConfig into one universal framework.

    Returns:
        Path of the universal framework, or None when a source framework
        is missing

    Raises:
        ToolError: lipo or install_name_tool failed
    """
    first = framework_layout(settings.framework_path(fat_config.first), fat_config.is_shallow)
    second = framework_layout(settings.framework_path(fat_config.second), fat_config.is_shallow)
    fat_path = settings.fat_framework_path(fat_config)

    if not first.root.is_dir() or not second.root.is_dir():
        log_error(f"Missing frameworks for {fat_config.output_name}")
        return None

    log_info(f"Creating fat framework: {fat_config.output_name}/{fat_path.name}")

    remove_path(fat_path)
    fat_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copytree(first.root, fat_path, symlinks=True)
    fat = framework_layout(fat_path, fat_config.is_shallow)

    # copytree kept the first framework's binary, lipo overwrites it
    remove_path(fat.binary_path)
    lipo_libs([first.binary_path, second.binary_path], fat.binary_path)
    set_install_name(fat.binary_path, fat.name)
    create_version_symlinks(fat)
    update_info_plist_executable(fat)

    if first.dsym_path.is_dir() and second.dsym_path.is_dir():
        merge_dsyms(first.dsym_path, second.dsym_path, fat.dsym_path, fat.name)
    else:
        remove_path(fat.dsym_path)

    return fat_path


def create_fat_frameworks(settings: BuildSettings) -> List[Path]:
    """
    Create every universal framework and collect the XCFramework inputs.

    Returns:
        list: Universal frameworks that were created, followed by the
        single-architecture frameworks
    """
    log_info("Creating fat frameworks for multi-architecture platforms...")
    framework_paths = []
    for fat_config in FAT_CONFIGS:
        fat_path = create_fat_framework(fat_config, settings)
        if fat_path is not None:
            framework_paths.append(fat_path)

    for config in SINGLE_CONFIGS:
        framework_paths.append(settings.framework_path(config))
    return framework_paths
