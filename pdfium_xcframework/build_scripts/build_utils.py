#!/usr/bin/env python3
# -- coding: utf-8 --
#
# build_utils.py
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
Build utility functions shared by the framework pipeline.

This module wraps the Apple command line tools the pipeline relies on and
provides the file helpers used by several steps:
- Universal binary creation (lipo)
- Install name rewriting (install_name_tool)
- XCFramework assembly (xcodebuild -create-xcframework)
- Mach-O header inspection without external tools
- Header copying and symlink maintenance

Every tool invocation goes through exec_command so that a failing tool
surfaces as a ToolError carrying the tool's output.
"""

import os
import shutil
import stat
import struct
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from pdfium_xcframework.utils.cmd.cmd_util import exec_command, format_command
from pdfium_xcframework.utils.log.log_util import log_warning

from .build_errors import ToolError

# Files that must never end up in a framework's Headers directory
HEADER_EXCLUDE_PATTERNS = [
    "*.orig",
    "*.bak",
    "*~",
    ".DS_Store",
]


def get_header_ignore_patterns():
    """
    Get ignore patterns for shutil.copytree when copying include directories.

    Returns:
        A callable suitable for shutil.copytree's ignore parameter.
    """
    return shutil.ignore_patterns(*HEADER_EXCLUDE_PATTERNS)


def run_tool(command: Sequence) -> str:
    """
    Run a vendor tool and return its output.

    Raises:
        ToolError: the tool exited with a non-zero status
    """
    err_code, err_msg = exec_command(list(command))
    if err_code != 0:
        raise ToolError(format_command(command), err_code, err_msg)
    return err_msg


def lipo_libs(src_libs: Sequence, dst_lib) -> None:
    """
    Create a universal (fat) binary from architecture-specific binaries.

    Args:
        src_libs: Architecture-specific binary paths
        dst_lib: Destination path for the universal binary

    Example:
        lipo_libs(['arm64/PDFium', 'x64/PDFium'], 'fat/PDFium')
    """
    os.makedirs(os.path.dirname(str(dst_lib)) or ".", exist_ok=True)
    run_tool(["lipo", "-create", *src_libs, "-output", dst_lib])


def set_install_name(binary, framework_name: str) -> str:
    """
    Rewrite the install name of a framework binary to an @rpath path.

    Tries @rpath/<name>.framework/<name> first. If install_name_tool
    cannot fit that into the binary's header padding it falls back to
    @rpath/<name>.

    Args:
        binary: Framework binary path
        framework_name: Framework name without the .framework extension

    Returns:
        str: The install name that was written

    Raises:
        ToolError: both forms were rejected
    """
    make_writable(binary)
    full_id = f"@rpath/{framework_name}.framework/{framework_name}"
    err_code, _ = exec_command(["install_name_tool", "-id", full_id, binary])
    if err_code == 0:
        return full_id

    short_id = f"@rpath/{framework_name}"
    log_warning(f"Full path doesn't fit, using short path {short_id}")
    run_tool(["install_name_tool", "-id", short_id, binary])
    return short_id


def make_xcframework(frameworks: Sequence[Tuple[Path, Optional[Path]]], dst_framework) -> None:
    """
    Create an XCFramework from a list of frameworks.

    Args:
        frameworks: (framework path, dSYM path or None) pairs
        dst_framework: Destination .xcframework path

    Note:
        xcodebuild only accepts absolute -debug-symbols paths.
    """
    cmd = ["xcodebuild", "-create-xcframework"]
    for framework, dsym in frameworks:
        cmd += ["-framework", framework]
        if dsym is not None:
            cmd += ["-debug-symbols", os.path.abspath(dsym)]
    cmd += ["-output", dst_framework]
    run_tool(cmd)


def make_writable(path) -> None:
    mode = os.stat(path).st_mode
    os.chmod(path, mode | stat.S_IWUSR)


def remove_path(path) -> None:
    """Remove a file, symlink or directory tree if it exists."""
    path = Path(path)
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)


def force_symlink(target: str, link) -> None:
    """
    Create (or replace) a relative symlink `link -> target`.

    The target is stored as given so that bundles stay relocatable.
    """
    link = Path(link)
    if link.is_symlink() or link.is_file():
        link.unlink()
    elif link.is_dir():
        shutil.rmtree(link)
    os.symlink(target, link)


def copy_headers(src_dir, dst_dir) -> int:
    """
    Copy a header tree, skipping editor and backup artifacts.

    Returns:
        int: Number of files copied
    """
    shutil.copytree(src_dir, dst_dir, ignore=get_header_ignore_patterns(), dirs_exist_ok=True)
    return sum(len(files) for _, _, files in os.walk(dst_dir))


def find_files(root, suffixes: Sequence[str] = (), names: Sequence[str] = ()) -> List[Path]:
    """Files under root matching a suffix or an exact name, in sorted walk order."""
    matches = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        # a dSYM bundle is not a library
        dirnames[:] = [d for d in dirnames if not d.endswith(".dSYM")]
        for filename in sorted(filenames):
            if filename in names or any(filename.endswith(s) for s in suffixes):
                matches.append(Path(dirpath) / filename)
    return matches


# =============================================================================
# Mach-O inspection
# =============================================================================

# Mach-O CPU types
MACHO_CPU_MAP = {
    0x00000007: "i386",
    0x01000007: "x86_64",
    0x0000000C: "arm",
    0x0100000C: "arm64",
    0x0200000C: "arm64_32",
}

MACHO_THIN_MAGICS = (0xFEEDFACE, 0xFEEDFACF)
MACHO_THIN_SWAPPED_MAGICS = (0xCEFAEDFE, 0xCFFAEDFE)
MACHO_FAT_MAGICS = (0xCAFEBABE, 0xCAFEBABF)


def is_macho(data: bytes) -> bool:
    """True for thin or universal Mach-O data."""
    if len(data) < 8:
        return False
    magic = struct.unpack('>I', data[:4])[0]
    return magic in MACHO_THIN_MAGICS + MACHO_THIN_SWAPPED_MAGICS + MACHO_FAT_MAGICS


def parse_macho_archs(data: bytes) -> List[str]:
    """
    Parse a Mach-O header to get its architecture(s).

    Args:
        data: Leading bytes of the file (the header is enough)

    Returns:
        list: Architecture names, empty when data is not Mach-O
    """
    if not is_macho(data):
        return []

    magic = struct.unpack('>I', data[:4])[0]

    # Universal binary, big endian header
    if magic in MACHO_FAT_MAGICS:
        nfat = struct.unpack('>I', data[4:8])[0]
        # fat_arch is 20 bytes, fat_arch_64 is 32
        entry_size = 32 if magic == 0xCAFEBABF else 20
        archs = []
        for i in range(nfat):
            offset = 8 + i * entry_size
            if offset + 4 > len(data):
                break
            cputype = struct.unpack('>I', data[offset:offset + 4])[0]
            arch = MACHO_CPU_MAP.get(cputype, f"unknown(0x{cputype:X})")
            if arch not in archs:
                archs.append(arch)
        return archs

    endian = '>' if magic in MACHO_THIN_MAGICS else '<'
    cputype = struct.unpack(f'{endian}I', data[4:8])[0]
    return [MACHO_CPU_MAP.get(cputype, f"unknown(0x{cputype:X})")]


def read_macho_archs(path) -> List[str]:
    """Architectures of a binary on disk, empty when it is not Mach-O."""
    with open(path, "rb") as f:
        # enough for a fat header with a handful of slices
        data = f.read(4096)
    return parse_macho_archs(data)
