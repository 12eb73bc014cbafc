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
XCFramework assembly and structural verification.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from pdfium_xcframework.utils.log.log_util import log_error, log_info, log_warning

from .build_utils import make_xcframework, read_macho_archs, remove_path


def create_xcframework(frameworks: Sequence[Path], output_path) -> Path:
    """
    Assemble frameworks into an XCFramework.

    Any existing XCFramework at output_path is removed first, so a rebuild
    never mixes in stale slices. A framework's sibling .dSYM, when present,
    is attached as its debug symbols.

    Raises:
        ToolError: xcodebuild failed
    """
    log_info("Creating XCFramework...")
    output_path = Path(output_path)
    inputs = []
    for framework in frameworks:
        framework = Path(framework)
        dsym_path = framework.with_name(framework.name + ".dSYM")
        if dsym_path.is_dir():
            log_info(f"Including dSYM for {framework.name}")
            inputs.append((framework, dsym_path))
        else:
            inputs.append((framework, None))

    remove_path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    make_xcframework(inputs, output_path)
    log_info(f"✅ XCFramework created successfully at {output_path}")
    return output_path


@dataclass
class FrameworkCheck:
    """Findings for one framework inside an XCFramework."""
    path: Path
    archs: List[str] = field(default_factory=list)
    header_count: Optional[int] = None
    errors: List[str] = field(default_factory=list)


@dataclass
class VerifyReport:
    """Result of verify_xcframework()."""
    path: Path
    framework_count: int = 0
    frameworks: List[FrameworkCheck] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors) + sum(len(f.errors) for f in self.frameworks)

    @property
    def passed(self) -> bool:
        return self.error_count == 0


def _resolve(path: Path) -> Path:
    if path.is_symlink():
        target = Path(os.readlink(path))
        if not target.is_absolute():
            target = path.parent / target
        return target
    return path


def verify_framework(framework: Path) -> FrameworkCheck:
    check = FrameworkCheck(framework)
    log_info(f"Verifying framework: {framework.name}")

    binary_name = framework.name[:-len(".framework")]
    binary_path = framework / binary_name
    if not binary_path.is_file() and not binary_path.is_symlink():
        check.errors.append(f"Binary not found: {binary_name}")
        log_error(f"  ✗ Binary not found: {binary_name}")
        return check

    binary_path = _resolve(binary_path)
    archs = read_macho_archs(binary_path) if binary_path.is_file() else []
    if archs:
        check.archs = archs
        log_info("  ✓ Valid Mach-O binary")
        log_info(f"  ✓ Architectures: {' '.join(archs)}")
    else:
        check.errors.append(f"Invalid binary format: {binary_path}")
        log_error("  ✗ Invalid binary format")

    headers_path = _resolve(framework / "Headers")
    if headers_path.is_dir():
        check.header_count = len(list(headers_path.rglob("*.h")))
        log_info(f"  ✓ Headers: {check.header_count} files")
    else:
        log_warning("  ⚠ No headers directory found")

    if (framework / "Resources" / "Info.plist").is_file() or (framework / "Info.plist").is_file():
        log_info("  ✓ Info.plist found")
    else:
        check.errors.append(f"Info.plist missing: {framework}")
        log_error("  ✗ Info.plist missing")

    return check


def verify_xcframework(xcframework_path) -> VerifyReport:
    """
    Check the structure of an XCFramework.

    Never raises for findings; they are logged and counted in the report.
    """
    xcframework_path = Path(xcframework_path)
    report = VerifyReport(xcframework_path)
    log_info("Verifying XCFramework integrity...")

    if not xcframework_path.is_dir():
        report.errors.append(f"XCFramework not found at: {xcframework_path}")
        log_error(report.errors[-1])
        return report

    if not (xcframework_path / "Info.plist").is_file():
        report.errors.append("Missing Info.plist in XCFramework")
        log_error(report.errors[-1])
        return report

    log_info("Checking XCFramework structure...")
    frameworks = sorted(p for p in xcframework_path.glob("*/*.framework") if p.is_dir())
    report.framework_count = len(frameworks)
    log_info(f"Found {report.framework_count} framework(s) in XCFramework")

    for framework in frameworks:
        report.frameworks.append(verify_framework(framework))

    if report.passed:
        log_info("✅ XCFramework verification passed!")
    else:
        log_error(f"❌ XCFramework verification failed with {report.error_count} error(s)")
    return report
