#!/usr/bin/env python3
"""
Tests for XCFramework assembly and verification.

Run with: python3 -m pytest test_xcframework.py
"""

import os
import plistlib
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from pdfium_xcframework.build_scripts.build_config import BUILD_CONFIGS, BuildSettings
from pdfium_xcframework.build_scripts.build_errors import ToolError
from pdfium_xcframework.build_scripts.fat_framework import create_fat_frameworks
from pdfium_xcframework.build_scripts.framework import create_framework, find_library
from pdfium_xcframework.build_scripts.test_support import FakeTools, make_extracted_archive
from pdfium_xcframework.build_scripts.xcframework import create_xcframework, verify_xcframework

EXEC_COMMAND = "pdfium_xcframework.build_scripts.build_utils.exec_command"


class TestCreateXCFramework(unittest.TestCase):
    """Test assembling the XCFramework from the merged frameworks."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        root = Path(self.tmpdir.name)
        self.settings = BuildSettings.load(
            version="144.0.7506.0",
            release_tag="chromium/7506",
            environ={"WORK_DIR": str(root / "build"), "OUTPUT_DIR": str(root / "output")},
        )
        self.tools = FakeTools()
        self.patcher = patch(EXEC_COMMAND, self.tools)
        self.patcher.start()

        for config in BUILD_CONFIGS:
            extract_dir = make_extracted_archive(self.settings.extract_dir(config), config.arch)
            create_framework(
                find_library(extract_dir),
                self.settings.framework_path(config),
                config,
                self.settings,
                extract_dir,
            )
        self.frameworks = create_fat_frameworks(self.settings)

    def tearDown(self):
        self.patcher.stop()
        self.tmpdir.cleanup()

    def test_create_and_verify(self):
        path = create_xcframework(self.frameworks, self.settings.xcframework_path)
        self.assertTrue((path / "Info.plist").is_file())

        report = verify_xcframework(path)
        self.assertTrue(report.passed, report)
        self.assertEqual(report.framework_count, 4)
        archs = sorted(tuple(sorted(f.archs)) for f in report.frameworks)
        self.assertEqual(archs, [("arm64",), ("arm64", "x86_64"), ("arm64", "x86_64"), ("arm64", "x86_64")])
        for check in report.frameworks:
            self.assertEqual(check.header_count, 3)

    def test_debug_symbols_attached(self):
        create_xcframework(self.frameworks, self.settings.xcframework_path)
        command = self.tools.commands("xcodebuild")[0]
        dsyms = [command[i + 1] for i, arg in enumerate(command) if arg == "-debug-symbols"]
        self.assertEqual(len(dsyms), 4)
        for dsym in dsyms:
            self.assertTrue(os.path.isabs(dsym))
            self.assertTrue(dsym.endswith("PDFium.framework.dSYM"))

    def test_rebuild_removes_previous_xcframework(self):
        output = self.settings.xcframework_path
        output.mkdir(parents=True)
        (output / "stale-slice").mkdir()
        create_xcframework(self.frameworks, output)
        self.assertFalse((output / "stale-slice").exists())
        self.assertTrue((output / "Info.plist").is_file())

    def test_xcodebuild_failure(self):
        self.tools.fail_tools.add("xcodebuild")
        with self.assertRaises(ToolError):
            create_xcframework(self.frameworks, self.settings.xcframework_path)


class TestVerifyXCFramework(unittest.TestCase):
    """Test that verification reports findings without raising."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = Path(self.tmpdir.name) / "PDFium.xcframework"

    def tearDown(self):
        self.tmpdir.cleanup()

    def make_slice(self, identifier, binary_data):
        framework = self.path / identifier / "PDFium.framework"
        (framework / "Headers").mkdir(parents=True)
        (framework / "Headers" / "fpdfview.h").write_text("//\n")
        (framework / "PDFium").write_bytes(binary_data)
        with open(framework / "Info.plist", "wb") as f:
            plistlib.dump({"CFBundleExecutable": "PDFium"}, f)
        return framework

    def write_container_plist(self):
        self.path.mkdir(parents=True, exist_ok=True)
        with open(self.path / "Info.plist", "wb") as f:
            plistlib.dump({"AvailableLibraries": []}, f)

    def test_missing_xcframework(self):
        report = verify_xcframework(self.path)
        self.assertFalse(report.passed)
        self.assertEqual(report.framework_count, 0)

    def test_missing_container_plist(self):
        self.path.mkdir()
        report = verify_xcframework(self.path)
        self.assertEqual(report.error_count, 1)

    def test_corrupted_binary(self):
        from pdfium_xcframework.build_scripts.test_support import thin_macho

        self.make_slice("ios-arm64", thin_macho("arm64"))
        self.make_slice("ios-arm64_x86_64-simulator", b"this is not a binary")
        self.write_container_plist()

        report = verify_xcframework(self.path)
        self.assertEqual(report.framework_count, 2)
        self.assertEqual(report.error_count, 1)
        self.assertFalse(report.passed)

    def test_missing_binary_and_plist(self):
        framework = self.make_slice("macos-arm64_x86_64", b"")
        os.remove(framework / "PDFium")
        os.remove(framework / "Info.plist")
        self.write_container_plist()

        report = verify_xcframework(self.path)
        # a missing binary stops the checks of that framework
        self.assertEqual(report.error_count, 1)
        self.assertIn("Binary not found", report.frameworks[0].errors[0])


if __name__ == "__main__":
    unittest.main()
