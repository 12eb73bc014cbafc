#!/usr/bin/env python3
"""
Tests for framework bundle assembly and the build utilities it uses.

Run with: python3 -m pytest test_framework.py
"""

import os
import plistlib
import struct
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from pdfium_xcframework.build_scripts.build_config import (
    IOS_CATALYST_X64,
    IOS_DEVICE_ARM64,
    MAC_ARM64,
    BuildSettings,
)
from pdfium_xcframework.build_scripts.build_errors import AssemblyError, ToolError
from pdfium_xcframework.build_scripts.build_utils import (
    make_xcframework,
    parse_macho_archs,
    read_macho_archs,
    set_install_name,
)
from pdfium_xcframework.build_scripts.framework import (
    create_framework,
    find_library,
    short_version,
)
from pdfium_xcframework.build_scripts.test_support import (
    FakeTools,
    fat_macho,
    make_extracted_archive,
    thin_macho,
)

EXEC_COMMAND = "pdfium_xcframework.build_scripts.build_utils.exec_command"


class TestMachO(unittest.TestCase):
    """Test Mach-O header parsing."""

    def test_thin_binary(self):
        self.assertEqual(parse_macho_archs(thin_macho("arm64")), ["arm64"])
        self.assertEqual(parse_macho_archs(thin_macho("x86_64")), ["x86_64"])

    def test_big_endian_thin_binary(self):
        data = struct.pack('>II', 0xFEEDFACF, 0x01000007) + b"\0" * 24
        self.assertEqual(parse_macho_archs(data), ["x86_64"])

    def test_universal_binary(self):
        self.assertEqual(parse_macho_archs(fat_macho(["arm64", "x86_64"])), ["arm64", "x86_64"])

    def test_not_macho(self):
        self.assertEqual(parse_macho_archs(b"!<arch>\n"), [])
        self.assertEqual(parse_macho_archs(b""), [])
        self.assertEqual(parse_macho_archs(b"\x7fELF\x02\x01\x01\x00"), [])


class TestInstallName(unittest.TestCase):
    """Test the two-tier install name rewrite."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.binary = Path(self.tmpdir.name) / "PDFium"
        self.binary.write_bytes(thin_macho("arm64"))

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_full_install_name(self):
        tools = FakeTools()
        with patch(EXEC_COMMAND, tools):
            self.assertEqual(set_install_name(self.binary, "PDFium"), "@rpath/PDFium.framework/PDFium")
        self.assertEqual(len(tools.calls), 1)

    def test_falls_back_to_short_install_name(self):
        tools = FakeTools(full_install_name_fits=False)
        with patch(EXEC_COMMAND, tools):
            self.assertEqual(set_install_name(self.binary, "PDFium"), "@rpath/PDFium")
        self.assertEqual(
            [c[2] for c in tools.commands("install_name_tool")],
            ["@rpath/PDFium.framework/PDFium", "@rpath/PDFium"],
        )

    def test_both_install_names_rejected(self):
        tools = FakeTools(full_install_name_fits=False, short_install_name_fits=False)
        with patch(EXEC_COMMAND, tools):
            with self.assertRaises(ToolError) as cm:
                set_install_name(self.binary, "PDFium")
        self.assertNotEqual(cm.exception.returncode, 0)
        self.assertIn("install_name_tool", cm.exception.command)

    def test_debug_symbols_are_passed_absolute(self):
        tools = FakeTools()
        framework = Path(self.tmpdir.name) / "PDFium.framework"
        framework.mkdir()
        with patch(EXEC_COMMAND, tools):
            make_xcframework([(framework, Path("relative/PDFium.framework.dSYM"))],
                             Path(self.tmpdir.name) / "PDFium.xcframework")
        command = tools.commands("xcodebuild")[0]
        dsym = command[command.index("-debug-symbols") + 1]
        self.assertTrue(os.path.isabs(dsym))


class TestFindLibrary(unittest.TestCase):
    """Test library discovery in an extracted archive."""

    def test_prefers_dynamic_library(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = make_extracted_archive(tmpdir, "arm64")
            (root / "lib" / "libpdfium.a").write_bytes(b"!<arch>\n")
            self.assertEqual(find_library(root), root / "lib" / "libpdfium.dylib")

    def test_static_library_fallback(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            lib_dir = Path(tmpdir, "lib")
            lib_dir.mkdir()
            (lib_dir / "libpdfium.a").write_bytes(b"!<arch>\n")
            self.assertEqual(find_library(tmpdir), lib_dir / "libpdfium.a")

    def test_dsym_is_not_a_library(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = make_extracted_archive(tmpdir, "arm64")
            os.remove(root / "lib" / "libpdfium.dylib")
            with self.assertRaises(AssemblyError):
                find_library(root)

    def test_no_library(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(AssemblyError):
                find_library(tmpdir)


class TestCreateFramework(unittest.TestCase):
    """Test framework bundle creation."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name)
        self.settings = BuildSettings.load(
            version="144.0.7506.0",
            release_tag="chromium/7506",
            environ={"WORK_DIR": str(self.root / "build")},
        )
        self.tools = FakeTools()
        self.patcher = patch(EXEC_COMMAND, self.tools)
        self.patcher.start()

    def tearDown(self):
        self.patcher.stop()
        self.tmpdir.cleanup()

    def build(self, config, with_dsym=True):
        extract_dir = make_extracted_archive(self.settings.extract_dir(config), config.arch, with_dsym)
        library = find_library(extract_dir)
        return create_framework(library, self.settings.framework_path(config), config, self.settings, extract_dir)

    def read_plist(self, path):
        with open(path, "rb") as f:
            return plistlib.load(f)

    def test_shallow_framework(self):
        """iOS device frameworks keep everything at the bundle root."""
        layout = self.build(IOS_DEVICE_ARM64)
        root = layout.root
        self.assertEqual(root.name, "PDFium.framework")
        self.assertTrue((root / "PDFium").is_file())
        self.assertFalse((root / "PDFium").is_symlink())
        self.assertFalse((root / "Versions").exists())
        self.assertTrue((root / "Headers" / "fpdfview.h").is_file())
        self.assertTrue((root / "Headers" / "cpp" / "fpdf_scopers.h").is_file())

        info = self.read_plist(root / "Info.plist")
        self.assertEqual(info["CFBundleExecutable"], "PDFium")
        self.assertEqual(info["CFBundleIdentifier"], "com.pdfium.PDFium")
        self.assertEqual(info["CFBundlePackageType"], "FMWK")
        self.assertEqual(info["CFBundleShortVersionString"], "144.0.7506")
        self.assertEqual(info["CFBundleVersion"], "144.0.7506.0")
        self.assertEqual(info["CFBundleSupportedPlatforms"], ["iPhoneOS"])
        self.assertEqual(info["MinimumOSVersion"], "11.0")

    def test_deep_framework(self):
        """macOS frameworks use Versions/A with root aliases."""
        layout = self.build(MAC_ARM64)
        root = layout.root
        self.assertEqual(os.readlink(root / "Versions" / "Current"), "A")
        self.assertEqual(os.readlink(root / "PDFium"), "Versions/Current/PDFium")
        self.assertEqual(os.readlink(root / "Headers"), "Versions/Current/Headers")
        self.assertEqual(os.readlink(root / "Resources"), "Versions/Current/Resources")
        self.assertTrue((root / "Versions" / "A" / "PDFium").is_file())
        self.assertTrue((root / "Headers" / "fpdfview.h").is_file())

        info = self.read_plist(root / "Resources" / "Info.plist")
        self.assertEqual(info["CFBundleExecutable"], "PDFium")
        self.assertEqual(info["MinimumOSVersion"], "10.13")
        self.assertEqual(read_macho_archs(root / "PDFium"), ["arm64"])

    def test_catalyst_framework(self):
        layout = self.build(IOS_CATALYST_X64)
        info = self.read_plist(layout.info_plist_path)
        self.assertEqual(info["CFBundleSupportedPlatforms"], ["MacOSX"])
        self.assertEqual(info["MinimumOSVersion"], "11.0")
        self.assertEqual(read_macho_archs(layout.binary_path), ["x86_64"])

    def test_binary_is_named_after_framework(self):
        layout = self.build(MAC_ARM64)
        self.assertFalse((layout.content_dir / "libpdfium.dylib").exists())
        ids = [c[2] for c in self.tools.commands("install_name_tool")]
        self.assertEqual(ids, ["@rpath/PDFium.framework/PDFium"])

    def test_dsym_binary_renamed(self):
        layout = self.build(MAC_ARM64)
        dwarf_dir = layout.dsym_path / "Contents" / "Resources" / "DWARF"
        self.assertEqual(layout.dsym_path.name, "PDFium.framework.dSYM")
        self.assertEqual(os.listdir(dwarf_dir), ["PDFium"])

    def test_missing_dsym_is_not_an_error(self):
        layout = self.build(IOS_DEVICE_ARM64, with_dsym=False)
        self.assertFalse(layout.dsym_path.exists())
        self.assertTrue(layout.binary_path.is_file())

    def test_rebuild_replaces_framework(self):
        layout = self.build(IOS_DEVICE_ARM64)
        stale = layout.root / "stale.txt"
        stale.write_text("old")
        self.build(IOS_DEVICE_ARM64)
        self.assertFalse(stale.exists())

    def test_short_version(self):
        self.assertEqual(short_version("144.0.7506.0"), "144.0.7506")
        self.assertEqual(short_version("1.2"), "1.2")


if __name__ == "__main__":
    unittest.main()
