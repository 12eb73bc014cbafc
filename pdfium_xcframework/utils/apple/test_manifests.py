#!/usr/bin/env python3
"""
Tests for Package.swift and podspec generation.

Run with: python3 -m pytest test_manifests.py
"""

import tempfile
import unittest
from pathlib import Path

from pdfium_xcframework.utils.apple import (
    ApplePackageConfig,
    PackagePlatform,
    PodspecGenerator,
    SPMGenerator,
)
from pdfium_xcframework.utils.apple.spm import spm_version_literal

CHECKSUM = "a" * 64
ZIP_NAME = "PDFium-chromium-7506-20250209-143052.xcframework.zip"
RELEASE_URL = f"https://github.com/me/pdfium-spm/releases/download/v144.0.7506.0/{ZIP_NAME}"


def make_config(**kwargs):
    config = ApplePackageConfig.load(
        {},
        {},
        github_repo="me/pdfium-spm",
        version="144.0.7506.0",
        zip_name=ZIP_NAME,
        checksum=CHECKSUM,
    )
    for key, value in kwargs.items():
        setattr(config, key, value)
    return config


class TestApplePackageConfig(unittest.TestCase):
    """Test manifest configuration loading."""

    def test_defaults(self):
        config = ApplePackageConfig.load({}, {})
        self.assertEqual(config.github_repo, "OWNER/REPO")
        self.assertTrue(config.is_placeholder_repo)
        self.assertEqual(config.zip_name, "PDFium.xcframework.zip")
        self.assertEqual(config.min_version("ios"), "13.0")
        self.assertEqual(config.min_version("macos"), "10.15")
        self.assertIsNone(config.min_version("tvos"))

    def test_release_url(self):
        self.assertEqual(make_config().release_url, RELEASE_URL)

    def test_environment_overrides_project_config(self):
        project_config = {"publish": {"github_repo": "toml/repo"}}
        config = ApplePackageConfig.load(project_config, {"GITHUB_REPO": "env/repo", "VERSION": "1.2.3"})
        self.assertEqual(config.github_repo, "env/repo")
        self.assertEqual(config.version, "1.2.3")

    def test_argument_overrides_environment(self):
        config = ApplePackageConfig.load({}, {"GITHUB_REPO": "env/repo"}, github_repo="cli/repo")
        self.assertEqual(config.github_repo, "cli/repo")
        self.assertFalse(config.is_placeholder_repo)

    def test_project_config(self):
        project_config = {
            "framework": {"name": "PDFiumKit"},
            "publish": {"github_repo": "${OWNER}/pdfium", "min_ios_version": "14.0"},
        }
        config = ApplePackageConfig.load(project_config, {"OWNER": "me"})
        self.assertEqual(config.github_repo, "me/pdfium")
        self.assertEqual(config.zip_name, "PDFiumKit.xcframework.zip")
        self.assertEqual(config.min_version("ios"), "14.0")

    def test_validate(self):
        self.assertEqual(make_config().validate(), (True, []))
        valid, errors = make_config(github_repo="nope", version="").validate()
        self.assertFalse(valid)
        self.assertEqual(len(errors), 2)


class TestSPMGenerator(unittest.TestCase):
    """Test Package.swift rendering."""

    def test_version_literal(self):
        self.assertEqual(spm_version_literal("13.0"), ".v13")
        self.assertEqual(spm_version_literal("10.15"), ".v10_15")
        self.assertEqual(spm_version_literal("10.15.4"), ".v10_15_4")

    def test_render(self):
        content = SPMGenerator(make_config()).render()
        self.assertTrue(content.startswith("// swift-tools-version:5.9\nimport PackageDescription\n"))
        self.assertIn("        .iOS(.v13),\n        .macOS(.v10_15),\n        .macCatalyst(.v13)\n", content)
        self.assertIn('    name: "PDFium",', content)
        self.assertIn('            targets: ["PDFium"]', content)
        self.assertIn(f'            url: "{RELEASE_URL}",', content)
        self.assertIn(f'            checksum: "{CHECKSUM}"', content)

    def test_write(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            generator = SPMGenerator(make_config())
            path = generator.generate_package_swift(Path(tmpdir) / "pkg")
            self.assertEqual(path.name, "Package.swift")
            self.assertEqual(path.read_text(), generator.render())


class TestPodspecGenerator(unittest.TestCase):
    """Test podspec rendering."""

    def test_render(self):
        content = PodspecGenerator(make_config()).render()
        self.assertIn("  s.name             = 'PDFium'\n", content)
        self.assertIn("  s.version          = '144.0.7506.0'\n", content)
        self.assertIn("  s.homepage         = 'https://github.com/me/pdfium-spm'\n", content)
        self.assertIn("{ :type => 'BSD-3-Clause', :file => 'LICENSE' }", content)
        self.assertIn(f"    :http => '{RELEASE_URL}',\n    :sha256 => '{CHECKSUM}'\n", content)
        self.assertIn("  s.ios.deployment_target = '13.0'\n", content)
        self.assertIn("  s.osx.deployment_target = '10.15'\n", content)
        self.assertNotIn("maccatalyst", content)
        self.assertIn("  s.vendored_frameworks = 'PDFium.xcframework'\n", content)
        self.assertTrue(content.endswith("  s.requires_arc = true\nend\n"))

    def test_escaping(self):
        content = PodspecGenerator(make_config(summary="PDFium's XCFramework")).render()
        self.assertIn("s.summary          = 'PDFium\\'s XCFramework'", content)

    def test_platforms(self):
        config = make_config(platforms=[PackagePlatform("ios", "15.0")])
        content = PodspecGenerator(config).render()
        self.assertIn("s.ios.deployment_target = '15.0'", content)
        self.assertNotIn("s.osx.deployment_target", content)

    def test_write(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = PodspecGenerator(make_config()).generate_podspec(tmpdir)
            self.assertEqual(path, Path(tmpdir) / "PDFium.podspec")


if __name__ == "__main__":
    unittest.main()
