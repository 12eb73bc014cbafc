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

import argparse
import sys
from pathlib import Path

from pdfium_xcframework.build_scripts.build_config import BuildSettings, load_project_config
from pdfium_xcframework.build_scripts.build_errors import BuildError
from pdfium_xcframework.build_scripts.distribute import VersionRecord, calculate_checksum
from pdfium_xcframework.utils.apple import ApplePackageConfig, PodspecGenerator, SPMGenerator
from pdfium_xcframework.utils.context.command import CliCommand
from pdfium_xcframework.utils.context.context import CliContext
from pdfium_xcframework.utils.context.namespace import CliNameSpace
from pdfium_xcframework.utils.log.log_util import log_error, log_info, log_warning


class Generate(CliCommand):
    def description(self) -> str:
        return """
        Generate Package.swift and PDFium.podspec for a built XCFramework.

        Run this after `pdfium-xcframework build`. The zip named in the
        build's .version_info is checksummed and both manifests point at
        its GitHub release download URL.

        Environment:
            VERSION        Release version when no .version_info exists
            GITHUB_REPO    Repository hosting the release (OWNER/REPO)
            OUTPUT_DIR     Build output directory (default: ./output)

        Examples:
            pdfium-xcframework generate --github-repo me/pdfium-spm
            pdfium-xcframework generate --output-dir ./output
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="pdfium-xcframework generate",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "--output-dir",
            type=str,
            default=None,
            help="Build output directory holding the zip and .version_info",
        )
        parser.add_argument(
            "--github-repo",
            type=str,
            default=None,
            help="GitHub repository hosting the release, OWNER/REPO",
        )
        parser.add_argument(
            "--dest",
            type=str,
            default=None,
            help="Directory to write Package.swift and the podspec into (default: project directory)",
        )
        if argv is None:
            argv = sys.argv[2:]
        return parser.parse_args(argv, namespace=CliNameSpace())

    def exec(self, context: CliContext, args: CliNameSpace):
        try:
            project_config = load_project_config(context.project_dir)
        except BuildError as e:
            log_error(str(e))
            sys.exit(1)

        settings = BuildSettings.load(environ=context.environ, project_config=project_config)
        output_dir = Path(args.output_dir) if args.output_dir else settings.output_dir

        config = ApplePackageConfig.load(
            project_config,
            context.environ,
            github_repo=args.github_repo,
        )

        record = VersionRecord.read(output_dir)
        if record is not None:
            log_info("Reading version info from build output...")
            log_info(f"Using ZIP_NAME from build: {record.zip_name}")
            if record.version:
                config.version = record.version
            if record.zip_name:
                config.zip_name = record.zip_name
        else:
            log_warning("No .version_info found, using default zip name")

        zip_path = output_dir / config.zip_name
        if not zip_path.is_file():
            log_error(f"XCFramework zip not found at: {zip_path}")
            log_error("Please run `pdfium-xcframework build` first to create the XCFramework")
            sys.exit(1)

        log_info("Calculating checksum...")
        config.checksum = calculate_checksum(zip_path)
        log_info(f"Checksum: {config.checksum}")

        if config.is_placeholder_repo:
            log_warning(f"GITHUB_REPO is not set. Using placeholder '{config.github_repo}'")
            log_warning("Set it with: export GITHUB_REPO=username/repository")
        log_info(f"Release URL: {config.release_url}")

        valid, errors = config.validate()
        if not valid:
            for error in errors:
                log_error(f"Invalid package configuration: {error}")
            sys.exit(1)

        dest = Path(args.dest) if args.dest else Path(context.project_dir)

        log_info("Generating Package.swift...")
        package_swift = SPMGenerator(config).generate_package_swift(dest)
        log_info(f"✓ {package_swift.name} generated")

        log_info(f"Generating {config.name}.podspec...")
        podspec = PodspecGenerator(config).generate_podspec(dest)
        log_info(f"✓ {podspec.name} generated")

        self.print_next_steps(config, zip_path, package_swift, podspec)

    def print_next_steps(self, config: ApplePackageConfig, zip_path: Path, package_swift: Path, podspec: Path):
        log_info("Package files generated successfully!")
        log_info("")
        log_info("Next steps:")
        log_info(f"1. Create a GitHub release with tag: v{config.version}")
        log_info(f"2. Upload {zip_path} to the release")
        log_info("3. Commit and push the generated files:")
        log_info(f"   git add {package_swift.name} {podspec.name}")
        log_info(f"   git commit -m 'Update {package_swift.name} and podspec for v{config.version}'")
        log_info("   git push")
