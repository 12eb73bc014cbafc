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
import dataclasses
import sys

from pdfium_xcframework.build_scripts.build_config import (
    BUILD_CONFIGS,
    BuildSettings,
    load_project_config,
    resolve_version,
)
from pdfium_xcframework.build_scripts.build_errors import BuildError
from pdfium_xcframework.build_scripts.distribute import cleanup, package_xcframework
from pdfium_xcframework.build_scripts.fat_framework import create_fat_frameworks
from pdfium_xcframework.build_scripts.fetch import ArchiveFetcher, fetch_latest_release_tag
from pdfium_xcframework.build_scripts.orchestrator import build_all_frameworks
from pdfium_xcframework.build_scripts.xcframework import create_xcframework, verify_xcframework
from pdfium_xcframework.utils.context.command import CliCommand
from pdfium_xcframework.utils.context.context import CliContext
from pdfium_xcframework.utils.context.namespace import CliNameSpace
from pdfium_xcframework.utils.log.log_util import log_error, log_info, log_warning


class Build(CliCommand):
    def description(self) -> str:
        return """
        Build PDFium.xcframework from pre-built pdfium-binaries releases.

        Downloads the iOS, simulator, Mac Catalyst and macOS archives in
        parallel, wraps each library in a framework, merges architectures
        per platform and assembles the XCFramework with its debug symbols.
        The result is zipped into the output directory together with its
        SHA-256 checksum and a .version_info record.

        Environment:
            VERSION        Full version (default: 144.0.<chromium>.0)
            RELEASE_TAG    Upstream release tag (default: chromium/7506)
            WORK_DIR       Working directory (default: ./build)
            OUTPUT_DIR     Output directory (default: ./output)
            BUILD_ID       Build id used in the zip name (default: UTC timestamp)

        Examples:
            pdfium-xcframework build 7506      # Build from chromium/7506
            pdfium-xcframework build latest    # Build the newest upstream release
            VERSION=144.0.7506.0 pdfium-xcframework build
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="pdfium-xcframework build",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "chromium_version",
            metavar="CHROMIUM_VERSION|latest",
            nargs='?',
            default=None,
            type=str,
            help="Chromium build number such as 7506, or 'latest'",
        )
        self.parser = parser
        if argv is None:
            argv = sys.argv[2:]
        return parser.parse_args(argv, namespace=CliNameSpace())

    def print_usage(self):
        parser = getattr(self, "parser", None)
        if parser is None:
            self.cli([])
            parser = self.parser
        parser.print_help(sys.stderr)

    def resolve_settings(self, context: CliContext, args: CliNameSpace):
        """
        Build settings for this run, None when no version was selected.
        """
        project_config = load_project_config(context.project_dir)
        settings = BuildSettings.load(environ=context.environ, project_config=project_config)
        resolved = resolve_version(
            args.chromium_version,
            context.environ,
            lambda: fetch_latest_release_tag(settings.upstream_repo),
        )
        if resolved is None:
            return None
        version, release_tag = resolved
        return dataclasses.replace(settings, version=version, release_tag=release_tag)

    def run(self, settings: BuildSettings):
        log_info(f"Building {settings.xcframework_name} version {settings.version}")
        log_info(f"Upstream release: {settings.upstream_repo} {settings.release_tag}")
        log_info(f"Work directory: {settings.work_dir}")
        log_info(f"Output directory: {settings.output_dir}")

        settings.work_dir.mkdir(parents=True, exist_ok=True)
        settings.output_dir.mkdir(parents=True, exist_ok=True)

        fetcher = ArchiveFetcher(settings.base_url, settings.work_dir)
        build_all_frameworks(BUILD_CONFIGS, settings, fetcher)

        frameworks = create_fat_frameworks(settings)
        create_xcframework(frameworks, settings.xcframework_path)

        report = verify_xcframework(settings.xcframework_path)
        if not report.passed:
            log_warning(f"Verification reported {report.error_count} error(s), continuing")

        record = package_xcframework(settings)
        cleanup(settings.work_dir)

        log_info("✅ Build complete!")
        log_info(f"XCFramework: {settings.xcframework_path}")
        log_info(f"Zip: {settings.output_dir / record.zip_name}")
        return record

    def exec(self, context: CliContext, args: CliNameSpace):
        try:
            settings = self.resolve_settings(context, args)
            if settings is None:
                log_error("No version specified")
                self.print_usage()
                sys.exit(1)
            self.run(settings)
        except (BuildError, OSError) as e:
            log_error(str(e))
            log_error("Build failed")
            sys.exit(1)
