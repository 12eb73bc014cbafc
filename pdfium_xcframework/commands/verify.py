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
from pdfium_xcframework.build_scripts.xcframework import verify_xcframework
from pdfium_xcframework.utils.context.command import CliCommand
from pdfium_xcframework.utils.context.context import CliContext
from pdfium_xcframework.utils.context.namespace import CliNameSpace
from pdfium_xcframework.utils.log.log_util import log_error


class Verify(CliCommand):
    def description(self) -> str:
        return """
        Check the structure of an XCFramework.

        Every framework slice must hold a Mach-O binary named after the
        framework and an Info.plist; headers are counted. Exits 1 when any
        check fails.

        Examples:
            pdfium-xcframework verify                          # ./output/PDFium.xcframework
            pdfium-xcframework verify path/to/PDFium.xcframework
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="pdfium-xcframework verify",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "path",
            nargs='?',
            default=None,
            type=str,
            help="XCFramework to verify (default: <output dir>/PDFium.xcframework)",
        )
        if argv is None:
            argv = sys.argv[2:]
        return parser.parse_args(argv, namespace=CliNameSpace())

    def exec(self, context: CliContext, args: CliNameSpace):
        if args.path:
            path = Path(args.path)
        else:
            try:
                project_config = load_project_config(context.project_dir)
            except BuildError as e:
                log_error(str(e))
                sys.exit(1)
            path = BuildSettings.load(environ=context.environ, project_config=project_config).xcframework_path

        report = verify_xcframework(path)
        if not report.passed:
            sys.exit(1)
