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

import os
import sys
import importlib
import argparse

from pdfium_xcframework import __version__
from pdfium_xcframework.utils.context.namespace import CliNameSpace
from pdfium_xcframework.utils.context.context import CliContext
from pdfium_xcframework.utils.context.command import CliCommand

SCRIPT_PATH = os.path.split(os.path.realpath(__file__))[0]
PACKAGE_NAME = os.path.basename(SCRIPT_PATH)


# Root Class for Command Line Interface
class Cli(CliCommand):
    def description(self) -> str:
        return f"""pdfium-xcframework {__version__} - PDFium XCFramework builder

Repackages pre-built PDFium binaries (bblanchon/pdfium-binaries) into a
single PDFium.xcframework for iOS, the iOS simulator, Mac Catalyst and
macOS, ready for Swift Package Manager and CocoaPods.

USAGE:
    pdfium-xcframework <command> [options]

COMMANDS:
    build       Download, assemble, verify and zip the XCFramework
    generate    Generate Package.swift and PDFium.podspec for a build
    verify      Check the structure of an XCFramework

EXAMPLES:
    pdfium-xcframework build 7506
    pdfium-xcframework build latest
    GITHUB_REPO=me/pdfium-spm pdfium-xcframework generate
    pdfium-xcframework verify output/PDFium.xcframework

For more information on a specific command:
    pdfium-xcframework <command> --help
        """

    def get_command_list(self) -> list:
        arr = []
        for command in os.listdir(os.path.join(SCRIPT_PATH, "commands")):
            if command.startswith(("_", "test_")) or not command.endswith(".py"):
                continue
            arr.append(os.path.splitext(os.path.basename(command))[0])
        return sorted(arr)

    def make_parser(self, add_help=True) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="pdfium-xcframework",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
            add_help=add_help,
        )
        parser.add_argument(
            "subcommand",
            metavar=f"{self.get_command_list()}",
            type=str,
            nargs='?',
            choices=self.get_command_list(),
        )
        return parser

    def cli(self, argv=None) -> CliNameSpace:
        if argv is None:
            argv = sys.argv[1:]
        # help for the main command only, `build --help` is left to the subcommand
        if len(argv) == 1 and argv[0] in ['--help', '-h']:
            self.make_parser().print_help()
            sys.exit(0)
        if len(argv) == 1 and argv[0] == '--version':
            print(f"pdfium-xcframework {__version__}")
            sys.exit(0)

        # parse only known args, this will NOT consume --help if present
        args, unknown = self.make_parser(add_help=False).parse_known_args(argv[:1], namespace=CliNameSpace())
        args.subcommand_argv = argv[1:]
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        if not args.subcommand:
            print("ERROR: No command specified\n", file=sys.stderr)
            self.make_parser().print_help(sys.stderr)
            sys.exit(1)

        # get module name
        module_name = f"{PACKAGE_NAME}.commands.{args.subcommand}"
        # get class name
        class_name = args.subcommand.capitalize()
        module = importlib.import_module(module_name)
        klass = getattr(module, class_name)
        sub_cmd = klass()
        # now execute the subcommand
        sub_cmd.exec(context, sub_cmd.cli(args.subcommand_argv))


def main():
    cmd = Cli()
    cmd.exec(CliContext(), cmd.cli())


if __name__ == "__main__":
    main()
