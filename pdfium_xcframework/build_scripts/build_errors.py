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

"""Errors raised by the build pipeline."""


class BuildError(Exception):
    """A fatal build failure."""


class FetchError(BuildError):
    """Download or extraction of a release archive failed."""


class AssemblyError(BuildError):
    """A framework bundle could not be assembled."""


class ToolError(BuildError):
    """A vendor command line tool exited with a non-zero status."""

    def __init__(self, command, returncode, output=""):
        self.command = command
        self.returncode = returncode
        self.output = output
        message = f"'{command}' failed with exit code {returncode}"
        if output:
            message += f":\n{output.rstrip()}"
        super().__init__(message)
