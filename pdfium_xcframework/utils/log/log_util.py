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
Console output helpers.

All diagnostics go to stderr. Colors are used only when stderr is a
terminal and NO_COLOR is not set.
"""

import os
import sys
import threading

RED = "\033[0;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
NC = "\033[0m"

# parallel jobs share stderr
_PRINT_LOCK = threading.Lock()


def _use_color(stream) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _log(tag, color, message):
    stream = sys.stderr
    if _use_color(stream):
        line = f"{color}[{tag}]{NC} {message}"
    else:
        line = f"[{tag}] {message}"
    with _PRINT_LOCK:
        print(line, file=stream, flush=True)


def log_info(message):
    _log("INFO", GREEN, message)


def log_warning(message):
    _log("WARNING", YELLOW, message)


def log_error(message):
    _log("ERROR", RED, message)
