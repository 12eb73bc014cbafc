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

"""Build steps of the PDFium XCFramework pipeline."""

__all__ = [
    "build_config",
    "build_errors",
    "build_utils",
    "distribute",
    "fat_framework",
    "fetch",
    "framework",
    "orchestrator",
    "xcframework",
]
