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

import shlex
import subprocess


def decode_bytes(input: bytes) -> str:
    try:
        return bytes.decode(input, "UTF-8")
    except UnicodeDecodeError:
        return bytes.decode(input, "latin-1")


def format_command(command) -> str:
    if isinstance(command, str):
        return command
    return " ".join(shlex.quote(str(arg)) for arg in command)


def exec_command(command, cwd=None):
    """
    Execute a command and capture its combined stdout/stderr.

    Args:
        command: Argument list (preferred) or shell command string
        cwd: Optional working directory

    Returns:
        tuple: (exit_code, output_message)
    """
    shell = isinstance(command, str)
    if not shell:
        command = [str(arg) for arg in command]
    try:
        compile_popen = subprocess.run(
            command,
            shell=shell,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
    except FileNotFoundError as e:
        # tool is not installed
        return 127, str(e)
    return compile_popen.returncode, decode_bytes(compile_popen.stdout or b"")
