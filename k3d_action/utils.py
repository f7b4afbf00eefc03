# /*
# Copyright 2026 The k3d-action Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# */

"""Utility functions for command lookup and external command execution."""

from __future__ import annotations

from typing import Any

import sh

from k3d_action import logger
from k3d_action.errors import ExternalCommandFailure


def command_available(cmd: str) -> bool:
    """Return True if ``cmd`` is on the system PATH."""
    try:
        found = sh.which(cmd)
    except sh.ErrorReturnCode:
        return False
    return bool(found)


def run_command(cmd: str, *args: str, **kwargs: Any) -> str:
    """Run an external command through ``sh`` and return its stdout.

    Keyword arguments are passed to ``sh`` unchanged (``_fg``, ``_in``,
    ``_env`` ...). Arguments are never re-interpreted by a shell.

    Args:
        cmd: Executable name.
        *args: Command arguments.
        **kwargs: ``sh`` special keyword arguments.

    Returns:
        Captured stdout, or an empty string for foreground commands.

    Raises:
        ExternalCommandFailure: If the command is missing or exits non-zero.
    """
    logger.debug("running: %s %s", cmd, " ".join(args))
    try:
        command = sh.Command(cmd)
    except sh.CommandNotFound as err:
        raise ExternalCommandFailure(cmd, f"Required command '{cmd}' not found. Please install it first.") from err
    try:
        result = command(*args, **kwargs)
    except sh.ErrorReturnCode as err:
        stderr = (err.stderr or b"").decode(errors="replace").strip()
        raise ExternalCommandFailure(f"{cmd} {' '.join(args[:2])}".strip(), stderr or "no output", err.exit_code) from err
    return "" if result is None else str(result)
