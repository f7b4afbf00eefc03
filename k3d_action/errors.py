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

"""Exception classes raised by the bootstrap workflows."""

from __future__ import annotations


class K3dActionError(Exception):
    """Base exception for k3d-action failures."""

    pass


class ConfigurationError(K3dActionError):
    """Missing or conflicting input configuration."""

    pass


class ExternalCommandFailure(K3dActionError):
    """An external tool or the Docker engine reported a failure."""

    def __init__(self, command: str, message: str, exit_code: int | None = None):
        self.command = command
        self.exit_code = exit_code
        detail = f" (exit code {exit_code})" if exit_code is not None else ""
        super().__init__(f"{command} failed{detail}: {message}")


class ReadinessTimeout(K3dActionError):
    """Nodes did not report Ready within the configured limit."""

    def __init__(self, attempts: int, last_snapshot: list[tuple[str, str]]):
        self.attempts = attempts
        self.last_snapshot = last_snapshot
        pending = ", ".join(f"{node}={status or '<empty>'}" for node, status in last_snapshot) or "no nodes"
        super().__init__(f"Nodes not ready after {attempts} polls: {pending}")
