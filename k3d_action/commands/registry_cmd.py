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

"""test-registry command."""

from __future__ import annotations

import typer

from k3d_action.commands import abort_on_errors
from k3d_action.config import load_request
from k3d_action.orchestrator import run_test_registry
from k3d_action.runtime import DockerRuntime


def test_registry(
    registry_port: int | None = typer.Option(
        None, "--registry-port", help="Registry host port (overrides REGISTRY_PORT)"),
) -> None:
    """Check the local registry from outside the cluster with a push and pull."""
    with abort_on_errors():
        request = load_request(registry_port=registry_port)
        runtime = DockerRuntime()
        try:
            run_test_registry(request, runtime)
        finally:
            runtime.close()
