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

"""deploy command: network, optional registry, k3d cluster, node wait."""

from __future__ import annotations

import typer

from k3d_action.commands import abort_on_errors
from k3d_action.config import load_request
from k3d_action.orchestrator import run_deploy
from k3d_action.runtime import DockerRuntime


def deploy(
    cluster_name: str | None = typer.Option(
        None, "--cluster-name", help="k3d cluster name (overrides CLUSTER_NAME)"),
    network: str | None = typer.Option(
        None, "--network", help="Docker network (overrides NETWORK)"),
    subnet_cidr: str | None = typer.Option(
        None, "--subnet-cidr", help="Subnet for a new network (overrides SUBNET_CIDR)"),
    registry: bool | None = typer.Option(
        None, "--registry/--no-registry", help="Attach the local registry (overrides USE_DEFAULT_REGISTRY)"),
    registry_port: int | None = typer.Option(
        None, "--registry-port", help="Registry host port (overrides REGISTRY_PORT)"),
    node_wait_timeout: float | None = typer.Option(
        None, "--node-wait-timeout", help="Seconds to wait for Ready nodes (overrides NODE_WAIT_TIMEOUT)"),
) -> None:
    """Deploy a custom k3d cluster and wait until all nodes are Ready."""
    with abort_on_errors():
        request = load_request(
            cluster_name=cluster_name,
            network=network,
            subnet_cidr=subnet_cidr,
            use_default_registry=registry,
            registry_port=registry_port,
            node_wait_timeout=node_wait_timeout,
        )
        runtime = DockerRuntime()
        try:
            run_deploy(request, runtime)
        finally:
            runtime.close()
