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

"""Orchestration functions that compose domain modules into workflows."""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

from rich.panel import Panel

from k3d_action import console
from k3d_action.cluster import create_cluster, ensure_k3d, get_node_statuses, wait_for_nodes
from k3d_action.config import (
    ClusterRequest,
    NetworkDescriptor,
    RegistryDescriptor,
    display_config,
    require_cluster_name,
)
from k3d_action.network import resolve_network
from k3d_action.outputs import emit_network_outputs
from k3d_action.registry import attach_registry, check_registry
from k3d_action.runtime import DockerRuntime


# ============================================================================
# Internal helpers
# ============================================================================

def _run_registry(
    runtime: DockerRuntime,
    request: ClusterRequest,
    network: NetworkDescriptor,
    config_path: Path | None,
) -> RegistryDescriptor:
    """Attach the local registry and echo the mirror file into the log."""
    console.print(f"[yellow]attaching registry to [cyan]{network.name}[/cyan][/yellow]")
    registry = attach_registry(runtime, network.name, request.registry_port, config_path)
    console.print(registry.config_path.read_text(), markup=False, highlight=False)
    return registry


# ============================================================================
# Public API
# ============================================================================

def run_deploy(
    request: ClusterRequest,
    runtime: DockerRuntime,
    *,
    config_path: Path | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> NetworkDescriptor:
    """Resolve the network, attach the registry, create the cluster, wait for nodes.

    Phases run strictly in order and the first failure aborts the run. Nothing
    created by an earlier phase is rolled back.

    Args:
        request: Resolved cluster request.
        runtime: Docker runtime for network and registry state.
        config_path: Mirror file location override.
        sleep: Sleep function for the readiness poll.

    Returns:
        The network the cluster was attached to.

    Raises:
        ConfigurationError: If the request is missing or inconsistent.
        ExternalCommandFailure: If any external command fails.
        ReadinessTimeout: If a node wait limit is configured and reached.
    """
    require_cluster_name(request)
    display_config(request)

    console.print(Panel.fit("Resolving network", style="bold blue"))
    network = resolve_network(runtime, request.network, request.subnet_cidr)

    registry = None
    if request.use_default_registry:
        registry = _run_registry(runtime, request, network, config_path)

    emit_network_outputs(network)

    ensure_k3d(request.k3d_version)
    create_cluster(request, network, registry)
    wait_for_nodes(get_node_statuses, timeout=request.node_wait_timeout, sleep=sleep)
    return network


def run_test_registry(request: ClusterRequest, runtime: DockerRuntime) -> None:
    """Verify the local registry from outside the cluster.

    Args:
        request: Resolved request; only ``registry_port`` is used.
        runtime: Docker runtime for the image operations.
    """
    check_registry(runtime, request.registry_port)
