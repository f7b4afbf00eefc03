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

"""k3d installation, cluster creation, and node readiness polling."""

from __future__ import annotations

import os
import shlex
import time
from collections.abc import Callable

from rich.panel import Panel
from tenacity import (
    RetryError,
    Retrying,
    retry_if_result,
    stop_after_attempt,
    stop_after_delay,
    stop_any,
    stop_never,
    wait_fixed,
)
from tenacity.stop import stop_base

from k3d_action import console, logger
from k3d_action.config import ClusterRequest, NetworkDescriptor, RegistryDescriptor
from k3d_action.constants import K3D_INSTALL_URL, NODE_POLL_INTERVAL_SECONDS, NODE_READY_STATUS
from k3d_action.errors import ConfigurationError, ReadinessTimeout
from k3d_action.utils import command_available, run_command

NodeSnapshot = list[tuple[str, str]]


# ============================================================================
# k3d binary
# ============================================================================

def ensure_k3d(version: str) -> None:
    """Install k3d with the upstream install script unless it is already on PATH.

    Args:
        version: k3d release tag passed to the installer as ``TAG``.

    Raises:
        ExternalCommandFailure: If the download or installation fails.
    """
    if command_available("k3d"):
        logger.info("k3d already installed, skipping download")
        return
    console.print(f"[yellow]Downloading [cyan]k3d@{version}[/cyan][/yellow] see: {K3D_INSTALL_URL}")
    script = run_command("curl", "--silent", "--fail", "--location", K3D_INSTALL_URL)
    run_command("bash", _in=script, _env={**os.environ, "TAG": version})
    console.print(f"[green]\u2705 k3d {version} installed[/green]")


# ============================================================================
# Cluster creation
# ============================================================================

def build_create_args(
    request: ClusterRequest,
    network: NetworkDescriptor,
    registry: RegistryDescriptor | None = None,
) -> list[str]:
    """Assemble the ``k3d cluster create`` argument list.

    ``ARGS`` is tokenized with shell quoting rules but never evaluated.

    Args:
        request: Resolved cluster request.
        network: Network the nodes join.
        registry: Local registry to mount the mirror config for, or None.

    Returns:
        Argument list for the ``k3d`` executable.

    Raises:
        ConfigurationError: If ``ARGS`` cannot be tokenized.
    """
    try:
        extra = shlex.split(request.args)
    except ValueError as err:
        raise ConfigurationError(f"ARGS could not be parsed: {err}") from err

    args = ["cluster", "create", request.cluster_name, "--wait", *extra,
            "--image", request.k3s_image,
            "--network", network.name]
    if registry is not None:
        args += ["--volume", registry.volume_arg]
    return args


def create_cluster(
    request: ClusterRequest,
    network: NetworkDescriptor,
    registry: RegistryDescriptor | None = None,
) -> None:
    """Create the k3d cluster, streaming k3d output to the terminal.

    Raises:
        ExternalCommandFailure: If ``k3d cluster create`` fails.
    """
    console.print(Panel.fit(f"Deploy cluster {request.cluster_name}", style="bold blue"))
    run_command("k3d", *build_create_args(request, network, registry), _fg=True)
    console.print("[green]\u2705 Cluster created successfully[/green]")


# ============================================================================
# Node readiness
# ============================================================================

def get_node_statuses() -> NodeSnapshot:
    """Read ``(node, status)`` pairs from ``kubectl get nodes``.

    Raises:
        ExternalCommandFailure: If kubectl fails.
    """
    output = run_command("kubectl", "get", "nodes", "--no-headers")
    snapshot: NodeSnapshot = []
    for line in output.splitlines():
        fields = line.split()
        if fields:
            snapshot.append((fields[0], fields[1] if len(fields) > 1 else ""))
    return snapshot


def nodes_ready(snapshot: NodeSnapshot) -> bool:
    """True when there is at least one node and every status is exactly Ready."""
    return bool(snapshot) and all(status == NODE_READY_STATUS for _, status in snapshot)


def _stop_condition(timeout: float | None, max_attempts: int | None) -> stop_base:
    stops: list[stop_base] = []
    if timeout is not None:
        stops.append(stop_after_delay(timeout))
    if max_attempts is not None:
        stops.append(stop_after_attempt(max_attempts))
    return stop_any(*stops) if stops else stop_never


def wait_for_nodes(
    query: Callable[[], NodeSnapshot] = get_node_statuses,
    *,
    interval: float = NODE_POLL_INTERVAL_SECONDS,
    timeout: float | None = None,
    max_attempts: int | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> NodeSnapshot:
    """Poll node statuses until every node is Ready.

    With neither ``timeout`` nor ``max_attempts`` the wait is unbounded. A
    failing ``query`` aborts immediately; only not-ready snapshots are retried.

    Args:
        query: Callable returning the current node snapshot.
        interval: Seconds between polls.
        timeout: Give up after this many seconds, or None.
        max_attempts: Give up after this many polls, or None.
        sleep: Sleep function used between polls.

    Returns:
        The first all-Ready snapshot.

    Raises:
        ReadinessTimeout: If a configured limit is reached first.
        ExternalCommandFailure: If the status query fails.
    """
    console.print("[yellow]\u2139\ufe0f  Waiting for all nodes to be ready...[/yellow]")

    def _log_pending(retry_state) -> None:
        snapshot = retry_state.outcome.result()
        pending = [f"{node}={status or '<empty>'}" for node, status in snapshot if status != NODE_READY_STATUS]
        logger.debug("poll %d: waiting for %s", retry_state.attempt_number, ", ".join(pending) or "nodes to register")

    retrying = Retrying(
        retry=retry_if_result(lambda snapshot: not nodes_ready(snapshot)),
        wait=wait_fixed(interval),
        stop=_stop_condition(timeout, max_attempts),
        sleep=sleep,
        before_sleep=_log_pending,
    )
    try:
        snapshot = retrying(query)
    except RetryError as err:
        last = err.last_attempt
        raise ReadinessTimeout(last.attempt_number, last.result()) from err

    console.print(f"[green]\u2705 All {len(snapshot)} nodes are ready[/green]")
    return snapshot
