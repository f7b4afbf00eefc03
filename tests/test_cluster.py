from __future__ import annotations

from pathlib import Path

import pytest

from k3d_action import cluster
from k3d_action.cluster import build_create_args, ensure_k3d, get_node_statuses, nodes_ready, wait_for_nodes
from k3d_action.config import ClusterRequest, NetworkDescriptor, RegistryDescriptor, load_request
from k3d_action.errors import ConfigurationError, ExternalCommandFailure, ReadinessTimeout


class ScriptedQuery:
    """Returns canned snapshots in order, repeating the last one."""

    def __init__(self, *snapshots):
        self.snapshots = list(snapshots)
        self.calls = 0

    def __call__(self):
        snapshot = self.snapshots[min(self.calls, len(self.snapshots) - 1)]
        self.calls += 1
        if isinstance(snapshot, Exception):
            raise snapshot
        return snapshot


@pytest.fixture
def sleeps():
    return []


# ============================================================================
# Readiness
# ============================================================================

@pytest.mark.parametrize("snapshot,expected", [
    ([("a", "Ready")], True),
    ([("a", "Ready"), ("b", "Ready")], True),
    ([("a", "NotReady"), ("b", "Ready")], False),
    ([("a", "Ready"), ("b", "")], False),
    ([("a", "Ready,SchedulingDisabled")], False),
    ([], False),
])
def test_nodes_ready(snapshot, expected):
    assert nodes_ready(snapshot) is expected


def test_wait_polls_until_all_ready(sleeps):
    query = ScriptedQuery(
        [("server-0", "NotReady"), ("agent-0", "Ready")],
        [("server-0", "Ready"), ("agent-0", "Ready")],
    )

    snapshot = wait_for_nodes(query, sleep=sleeps.append)

    assert query.calls == 2
    assert sleeps == [1.0]
    assert snapshot == [("server-0", "Ready"), ("agent-0", "Ready")]


def test_wait_treats_empty_status_as_not_ready(sleeps):
    query = ScriptedQuery(
        [("server-0", "Ready"), ("agent-0", "")],
        [],
        [("server-0", "Ready"), ("agent-0", "Ready")],
    )

    wait_for_nodes(query, sleep=sleeps.append)

    assert query.calls == 3
    assert len(sleeps) == 2


def test_wait_returns_immediately_when_ready(sleeps):
    query = ScriptedQuery([("server-0", "Ready")])

    wait_for_nodes(query, sleep=sleeps.append)

    assert query.calls == 1
    assert sleeps == []


def test_query_failure_aborts_without_retry(sleeps):
    query = ScriptedQuery(ExternalCommandFailure("kubectl get", "connection refused", 1))

    with pytest.raises(ExternalCommandFailure):
        wait_for_nodes(query, sleep=sleeps.append)

    assert query.calls == 1
    assert sleeps == []


def test_query_failure_after_mismatch_propagates(sleeps):
    query = ScriptedQuery(
        [("server-0", "NotReady")],
        ExternalCommandFailure("kubectl get", "connection refused", 1),
    )

    with pytest.raises(ExternalCommandFailure):
        wait_for_nodes(query, sleep=sleeps.append)

    assert query.calls == 2


def test_wait_gives_up_after_max_attempts(sleeps):
    query = ScriptedQuery([("server-0", "NotReady")])

    with pytest.raises(ReadinessTimeout) as excinfo:
        wait_for_nodes(query, max_attempts=3, interval=0.5, sleep=sleeps.append)

    assert query.calls == 3
    assert sleeps == [0.5, 0.5]
    assert excinfo.value.attempts == 3
    assert excinfo.value.last_snapshot == [("server-0", "NotReady")]


def test_get_node_statuses_parses_kubectl(monkeypatch):
    output = (
        "k3d-demo-server-0   Ready      control-plane,master   40s   v1.33.5+k3s1\n"
        "k3d-demo-agent-0    NotReady   <none>                 31s   v1.33.5+k3s1\n"
        "k3d-demo-agent-1\n"
    )
    calls = []

    def fake_run(cmd, *args, **kwargs):
        calls.append((cmd, *args))
        return output

    monkeypatch.setattr(cluster, "run_command", fake_run)

    assert get_node_statuses() == [
        ("k3d-demo-server-0", "Ready"),
        ("k3d-demo-agent-0", "NotReady"),
        ("k3d-demo-agent-1", ""),
    ]
    assert calls == [("kubectl", "get", "nodes", "--no-headers")]


# ============================================================================
# Cluster creation
# ============================================================================

def test_build_create_args_without_registry():
    request = ClusterRequest(cluster_name="demo", args="--agents 2", k3s_image="rancher/k3s:v1.33.5-k3s1")
    network = NetworkDescriptor("k3d-action-bridge-network", "172.16.0.0/24")

    assert build_create_args(request, network) == [
        "cluster", "create", "demo", "--wait",
        "--agents", "2",
        "--image", "rancher/k3s:v1.33.5-k3s1",
        "--network", "k3d-action-bridge-network",
    ]


def test_build_create_args_keeps_quoted_arguments_intact():
    request = ClusterRequest(cluster_name="demo", args='--k3s-arg "--disable=traefik@server:*" ; rm -rf /')
    network = NetworkDescriptor("nw01", "172.20.0.0/24")

    args = build_create_args(request, network)

    assert "--disable=traefik@server:*" in args
    assert ";" in args
    assert "rm" in args


def test_build_create_args_mounts_mirror_config():
    request = ClusterRequest(cluster_name="demo")
    network = NetworkDescriptor("nw01", "172.20.0.0/24")
    registry = RegistryDescriptor(port=5000, config_path=Path("/work/registries-local.yaml"))

    args = build_create_args(request, network, registry)

    assert args[-2:] == ["--volume", "/work/registries-local.yaml:/etc/rancher/k3s/registries.yaml"]


def test_build_create_args_uses_trimmed_cluster_name(monkeypatch):
    monkeypatch.setenv("CLUSTER_NAME", "  demo ")
    request = load_request()

    args = build_create_args(request, NetworkDescriptor("nw01", "172.20.0.0/24"))

    assert args[:3] == ["cluster", "create", "demo"]


def test_build_create_args_rejects_unbalanced_quotes():
    request = ClusterRequest(cluster_name="demo", args='--k3s-arg "--disable=traefik')
    with pytest.raises(ConfigurationError, match="ARGS"):
        build_create_args(request, NetworkDescriptor("nw01", "172.20.0.0/24"))


def test_ensure_k3d_skips_when_installed(monkeypatch):
    monkeypatch.setattr(cluster, "command_available", lambda cmd: True)
    monkeypatch.setattr(cluster, "run_command", lambda *a, **kw: pytest.fail("should not run"))

    ensure_k3d("v5.8.3")


def test_ensure_k3d_runs_installer_with_tag(monkeypatch):
    calls = []

    def fake_run(cmd, *args, **kwargs):
        calls.append((cmd, args, kwargs))
        return "#!/bin/bash\necho install\n"

    monkeypatch.setattr(cluster, "command_available", lambda cmd: False)
    monkeypatch.setattr(cluster, "run_command", fake_run)

    ensure_k3d("v5.8.3")

    assert calls[0][0] == "curl"
    assert calls[1][0] == "bash"
    assert calls[1][2]["_env"]["TAG"] == "v5.8.3"
    assert calls[1][2]["_in"] == "#!/bin/bash\necho install\n"
