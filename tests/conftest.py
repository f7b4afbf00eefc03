"""Shared fixtures: an in-memory Docker runtime and a clean environment."""

from __future__ import annotations

import pytest

from k3d_action.errors import ExternalCommandFailure
from k3d_action.runtime import ContainerSpec

ENV_VARS = (
    "CLUSTER_NAME",
    "ARGS",
    "NETWORK",
    "SUBNET_CIDR",
    "USE_DEFAULT_REGISTRY",
    "REGISTRY_PORT",
    "K3D_VERSION",
    "K3S_IMAGE",
    "NODE_WAIT_TIMEOUT",
    "GITHUB_OUTPUT",
)


class FakeRuntime:
    """In-memory stand-in for DockerRuntime."""

    def __init__(self, networks: dict[str, str] | None = None) -> None:
        self.networks: dict[str, str] = dict(networks or {})
        self.members: dict[str, list[str]] = {name: [] for name in self.networks}
        self.containers: dict[str, ContainerSpec] = {}
        self.volumes: set[str] = set()
        self.images: list[str] = []
        self.pushed: set[str] = set()
        self.calls: list[tuple] = []
        self.push_error: str | None = None
        self.closed = False

    def list_networks(self) -> list[str]:
        self.calls.append(("list_networks",))
        return list(self.networks)

    def create_network(self, name: str, subnet: str) -> None:
        self.calls.append(("create_network", name, subnet))
        if name in self.networks:
            raise ExternalCommandFailure("docker network create", f"network with name {name} already exists", 409)
        self.networks[name] = subnet
        self.members[name] = []

    def inspect_network(self, name: str) -> str:
        self.calls.append(("inspect_network", name))
        return self.networks[name]

    def network_containers(self, network: str) -> list[str]:
        return list(self.members.get(network, []))

    def connect_to_network(self, container: str, network: str) -> None:
        self.calls.append(("connect_to_network", container, network))
        if container in self.members[network]:
            raise ExternalCommandFailure("docker network connect", "endpoint already exists", 403)
        self.members[network].append(container)

    def container_running(self, name: str) -> bool:
        return name in self.containers

    def published_port(self, name: str, container_port: str) -> int | None:
        return self.containers[name].ports.get(container_port)

    def create_volume(self, name: str) -> None:
        self.calls.append(("create_volume", name))
        self.volumes.add(name)

    def run_container(self, spec: ContainerSpec) -> None:
        self.calls.append(("run_container", spec.name))
        if spec.name in self.containers:
            raise ExternalCommandFailure("docker container run", f"name {spec.name} is already in use", 409)
        self.containers[spec.name] = spec

    def build_image(self, tag: str, dockerfile: str) -> None:
        self.calls.append(("build_image", tag))
        self.images.append(tag)

    def push_image(self, repository: str, tag: str) -> None:
        self.calls.append(("push_image", f"{repository}:{tag}"))
        if self.push_error:
            raise ExternalCommandFailure("docker push", self.push_error)
        self.pushed.add(f"{repository}:{tag}")

    def remove_image(self, reference: str) -> None:
        self.calls.append(("remove_image", reference))
        self.images.remove(reference)

    def pull_image(self, repository: str, tag: str) -> None:
        self.calls.append(("pull_image", f"{repository}:{tag}"))
        reference = f"{repository}:{tag}"
        if reference not in self.pushed:
            raise ExternalCommandFailure("docker pull", f"manifest for {reference} not found", 404)
        self.images.append(reference)

    def list_images(self) -> list[str]:
        return list(self.images)

    def close(self) -> None:
        self.closed = True

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate every test from the caller's environment and working directory."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def runtime() -> FakeRuntime:
    return FakeRuntime()
