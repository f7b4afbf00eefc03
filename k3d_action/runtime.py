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

"""Docker engine access for networks, containers, volumes, and images.

All host-level state the bootstrap touches goes through ``DockerRuntime`` so
the orchestration code can be exercised against an in-memory fake.
"""

from __future__ import annotations

import io
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

import docker
from docker.types import IPAMConfig, IPAMPool

from k3d_action import logger
from k3d_action.constants import NETWORK_DRIVER
from k3d_action.errors import ExternalCommandFailure


@dataclass(frozen=True)
class ContainerSpec:
    """Detached container to start.

    Attributes:
        name: Container name.
        image: Image reference.
        volumes: Mapping of volume name to mount point inside the container.
        ports: Mapping of container port (``"5000/tcp"``) to host port.
        restart_policy: Docker restart policy name.
    """

    name: str
    image: str
    volumes: dict[str, str] = field(default_factory=dict)
    ports: dict[str, int] = field(default_factory=dict)
    restart_policy: str = "no"


@contextmanager
def _docker_errors(action: str) -> Iterator[None]:
    """Translate docker SDK errors into ExternalCommandFailure."""
    try:
        yield
    except docker.errors.APIError as e:
        raise ExternalCommandFailure(f"docker {action}", e.explanation or str(e), e.status_code) from e
    except docker.errors.DockerException as e:
        raise ExternalCommandFailure(f"docker {action}", str(e)) from e


class DockerRuntime:
    """Thin wrapper over the docker SDK client."""

    def __init__(self, client: docker.DockerClient | None = None) -> None:
        self._client = client

    @property
    def client(self) -> docker.DockerClient:
        if self._client is None:
            with _docker_errors("connect"):
                self._client = docker.from_env()
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------
    # Networks
    # ------------------------------------------------------------------

    def list_networks(self) -> list[str]:
        with _docker_errors("network list"):
            return [network.name for network in self.client.networks.list()]

    def create_network(self, name: str, subnet: str) -> None:
        ipam = IPAMConfig(pool_configs=[IPAMPool(subnet=subnet)])
        with _docker_errors("network create"):
            self.client.networks.create(name, driver=NETWORK_DRIVER, ipam=ipam)
        logger.debug("created network %s (%s)", name, subnet)

    def inspect_network(self, name: str) -> str:
        """Return the subnet of the network's first IPAM config block."""
        with _docker_errors("network inspect"):
            network = self.client.networks.get(name)
        configs = (network.attrs.get("IPAM") or {}).get("Config") or []
        if not configs or not configs[0].get("Subnet"):
            raise ExternalCommandFailure("docker network inspect", f"network '{name}' has no IPAM subnet")
        return configs[0]["Subnet"]

    def network_containers(self, network: str) -> list[str]:
        """Names of containers attached to ``network``."""
        with _docker_errors("network inspect"):
            net = self.client.networks.get(network)
        containers = net.attrs.get("Containers") or {}
        return [entry.get("Name", "") for entry in containers.values()]

    def connect_to_network(self, container: str, network: str) -> None:
        with _docker_errors("network connect"):
            self.client.networks.get(network).connect(container)

    # ------------------------------------------------------------------
    # Containers and volumes
    # ------------------------------------------------------------------

    def container_running(self, name: str) -> bool:
        # The name filter is a substring match; compare exactly afterwards.
        with _docker_errors("ps"):
            containers = self.client.containers.list(filters={"name": name})
        return any(container.name == name for container in containers)

    def published_port(self, name: str, container_port: str) -> int | None:
        """Host port bound to ``container_port`` on a running container."""
        with _docker_errors("container inspect"):
            container = self.client.containers.get(name)
        bindings = (container.attrs.get("HostConfig") or {}).get("PortBindings") or {}
        for binding in bindings.get(container_port) or []:
            if binding.get("HostPort"):
                return int(binding["HostPort"])
        return None

    def create_volume(self, name: str) -> None:
        with _docker_errors("volume create"):
            self.client.volumes.create(name=name)

    def run_container(self, spec: ContainerSpec) -> None:
        volumes = {volume: {"bind": target, "mode": "rw"} for volume, target in spec.volumes.items()}
        with _docker_errors("container run"):
            self.client.containers.run(
                spec.image,
                name=spec.name,
                detach=True,
                volumes=volumes,
                ports=dict(spec.ports),
                restart_policy={"Name": spec.restart_policy},
            )

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def build_image(self, tag: str, dockerfile: str) -> None:
        with _docker_errors("build"):
            self.client.images.build(fileobj=io.BytesIO(dockerfile.encode()), tag=tag, rm=True)

    def push_image(self, repository: str, tag: str) -> None:
        with _docker_errors("push"):
            for line in self.client.images.push(repository, tag=tag, stream=True, decode=True):
                # Push failures arrive in the progress stream, not as an HTTP error.
                if "error" in line:
                    raise ExternalCommandFailure("docker push", line["error"])

    def remove_image(self, reference: str) -> None:
        with _docker_errors("image rm"):
            self.client.images.remove(reference)

    def pull_image(self, repository: str, tag: str) -> None:
        with _docker_errors("pull"):
            self.client.images.pull(repository, tag=tag)

    def list_images(self) -> list[str]:
        with _docker_errors("images"):
            return [tag for image in self.client.images.list() for tag in image.tags]
