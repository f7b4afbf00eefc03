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

"""Local registry container, k3s mirror config, and registry smoke test."""

from __future__ import annotations

from pathlib import Path

import yaml
from rich.panel import Panel

from k3d_action import console, logger
from k3d_action.config import RegistryDescriptor
from k3d_action.constants import (
    DUMMY_IMAGE_DOCKERFILE,
    DUMMY_IMAGE_NAME,
    DUMMY_IMAGE_TAG,
    REGISTRY_CONFIG_FILENAME,
    REGISTRY_CONTAINER_PORT,
    REGISTRY_DATA_DIR,
    REGISTRY_IMAGE,
    REGISTRY_NAME,
    REGISTRY_RESTART_POLICY,
    REGISTRY_VOLUME,
)
from k3d_action.runtime import ContainerSpec, DockerRuntime


def default_config_path() -> Path:
    """Mirror file location: ``registries-local.yaml`` in the working directory."""
    return Path.cwd() / REGISTRY_CONFIG_FILENAME


# See: https://docs.k3s.io/installation/private-registry#mirrors
def mirror_config(registry: RegistryDescriptor) -> dict:
    """Build the k3s ``registries.yaml`` document for the local registry."""
    return {"mirrors": {registry.mirror_key: {"endpoint": [registry.endpoint]}}}


def write_mirror_config(registry: RegistryDescriptor) -> str:
    """Write the mirror file, replacing any previous content.

    Returns:
        The YAML text written.
    """
    text = yaml.safe_dump(mirror_config(registry), default_flow_style=False, sort_keys=False)
    registry.config_path.write_text(text)
    return text


def registry_container_spec(port: int) -> ContainerSpec:
    """Container spec for the ``registry:2`` server published on ``port``."""
    return ContainerSpec(
        name=REGISTRY_NAME,
        image=REGISTRY_IMAGE,
        volumes={REGISTRY_VOLUME: REGISTRY_DATA_DIR},
        ports={f"{REGISTRY_CONTAINER_PORT}/tcp": port},
        restart_policy=REGISTRY_RESTART_POLICY,
    )


def _warn_on_port_drift(runtime: DockerRuntime, registry: RegistryDescriptor) -> None:
    published = runtime.published_port(registry.container_name, f"{REGISTRY_CONTAINER_PORT}/tcp")
    if published is not None and published != registry.port:
        logger.warning(
            "registry %s is already running on host port %d, not the requested %d; "
            "remove the container to apply the new port",
            registry.container_name, published, registry.port,
        )


def attach_registry(
    runtime: DockerRuntime,
    network: str,
    port: int,
    config_path: Path | None = None,
) -> RegistryDescriptor:
    """Ensure the local registry runs and is reachable from ``network``.

    Args:
        runtime: Docker runtime used to inspect and start containers.
        network: Network the cluster nodes are attached to.
        port: Host port for the registry.
        config_path: Where to write the mirror file; defaults to the working directory.

    Returns:
        Descriptor whose ``volume_arg`` mounts the mirror file into k3s nodes.

    Raises:
        ExternalCommandFailure: If a docker call fails.
    """
    registry = RegistryDescriptor(port=port, config_path=config_path or default_config_path())
    write_mirror_config(registry)

    if runtime.container_running(registry.container_name):
        logger.info("registry %s already running, skipping creation", registry.container_name)
        _warn_on_port_drift(runtime, registry)
    else:
        console.print(f"[yellow]Inject registry [cyan]{registry.container_name}:{port}[/cyan][/yellow]")
        runtime.create_volume(REGISTRY_VOLUME)
        runtime.run_container(registry_container_spec(port))

    if registry.container_name not in runtime.network_containers(network):
        runtime.connect_to_network(registry.container_name, network)
        logger.info("connected %s to %s", registry.container_name, network)
    return registry


def check_registry(runtime: DockerRuntime, port: int) -> None:
    """Push and pull a dummy image through the registry from the host side.

    Args:
        runtime: Docker runtime used for the image operations.
        port: Host port the registry is published on.

    Raises:
        ExternalCommandFailure: If build, push, or pull fails.
    """
    repository = f"localhost:{port}/{DUMMY_IMAGE_NAME}"
    reference = f"{repository}:{DUMMY_IMAGE_TAG}"

    console.print(Panel.fit("Test whether local registry is running", style="bold blue"))
    console.print(f"[yellow]push and remove image [cyan]{reference}[/cyan][/yellow]")
    runtime.build_image(reference, DUMMY_IMAGE_DOCKERFILE)
    runtime.push_image(repository, DUMMY_IMAGE_TAG)
    runtime.remove_image(reference)

    console.print(f"[yellow]pull [cyan]{reference}[/cyan][/yellow]")
    runtime.pull_image(repository, DUMMY_IMAGE_TAG)

    for tag in runtime.list_images():
        console.print(f"  {tag}")
    console.print(f"[green]\u2705 Registry localhost:{port} is serving images[/green]")
