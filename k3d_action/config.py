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

"""Request settings, resolved descriptors, and config display."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.panel import Panel

from k3d_action import console
from k3d_action.constants import (
    DEFAULT_K3D_VERSION,
    DEFAULT_K3S_IMAGE,
    DEFAULT_NETWORK,
    DEFAULT_REGISTRY_PORT,
    DEFAULT_SUBNET,
    K3S_REGISTRIES_PATH,
    REGISTRY_HOSTNAME,
    REGISTRY_NAME,
)
from k3d_action.errors import ConfigurationError


# ============================================================================
# Request settings
# ============================================================================

class ClusterRequest(BaseSettings):
    """Cluster request, auto-loaded from the action's environment variables.

    Empty variables are treated as unset, so ``NETWORK=""`` falls back to the
    default network.

    Attributes:
        cluster_name: k3d cluster name (``CLUSTER_NAME``), required for deploy.
        args: Extra ``k3d cluster create`` arguments (``ARGS``).
        network: Docker network the cluster joins (``NETWORK``).
        subnet_cidr: Subnet for a newly created network (``SUBNET_CIDR``).
        use_default_registry: Attach the local registry (``USE_DEFAULT_REGISTRY``).
        registry_port: Host port the registry is published on (``REGISTRY_PORT``).
        k3d_version: k3d release installed when k3d is missing (``K3D_VERSION``).
        k3s_image: k3s node image (``K3S_IMAGE``).
        node_wait_timeout: Seconds to wait for Ready nodes, or None to wait forever.
    """

    model_config = SettingsConfigDict(extra="ignore", env_ignore_empty=True, frozen=True)

    cluster_name: str = ""
    args: str = ""
    network: str = DEFAULT_NETWORK
    subnet_cidr: str = DEFAULT_SUBNET
    use_default_registry: bool = False
    registry_port: int = Field(default=DEFAULT_REGISTRY_PORT, ge=1, le=65535)
    k3d_version: str = Field(default=DEFAULT_K3D_VERSION, pattern=r"^v\d+\.\d+\.\d+([-+][\w.]+)?$")
    k3s_image: str = DEFAULT_K3S_IMAGE
    node_wait_timeout: float | None = Field(default=None, gt=0)

    @field_validator("cluster_name")
    @classmethod
    def _strip_cluster_name(cls, value: str) -> str:
        return value.strip()

    @field_validator("use_default_registry", mode="before")
    @classmethod
    def _parse_registry_flag(cls, value: Any) -> bool:
        # Only the literal "true" enables the registry, matching the action inputs.
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return bool(value)


def load_request(**overrides: Any) -> ClusterRequest:
    """Build a ClusterRequest from CLI overrides, environment, and defaults.

    Resolution priority: CLI arguments > environment variables > defaults.
    ``None`` overrides are ignored.

    Args:
        **overrides: Field values supplied on the command line.

    Returns:
        Validated, immutable ClusterRequest.

    Raises:
        ConfigurationError: If any value fails validation.
    """
    updates = {key: value for key, value in overrides.items() if value is not None}
    try:
        return ClusterRequest(**updates)
    except ValidationError as err:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in e['loc']).upper()}: {e['msg']}" for e in err.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}") from err


def require_cluster_name(request: ClusterRequest) -> str:
    """Return the cluster name, failing when it is missing.

    Raises:
        ConfigurationError: If CLUSTER_NAME is empty.
    """
    if not request.cluster_name:
        raise ConfigurationError("CLUSTER_NAME must be set")
    return request.cluster_name


# ============================================================================
# Resolved descriptors
# ============================================================================

@dataclass(frozen=True)
class NetworkDescriptor:
    """Docker network the cluster nodes attach to.

    Attributes:
        name: Network name.
        subnet: Subnet CIDR actually configured on the network.
    """

    name: str
    subnet: str


@dataclass(frozen=True)
class RegistryDescriptor:
    """Local registry wired into the cluster network.

    Attributes:
        port: Host port the registry is published on.
        config_path: Location of the k3s registry mirror file.
        container_name: Registry container name, also its in-network DNS name.
        hostname: Registry host name used by image references inside the cluster.
    """

    port: int
    config_path: Path
    container_name: str = REGISTRY_NAME
    hostname: str = REGISTRY_HOSTNAME

    @property
    def mirror_key(self) -> str:
        return f"{self.hostname}:{self.port}"

    @property
    def endpoint(self) -> str:
        return f"http://{self.container_name}:{self.port}"

    @property
    def volume_arg(self) -> str:
        """Mount spec that places the mirror file where k3s reads it."""
        return f"{self.config_path}:{K3S_REGISTRIES_PATH}"


# ============================================================================
# Display
# ============================================================================

def display_config(request: ClusterRequest) -> None:
    """Print the resolved request before deploying.

    Args:
        request: Resolved cluster request.
    """
    console.print(Panel.fit("Configuration", style="bold blue"))
    console.print("[yellow]k3d cluster:[/yellow]")
    console.print(f"  cluster_name    : {request.cluster_name}")
    console.print(f"  args            : {request.args or '(none)'}")
    console.print(f"  k3s_image       : {request.k3s_image}")
    console.print(f"  wait_timeout    : {request.node_wait_timeout or '(unbounded)'}")
    console.print("[yellow]Network:[/yellow]")
    console.print(f"  network         : {request.network}")
    console.print(f"  subnet_cidr     : {request.subnet_cidr}")
    if request.use_default_registry:
        console.print("[yellow]Registry:[/yellow]")
        console.print(f"  registry        : {REGISTRY_HOSTNAME}:{request.registry_port}")
