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

"""Network resolution: validate, create, or reuse the cluster network."""

from __future__ import annotations

from k3d_action import console, logger
from k3d_action.config import NetworkDescriptor
from k3d_action.constants import DEFAULT_NETWORK, DEFAULT_SUBNET
from k3d_action.errors import ConfigurationError
from k3d_action.runtime import DockerRuntime


def validate_network_request(network: str, subnet: str, network_exists: bool) -> None:
    """Check the network/subnet combination.

    Args:
        network: Requested network name.
        subnet: Requested subnet CIDR.
        network_exists: Whether a network named ``network`` already exists.

    Raises:
        ConfigurationError: If the default network is paired with a custom
            subnet, or a new custom network has no explicit subnet.
    """
    if network == DEFAULT_NETWORK and subnet != DEFAULT_SUBNET:
        raise ConfigurationError("You can't specify custom subnet for default network.")
    if network != DEFAULT_NETWORK and subnet == DEFAULT_SUBNET and not network_exists:
        raise ConfigurationError("Subnet CIDR must be specified for custom network")


def resolve_network(runtime: DockerRuntime, network: str, subnet: str) -> NetworkDescriptor:
    """Create the requested network, or adopt an existing one.

    An existing network always wins: its configured subnet replaces the
    requested one.

    Args:
        runtime: Docker runtime used to query and mutate networks.
        network: Requested network name.
        subnet: Requested subnet CIDR.

    Returns:
        The network the cluster will join.

    Raises:
        ConfigurationError: If the request is inconsistent.
        ExternalCommandFailure: If a docker call fails.
    """
    exists = network in runtime.list_networks()
    validate_network_request(network, subnet, exists)

    if not exists:
        console.print(f"[yellow]create new network [cyan]{network} {subnet}[/cyan][/yellow]")
        runtime.create_network(network, subnet)
        return NetworkDescriptor(name=network, subnet=subnet)

    console.print(f"[yellow]attaching nodes to existing [cyan]{network}[/cyan][/yellow]")
    actual = runtime.inspect_network(network)
    if actual != subnet:
        logger.info("network %s already uses subnet %s; ignoring requested %s", network, actual, subnet)
    return NetworkDescriptor(name=network, subnet=actual)
