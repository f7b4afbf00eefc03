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

"""Constants shared across the deploy and test-registry workflows."""

from __future__ import annotations

# -- Network defaults --
DEFAULT_NETWORK = "k3d-action-bridge-network"
DEFAULT_SUBNET = "172.16.0.0/24"
NETWORK_DRIVER = "bridge"

# -- Registry --
REGISTRY_HOSTNAME = "registry.localhost"
REGISTRY_NAME = "registry.local"
REGISTRY_IMAGE = "registry:2"
REGISTRY_VOLUME = "local_registry"
REGISTRY_DATA_DIR = "/var/lib/registry"
REGISTRY_CONTAINER_PORT = 5000
REGISTRY_RESTART_POLICY = "always"
REGISTRY_CONFIG_FILENAME = "registries-local.yaml"
K3S_REGISTRIES_PATH = "/etc/rancher/k3s/registries.yaml"
DEFAULT_REGISTRY_PORT = 5000

# -- Registry smoke test --
DUMMY_IMAGE_NAME = "k3d-action-dummy"
DUMMY_IMAGE_TAG = "v0.0.1"
DUMMY_IMAGE_DOCKERFILE = "FROM scratch\nLABEL type=dummy\n"

# -- k3d / k3s --
K3D_INSTALL_URL = "https://raw.githubusercontent.com/k3d-io/k3d/main/install.sh"
DEFAULT_K3D_VERSION = "v5.8.3"
DEFAULT_K3S_IMAGE = "rancher/k3s:v1.33.5-k3s1"

# -- Node readiness --
NODE_READY_STATUS = "Ready"
NODE_POLL_INTERVAL_SECONDS = 1.0

# -- CI outputs --
OUTPUT_NETWORK = "network"
OUTPUT_SUBNET = "subnet-CIDR"
GITHUB_OUTPUT_ENV = "GITHUB_OUTPUT"
