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

"""CI step outputs."""

from __future__ import annotations

import os

import typer

from k3d_action import logger
from k3d_action.config import NetworkDescriptor
from k3d_action.constants import GITHUB_OUTPUT_ENV, OUTPUT_NETWORK, OUTPUT_SUBNET


def set_output(name: str, value: str) -> None:
    """Publish a step output.

    Appends ``name=value`` to the file named by ``GITHUB_OUTPUT``; without it,
    falls back to the legacy ``::set-output`` workflow command on stdout.
    """
    output_file = os.environ.get(GITHUB_OUTPUT_ENV)
    if output_file:
        with open(output_file, "a", encoding="utf-8") as f:
            f.write(f"{name}={value}\n")
    else:
        typer.echo(f"::set-output name={name}::{value}")
    logger.debug("output %s=%s", name, value)


def emit_network_outputs(network: NetworkDescriptor) -> None:
    set_output(OUTPUT_NETWORK, network.name)
    set_output(OUTPUT_SUBNET, network.subnet)
