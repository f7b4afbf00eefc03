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

"""Command implementations and shared usage/error reporting."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import typer

from k3d_action import console
from k3d_action.constants import DEFAULT_NETWORK, DEFAULT_REGISTRY_PORT, DEFAULT_SUBNET, REGISTRY_HOSTNAME
from k3d_action.errors import ConfigurationError, K3dActionError

USAGE = f"""
  Usage: k3d-action <COMMAND>
  Commands:
      deploy            deploy custom k3d cluster
      test-registry     push and pull a dummy image through the local registry

  Environment variables:
      deploy
                        CLUSTER_NAME (Required) k3d cluster name.

                        ARGS (Optional) k3d arguments.

                        NETWORK (Optional) If not set then default {DEFAULT_NETWORK} is created
                                           and all clusters share that network.

                        SUBNET_CIDR (Optional) If not set then default {DEFAULT_SUBNET} is used. Variable requires
                                               NETWORK to be set.

                        USE_DEFAULT_REGISTRY (Optional) If not set then default false. If true provides local docker registry
                                               {REGISTRY_HOSTNAME}:{DEFAULT_REGISTRY_PORT} without TLS and authentication.

                        REGISTRY_PORT (Optional) Registry port. Default value {DEFAULT_REGISTRY_PORT}.

                        NODE_WAIT_TIMEOUT (Optional) Seconds to wait for Ready nodes. Waits forever if not set.

      test-registry
                        REGISTRY_PORT (Optional) Registry port. Default value {DEFAULT_REGISTRY_PORT}.

  Set NO_COLOR to disable coloured output. Run with --help for command options.
"""


def print_usage() -> None:
    console.print(USAGE, markup=False, highlight=False)


@contextmanager
def abort_on_errors() -> Iterator[None]:
    """Report k3d-action errors and exit with status 1.

    Configuration errors are followed by the usage text.
    """
    try:
        yield
    except ConfigurationError as e:
        console.print(f" - [red]{e}[/red]")
        print_usage()
        raise typer.Exit(code=1) from e
    except K3dActionError as e:
        console.print(f"[red]\u274c {e}[/red]")
        raise typer.Exit(code=1) from e
