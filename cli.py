#!/usr/bin/env python3
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

"""
cli.py - k3d cluster bootstrap for CI jobs.

Commands:
    deploy         Create (or reuse) the cluster network, optionally attach a
                   local registry, create a k3d cluster, and wait for Ready nodes
    test-registry  Push and pull a dummy image through the local registry

Examples:
    # Cluster on the shared default network
    CLUSTER_NAME=demo k3d-action deploy

    # Cluster with the local registry at registry.localhost:5000
    CLUSTER_NAME=demo USE_DEFAULT_REGISTRY=true k3d-action deploy

    # Cluster on its own network
    CLUSTER_NAME=demo NETWORK=nw01 SUBNET_CIDR=172.20.0.0/24 k3d-action deploy

Running without a command exits with status 1; an unknown command prints the
usage and exits with status 0.
"""

from __future__ import annotations

import logging
import sys

import typer
from typer.core import TyperGroup

from k3d_action import console
from k3d_action.commands import deploy_cmd, print_usage, registry_cmd


class ActionGroup(TyperGroup):
    """Top-level group with the action's usage and exit-code conventions."""

    def resolve_command(self, ctx: typer.Context, args: list[str]):
        name = args[0]
        if not name.startswith("-") and self.get_command(ctx, name) is None:
            print_usage()
            ctx.exit(0)
        return super().resolve_command(ctx, args)


app = typer.Typer(
    cls=ActionGroup,
    help="k3d cluster bootstrap for CI jobs.",
    add_completion=False,
)


@app.callback(invoke_without_command=True)
def _main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Initialize logging for all subcommands."""
    if ctx.invoked_subcommand is None:
        print_usage()
        raise typer.Exit(1)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


app.command("deploy")(deploy_cmd.deploy)
app.command("test-registry")(registry_cmd.test_registry)


def main() -> None:
    try:
        app()
    except Exception as e:
        console.print(f"[red]\u274c {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
