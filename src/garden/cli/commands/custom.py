# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-defined subcommands: ``garden <name> [query...] [-- args...]``."""

from __future__ import annotations

from typing import Annotated, Final

import click
import typer

from ...errors import UsageError
from ...execution import aggregate_exit_status
from ..shared import AppContext, invoke
from ..typer_ext import PassthroughCommand, passthrough_arguments

DEFAULT_QUERY: Final[str] = "."

custom_app = typer.Typer(add_completion=False)


@custom_app.command(cls=PassthroughCommand)
def custom_command(
    ctx: typer.Context,
    queries: Annotated[
        list[str] | None,
        typer.Argument(help="Tree queries; defaults to the tree in the current directory."),
    ] = None,
    keep_going: Annotated[
        bool,
        typer.Option("--keep-going", "-k", help="Continue with the next command after a failure."),
    ] = False,
) -> None:
    """Run the named command from the garden document."""

    name = ctx.info_name or ""
    arguments = passthrough_arguments(ctx)
    selected = list(queries or [DEFAULT_QUERY])

    def _run(app: AppContext) -> int:
        if not name:
            raise UsageError("a command name must be specified")
        orchestrator = app.orchestrator()
        return aggregate_exit_status(
            orchestrator.run_commands(query, [name], arguments=arguments, keep_going=keep_going)
            for query in selected
        )

    invoke(ctx, _run)


def build_custom_command(name: str) -> click.Command:
    """Return the click command that runs the document command ``name``."""

    command = typer.main.get_command(custom_app)
    command.help = f"Run the '{name}' command."
    return command


__all__ = ["build_custom_command", "custom_app", "custom_command"]
