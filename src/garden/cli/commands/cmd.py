# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""``garden cmd``: run named commands from the garden document."""

from __future__ import annotations

from typing import Annotated

import typer

from ..shared import AppContext, invoke
from ..typer_ext import PassthroughCommand, passthrough_arguments


def cmd_command(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Tree query: a garden, group or tree name or glob.")],
    commands: Annotated[list[str], typer.Argument(help="Names of the commands to run.")],
    keep_going: Annotated[
        bool,
        typer.Option("--keep-going", "-k", help="Continue with the next command after a failure."),
    ] = False,
) -> None:
    """Run named commands in every tree matched by QUERY.

    Arguments after ``--`` are passed to each command as positional
    parameters.
    """

    arguments = passthrough_arguments(ctx)

    def _run(app: AppContext) -> int:
        return app.orchestrator().run_commands(query, commands, arguments=arguments, keep_going=keep_going)

    invoke(ctx, _run)


def register(app: typer.Typer) -> None:
    """Register ``cmd`` on ``app``."""

    app.command(name="cmd", cls=PassthroughCommand)(cmd_command)


__all__ = ["cmd_command", "register"]
