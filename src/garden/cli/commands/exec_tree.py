# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""``garden exec``: run an arbitrary command in every selected tree."""

from __future__ import annotations

from typing import Annotated

import typer

from ..shared import AppContext, invoke
from ..typer_ext import SortedTyperCommand

EXEC_CONTEXT_SETTINGS = {"allow_interspersed_args": False, "ignore_unknown_options": True}


def exec_command(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Tree query: a garden, group or tree name or glob.")],
    command: Annotated[list[str], typer.Argument(help="Command and arguments to run in each tree.")],
) -> None:
    """Run a command in every tree matched by QUERY."""

    def _run(app: AppContext) -> int:
        return app.orchestrator().run(query, command)

    invoke(ctx, _run)


def register(app: typer.Typer) -> None:
    """Register ``exec`` on ``app``."""

    app.command(name="exec", cls=SortedTyperCommand, context_settings=EXEC_CONTEXT_SETTINGS)(exec_command)


__all__ = ["exec_command", "register"]
