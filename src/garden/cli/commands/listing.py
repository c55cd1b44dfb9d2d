# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""``garden list`` / ``garden ls``: show what the garden document declares."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Annotated

import typer

from ...evaluation import Evaluator
from ..shared import AppContext, invoke
from ..typer_ext import SortedTyperCommand


def _section(title: str, names: Iterable[str]) -> list[str]:
    entries = list(names)
    if not entries:
        return []
    return [f"{title}:", *(f"  {name}" for name in entries)]


def list_command(
    ctx: typer.Context,
    queries: Annotated[
        list[str] | None,
        typer.Argument(help="Tree queries to expand; lists everything when omitted."),
    ] = None,
) -> None:
    """List gardens, groups, trees and commands, or the trees matched by queries."""

    def _run(app: AppContext) -> int:
        config = app.config
        if not queries:
            lines = [
                *_section("gardens", (garden.name for garden in config.gardens)),
                *_section("groups", (group.name for group in config.groups)),
                *_section("trees", (tree.name for tree in config.trees)),
                *_section("commands", Evaluator(config).command_names()),
            ]
            for line in lines:
                typer.echo(line)
            return 0

        orchestrator = app.orchestrator()
        for query in queries:
            for context in orchestrator.resolve(query):
                tree = orchestrator.config_for(context).trees[context.tree]
                if app.verbose and tree.path_is_valid():
                    typer.echo(f"{tree.name}  {tree.path_as_ref()}")
                else:
                    typer.echo(tree.name)
        return 0

    invoke(ctx, _run)


def register(app: typer.Typer) -> None:
    """Register ``list`` on ``app``; ``ls`` resolves to it."""

    app.command(name="list", cls=SortedTyperCommand)(list_command)


__all__ = ["list_command", "register"]
