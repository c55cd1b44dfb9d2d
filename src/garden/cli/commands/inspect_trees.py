# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""``garden inspect``: report where selected trees live and whether they exist."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Final

import typer

from ...evaluation import Evaluator
from ..shared import AppContext, invoke
from ..typer_ext import SortedTyperCommand

PRESENT: Final[str] = "+"
MISSING: Final[str] = "-"
SYMLINK: Final[str] = "@"


def inspect_command(
    ctx: typer.Context,
    queries: Annotated[
        list[str] | None,
        typer.Argument(help="Tree queries; defaults to the tree in the current directory."),
    ] = None,
) -> None:
    """Show each matched tree with a presence marker and its path.

    ``+`` marks a tree that exists on disk, ``-`` one that is missing and
    ``@`` a symlink tree. With ``--verbose`` the evaluated remotes follow.
    """

    def _run(app: AppContext) -> int:
        orchestrator = app.orchestrator()
        for query in queries or ["."]:
            for context in orchestrator.resolve(query):
                config = orchestrator.config_for(context)
                config.reset()
                tree = config.trees[context.tree]
                path = tree.path_as_ref() if tree.path_is_valid() else ""
                if tree.is_symlink:
                    marker = SYMLINK
                else:
                    marker = PRESENT if path and Path(path).exists() else MISSING
                typer.echo(f"{marker} {tree.name}  {path}")
                if not app.verbose:
                    continue
                for name, url in Evaluator.for_context(config, context).named_values(tree.remotes):
                    typer.echo(f"    {name}  {url}")
        return 0

    invoke(ctx, _run)


def register(app: typer.Typer) -> None:
    """Register ``inspect`` on ``app``."""

    app.command(name="inspect", cls=SortedTyperCommand)(inspect_command)


__all__ = ["inspect_command", "register"]
