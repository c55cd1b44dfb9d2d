# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""``garden shell`` / ``garden sh``: open an interactive shell in a tree."""

from __future__ import annotations

from typing import Annotated

import typer

from ..shared import AppContext, invoke
from ..typer_ext import SortedTyperCommand


def shell_command(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Tree query selecting the tree.")] = ".",
    tree: Annotated[str | None, typer.Argument(help="Tree to use when QUERY matches several.")] = None,
) -> None:
    """Run the configured shell inside a tree with its environment applied."""

    def _run(app: AppContext) -> int:
        return app.orchestrator().open_shell(query, tree)

    invoke(ctx, _run)


def register(app: typer.Typer) -> None:
    """Register ``shell`` on ``app``; ``sh`` resolves to it."""

    app.command(name="shell", cls=SortedTyperCommand)(shell_command)


__all__ = ["register", "shell_command"]
