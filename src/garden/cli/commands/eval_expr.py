# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""``garden eval``: print the value of an expression."""

from __future__ import annotations

from typing import Annotated

import typer

from ... import evaluation
from ...query import tree_context
from ..shared import AppContext, invoke
from ..typer_ext import SortedTyperCommand


def eval_command(
    ctx: typer.Context,
    expr: Annotated[str, typer.Argument(help="Expression to evaluate, e.g. '${GARDEN_ROOT}'.")],
    tree: Annotated[str | None, typer.Argument(help="Evaluate in the scope of this tree.")] = None,
    garden: Annotated[str | None, typer.Argument(help="Evaluate in the scope of this garden.")] = None,
) -> None:
    """Evaluate EXPR and print the result."""

    def _run(app: AppContext) -> int:
        config = app.config
        if tree is None:
            value = evaluation.value(config, expr)
        else:
            context = tree_context(config, tree, garden)
            value = evaluation.tree_value(config, expr, context.tree, context.garden)
        typer.echo(value)
        return 0

    invoke(ctx, _run)


def register(app: typer.Typer) -> None:
    """Register ``eval`` on ``app``."""

    app.command(name="eval", cls=SortedTyperCommand)(eval_command)


__all__ = ["eval_command", "register"]
