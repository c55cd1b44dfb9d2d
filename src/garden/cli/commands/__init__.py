# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command registry."""

from __future__ import annotations

import typer

from . import cmd, eval_expr, exec_tree, inspect_trees, listing, shell
from .custom import build_custom_command

__all__ = ["build_custom_command", "register_commands"]


def register_commands(app: typer.Typer) -> None:
    """Register the built-in commands on ``app``.

    Args:
        app: Typer application receiving command registrations.
    """

    cmd.register(app)
    eval_expr.register(app)
    exec_tree.register(app)
    inspect_trees.register(app)
    listing.register(app)
    shell.register(app)
