# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring global options and commands."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from ..config import CommandOptions
from ..display import ColorMode
from .commands import build_custom_command, register_commands
from .shared import configure_logging
from .typer_ext import GardenGroup, create_typer


class _GardenCommands(GardenGroup):
    custom_factory = staticmethod(build_custom_command)


app = create_typer(
    cls=_GardenCommands,
    help="Run commands across collections of source trees.",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Garden document to load."),
    ] = None,
    chdir: Annotated[
        Path | None,
        typer.Option("--chdir", "-C", help="Change to this directory before doing anything."),
    ] = None,
    color: Annotated[
        str,
        typer.Option("--color", help=f"Colour output: {ColorMode.names()}."),
    ] = ColorMode.AUTO.value,
    debug: Annotated[
        list[str] | None,
        typer.Option("--debug", "-d", help="Enable debug logging for a category (config, eval, exec, query, all)."),
    ] = None,
    root: Annotated[
        str | None,
        typer.Option("--root", "-r", help="Override the garden root."),
    ] = None,
    variables: Annotated[
        list[str] | None,
        typer.Option("--set", "-s", help="Override a variable with name=value."),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Increase verbosity."),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress progress output."),
    ] = False,
) -> None:
    """Validate the global options and store them for subcommands."""

    try:
        options = CommandOptions(
            config=config,
            chdir=chdir,
            color=color,
            debug=debug,
            root=root,
            variables=variables,
            verbose=verbose,
            quiet=quiet,
        )
    except ValidationError as exc:
        raise typer.BadParameter(exc.errors()[0]["msg"], param_hint="--color") from exc

    if options.chdir is not None:
        try:
            os.chdir(options.chdir)
        except OSError as exc:
            raise typer.BadParameter(f"{options.chdir}: {exc.strerror}", param_hint="--chdir") from exc
    configure_logging(options)
    ctx.obj = options


register_commands(app)


def main() -> None:
    """Run the ``garden`` command-line application."""

    app(prog_name="garden")


__all__ = ["app", "main"]
