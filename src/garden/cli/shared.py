# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""State and error handling shared by every ``garden`` subcommand."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Final

import typer

from ..composer import ConfigForest
from ..config import CommandOptions, find_config, load_forest
from ..display import Display
from ..errors import ExitStatus, GardenError
from ..execution import Orchestrator
from ..model import Configuration

LOGGER_NAME: Final[str] = "garden"
DEBUG_HANDLER_NAME: Final[str] = "garden-debug"
DEBUG_CATEGORIES: Final[dict[str, str]] = {
    "all": LOGGER_NAME,
    "config": f"{LOGGER_NAME}.config",
    "eval": f"{LOGGER_NAME}.evaluation",
    "exec": f"{LOGGER_NAME}.execution",
    "process": f"{LOGGER_NAME}.process",
    "query": f"{LOGGER_NAME}.query",
}


@dataclass(slots=True)
class AppContext:
    """Loaded configuration forest plus the options and renderer for one run."""

    options: CommandOptions
    display: Display
    forest: ConfigForest

    @property
    def config(self) -> Configuration:
        """Return the root configuration."""

        return self.forest.root()

    @property
    def verbose(self) -> bool:
        return self.options.verbose > 0

    def orchestrator(self) -> Orchestrator:
        """Return an orchestrator bound to this context's configuration and output."""

        return Orchestrator(
            config=self.config,
            forest=self.forest,
            display=self.display,
            quiet=self.options.quiet,
            verbose=self.verbose,
        )


def get_options(ctx: typer.Context) -> CommandOptions:
    """Return the global options stored by the application callback."""

    options = ctx.find_root().obj
    return options if isinstance(options, CommandOptions) else CommandOptions()


def configure_logging(options: CommandOptions) -> None:
    """Stream DEBUG records to stderr for each ``--debug`` category.

    Unknown categories enable debugging for the whole ``garden`` logger.
    """

    for category, logger_name in DEBUG_CATEGORIES.items():
        if options.is_debug(category):
            _attach_debug_handler(logging.getLogger(logger_name))
    if any(category not in DEBUG_CATEGORIES for category in options.debug):
        _attach_debug_handler(logging.getLogger(LOGGER_NAME))


def _attach_debug_handler(logger: logging.Logger) -> None:
    if any(handler.get_name() == DEBUG_HANDLER_NAME for handler in logger.handlers):
        return
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.set_name(DEBUG_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False


def load_app_context(options: CommandOptions, display: Display) -> AppContext:
    """Discover, read and initialise the configuration named by ``options``.

    Raises:
        ConfigurationError: The document cannot be found or loaded.
        UsageError: A ``--set`` override is malformed.
    """

    path = find_config(options.config)
    forest = load_forest(path, root=options.root, overrides=options.overrides())
    return AppContext(options=options, display=display, forest=forest)


@contextmanager
def garden_errors(display: Display) -> Iterator[None]:
    """Translate :class:`GardenError` into :class:`typer.Exit`.

    :class:`ExitStatus` exits silently with its code; every other error is
    reported as ``error: <message>`` before exiting with its exit code.
    """

    try:
        yield
    except ExitStatus as exc:
        raise typer.Exit(code=exc.code) from exc
    except GardenError as exc:
        display.error(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc


def invoke(ctx: typer.Context, action: Callable[[AppContext], int]) -> None:
    """Load the application context, run ``action`` and exit with its status.

    Raises:
        typer.Exit: Always raised to terminate the command with an exit status.
    """

    options = get_options(ctx)
    display = Display.from_mode(options.color)
    with garden_errors(display):
        app_context = load_app_context(options, display)
        status = action(app_context)
    raise typer.Exit(code=status)


__all__ = [
    "AppContext",
    "DEBUG_HANDLER_NAME",
    "configure_logging",
    "garden_errors",
    "get_options",
    "invoke",
    "load_app_context",
]
