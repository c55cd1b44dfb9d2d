# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Map subcommand names onto built-in commands or user-defined commands."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final


class Command(str, Enum):
    """Built-in ``garden`` subcommands."""

    CMD = "cmd"
    EVAL = "eval"
    EXEC = "exec"
    INSPECT = "inspect"
    LIST = "list"
    SHELL = "shell"


@dataclass(frozen=True, slots=True)
class CustomCommand:
    """A subcommand naming a ``commands`` entry from the garden document."""

    name: str


ALIASES: Final[dict[str, Command]] = {
    "ls": Command.LIST,
    "sh": Command.SHELL,
}


def parse_command(name: str) -> Command | CustomCommand:
    """Return the built-in command called ``name`` or a custom command.

    Args:
        name: Subcommand name as typed on the command line.

    Returns:
        Command | CustomCommand: The built-in command (aliases resolved) or a
        :class:`CustomCommand` wrapping ``name``.
    """

    alias = ALIASES.get(name)
    if alias is not None:
        return alias
    try:
        return Command(name)
    except ValueError:
        return CustomCommand(name)


__all__ = ["ALIASES", "Command", "CustomCommand", "parse_command"]
