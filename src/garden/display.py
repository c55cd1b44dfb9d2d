# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Progress and diagnostic rendering with an explicit colour setting.

Colour is decided once from :class:`ColorMode` and carried by the
:class:`Display` value handed to every renderer; nothing toggles a
process-wide flag.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final

from rich.console import Console
from rich.text import Text

from .model import Tree

_COLOR_NAMES: Final[dict[str, str]] = {
    "auto": "auto",
    "-1": "auto",
    "on": "on",
    "1": "on",
    "true": "on",
    "yes": "on",
    "y": "on",
    "always": "on",
    "off": "off",
    "0": "off",
    "false": "off",
    "no": "off",
    "n": "off",
    "never": "off",
}


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


class ColorMode(str, Enum):
    """Enumerate the ``--color`` settings."""

    AUTO = "auto"
    ON = "on"
    OFF = "off"

    @classmethod
    def from_raw(cls, raw: str) -> ColorMode:
        """Return the mode named by ``raw``.

        Args:
            raw: Any of :meth:`names` (case-insensitive).

        Returns:
            ColorMode: The matching mode.

        Raises:
            ValueError: ``raw`` is not a recognised colour setting.
        """

        key = _COLOR_NAMES.get(raw.strip().lower())
        if key is None:
            raise ValueError(f"invalid color mode '{raw}', expected one of: {cls.names()}")
        return cls(key)

    @staticmethod
    def names() -> str:
        """Return the accepted spellings for help output."""

        return "auto, true, false, 1, 0, [y]es, [n]o, on, off, always, never"

    def is_enabled(self) -> bool:
        """Return ``True`` when colour output should be produced."""

        if self is ColorMode.AUTO:
            return detect_tty()
        return self is ColorMode.ON


@dataclass(slots=True)
class Display:
    """Render progress lines to stderr with a fixed colour preference."""

    color: bool
    console: Console

    @classmethod
    def create(cls, *, color: bool) -> Display:
        """Return a display writing to stderr with colour on or off."""

        console = Console(stderr=True, no_color=not color, highlight=False, soft_wrap=True)
        return cls(color=color, console=console)

    @classmethod
    def from_mode(cls, mode: ColorMode) -> Display:
        """Return a display for ``mode``, resolving ``auto`` against the TTY."""

        return cls.create(color=mode.is_enabled())

    def render_tree(self, tree: Tree, path: str, *, verbose: bool) -> Text:
        """Return the ``# name`` progress marker (with the path when verbose)."""

        text = Text()
        text.append("#", style=self._style("cyan"))
        text.append(" ")
        text.append(tree.name, style=self._style("bold blue"))
        if verbose:
            text.append("  ")
            text.append(path, style=self._style("blue"))
        return text

    def render_missing_tree(self, tree: Tree, path: str, *, verbose: bool) -> Text:
        """Return the marker printed for a tree that is not present on disk."""

        style = self._style("bold bright_black")
        parts = ["#", tree.name, path, "(skipped)"] if verbose else ["#", tree.name, "(skipped)"]
        return Text(" ".join(parts), style=style)

    def print_tree(self, tree: Tree, *, verbose: bool, quiet: bool) -> bool:
        """Print a tree marker and report whether its directory exists.

        Returns:
            bool: ``True`` when the tree path exists on disk.
        """

        if not tree.path_is_valid():
            if not quiet:
                self.console.print(self.render_missing_tree(tree, "[invalid-path]", verbose=verbose))
            return False
        path = tree.path_as_ref()
        if not Path(path).exists():
            if not quiet:
                self.console.print(self.render_missing_tree(tree, path, verbose=verbose))
            return False
        self.print_tree_details(tree, verbose=verbose, quiet=quiet)
        return True

    def print_tree_details(self, tree: Tree, *, verbose: bool, quiet: bool) -> None:
        """Print the progress marker for ``tree`` unless ``quiet``."""

        if quiet or not tree.path_is_valid():
            return
        self.console.print(self.render_tree(tree, tree.path_as_ref(), verbose=verbose))

    def error(self, message: str) -> None:
        """Print an ``error:`` line."""

        text = Text("error:", style=self._style("bold red"))
        text.append(f" {message}")
        self.console.print(text)

    def _style(self, style: str) -> str:
        return style if self.color else ""


__all__ = ["ColorMode", "Display", "detect_tty"]
