# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Lexical conventions for selectors, expressions and environment names.

Selectors may begin with a one-character marker that forces how the rest of
the string is interpreted:

* ``@name`` matches gardens only.
* ``%name`` matches groups only.
* ``:name`` matches trees only.

A ``graft::pattern`` selector resolves ``pattern`` inside the named graft.
Expressions that begin with ``$ `` are exec expressions whose captured output
becomes the value. Environment names ending in ``=`` replace the inherited
value and names ending in ``+`` append to it; bare names prepend.
"""

from __future__ import annotations

from typing import Final

GARDEN_MARKER: Final[str] = "@"
GROUP_MARKER: Final[str] = "%"
TREE_MARKER: Final[str] = ":"
GRAFT_SEPARATOR: Final[str] = "::"
EXEC_MARKER: Final[str] = "$ "
REPLACE_OP: Final[str] = "="
APPEND_OP: Final[str] = "+"
PATH_SEPARATOR: Final[str] = ":"

_MARKERS: Final[tuple[str, ...]] = (GARDEN_MARKER, GROUP_MARKER, TREE_MARKER)


def is_garden(value: str) -> bool:
    """Return ``True`` when ``value`` carries the garden marker."""

    return value.startswith(GARDEN_MARKER)


def is_group(value: str) -> bool:
    """Return ``True`` when ``value`` carries the group marker."""

    return value.startswith(GROUP_MARKER)


def is_tree(value: str) -> bool:
    """Return ``True`` when ``value`` carries the tree marker.

    A leading graft separator (``::``) is not a tree marker.
    """

    return value.startswith(TREE_MARKER) and not value.startswith(GRAFT_SEPARATOR)


def is_graft(value: str) -> bool:
    """Return ``True`` when ``value`` names an entity inside a graft."""

    return GRAFT_SEPARATOR in trim(value)


def trim(value: str) -> str:
    """Strip surrounding whitespace and one leading selector marker.

    Args:
        value: Raw selector or entity name.

    Returns:
        str: The name with its marker removed.
    """

    stripped = value.strip()
    if stripped and (is_garden(stripped) or is_group(stripped) or is_tree(stripped)):
        return stripped[1:].strip()
    return stripped


def marker(value: str) -> str:
    """Return the selector marker carried by ``value`` or an empty string."""

    stripped = value.strip()
    for candidate in _MARKERS:
        if candidate == TREE_MARKER and not is_tree(stripped):
            continue
        if stripped.startswith(candidate):
            return candidate
    return ""


def split_graft(value: str) -> tuple[str, str]:
    """Split ``graft::rest`` into its graft name and remainder.

    Args:
        value: Selector with its marker already removed.

    Returns:
        tuple[str, str]: ``(graft_name, remainder)``. The graft name is empty
        when ``value`` is not graft-qualified.
    """

    if GRAFT_SEPARATOR not in value:
        return "", value
    graft_name, remainder = value.split(GRAFT_SEPARATOR, 1)
    return graft_name.strip(), remainder


def is_exec(expr: str) -> bool:
    """Return ``True`` when ``expr`` is an exec expression."""

    return expr.startswith(EXEC_MARKER)


def trim_exec(expr: str) -> str:
    """Return the command portion of an exec expression."""

    if is_exec(expr):
        return expr[len(EXEC_MARKER) :]
    return expr


def is_replace_op(name: str) -> bool:
    """Return ``True`` for environment names that replace the inherited value."""

    return name.endswith(REPLACE_OP)


def is_append_op(name: str) -> bool:
    """Return ``True`` for environment names that append to the inherited value."""

    return name.endswith(APPEND_OP)


def trim_op(name: str) -> str:
    """Remove a trailing environment operator from ``name``."""

    if is_replace_op(name) or is_append_op(name):
        return name[:-1]
    return name


__all__ = [
    "APPEND_OP",
    "EXEC_MARKER",
    "GARDEN_MARKER",
    "GRAFT_SEPARATOR",
    "GROUP_MARKER",
    "PATH_SEPARATOR",
    "REPLACE_OP",
    "TREE_MARKER",
    "is_append_op",
    "is_exec",
    "is_garden",
    "is_graft",
    "is_group",
    "is_replace_op",
    "is_tree",
    "marker",
    "split_graft",
    "trim",
    "trim_exec",
    "trim_op",
]
