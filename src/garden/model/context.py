# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Evaluation contexts and parsed tree queries."""

from __future__ import annotations

import re
from dataclasses import dataclass
from fnmatch import translate

from .. import syntax
from .entities import ConfigId, GardenIndex, GroupIndex, TreeIndex


@dataclass(frozen=True, slots=True)
class EvalContext:
    """Where an expression is evaluated: a configuration plus optional indices."""

    config: ConfigId | None = None
    tree: TreeIndex | None = None
    garden: GardenIndex | None = None
    group: GroupIndex | None = None


@dataclass(frozen=True, slots=True)
class TreeContext:
    """A resolved ``(tree, garden, group)`` unit of execution."""

    tree: TreeIndex
    config: ConfigId | None = None
    garden: GardenIndex | None = None
    group: GroupIndex | None = None

    def as_eval_context(self) -> EvalContext:
        """Return the :class:`EvalContext` describing this tree context."""

        return EvalContext(config=self.config, tree=self.tree, garden=self.garden, group=self.group)


@dataclass(frozen=True, slots=True)
class TreeQuery:
    """Parsed selector: glob pattern plus the entity kinds it may match.

    Attributes:
        query: The raw selector string.
        glob: Glob text after the marker (and graft prefix) were stripped.
        pattern: Compiled form of :attr:`glob`.
        graft: Graft name for ``graft::pattern`` selectors, otherwise empty.
    """

    query: str
    glob: str
    pattern: re.Pattern[str]
    graft: str = ""
    is_default: bool = False
    is_garden: bool = False
    is_group: bool = False
    is_tree: bool = False
    include_gardens: bool = True
    include_groups: bool = True
    include_trees: bool = True

    @classmethod
    def parse(cls, query: str) -> TreeQuery:
        """Parse ``query`` into a :class:`TreeQuery`.

        Args:
            query: Selector such as ``@dev``, ``%libs``, ``:tree*`` or ``name``.

        Returns:
            TreeQuery: The parsed selector.
        """

        mark = syntax.marker(query)
        graft, glob = syntax.split_graft(syntax.trim(query))
        flags = {
            syntax.GARDEN_MARKER: {"is_garden": True, "include_groups": False, "include_trees": False},
            syntax.GROUP_MARKER: {"is_group": True, "include_gardens": False, "include_trees": False},
            syntax.TREE_MARKER: {"is_tree": True, "include_gardens": False, "include_groups": False},
        }.get(mark, {"is_default": True})
        return cls(
            query=query,
            glob=glob,
            pattern=compile_glob(glob),
            graft=graft,
            **flags,
        )

    def matches(self, name: str) -> bool:
        """Return ``True`` when ``name`` matches the query pattern."""

        return self.pattern.match(name) is not None

    def without_graft(self) -> TreeQuery:
        """Return the query that applies inside the graft named by :attr:`graft`."""

        return TreeQuery.parse(syntax.marker(self.query) + self.glob)


def compile_glob(glob: str) -> re.Pattern[str]:
    """Compile a ``*``/``?``/``[...]`` glob into an anchored regular expression."""

    return re.compile(translate(glob))


def glob_matches(glob: str, name: str) -> bool:
    """Return ``True`` when ``name`` matches ``glob``."""

    return compile_glob(glob).match(name) is not None


__all__ = [
    "EvalContext",
    "TreeContext",
    "TreeQuery",
    "compile_glob",
    "glob_matches",
]
