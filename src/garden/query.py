# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve selector strings into ordered lists of tree contexts.

Resolution strategy
-------------------
* Gardens whose name matches are expanded (groups first, then trees, each in
  declared order) into one context per ``(tree, garden)`` pair. A tree reached
  through two matching gardens yields two contexts; contexts are never
  deduplicated because garden-scoped values can differ.
* Groups whose name matches are expanded recursively into contexts that carry
  no garden.
* Trees whose name matches yield one context each, with no garden or group.

Unmarked queries try gardens, then groups, then trees, and finally fall back
to treating the selector as a filesystem path to a known tree. Matching
nothing is not an error; the caller decides what an empty result means.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from . import syntax
from .errors import ConfigurationError, ReferentialIntegrityError
from .model import Configuration, Garden, GardenIndex, Group, GroupIndex, TreeContext, TreeQuery, glob_matches

if TYPE_CHECKING:
    from .composer import ConfigForest

LOGGER = logging.getLogger(__name__)


def resolve_trees(
    config: Configuration,
    query: str | TreeQuery,
    *,
    forest: ConfigForest | None = None,
) -> list[TreeContext]:
    """Resolve ``query`` against ``config`` into ordered tree contexts.

    Args:
        config: Configuration to search.
        query: Selector string (or an already parsed :class:`TreeQuery`).
        forest: Forest used to reach graft configurations for
            ``graft::pattern`` selectors.

    Returns:
        list[TreeContext]: Matching contexts in resolution order; possibly empty.

    Raises:
        NoSuchGraftError: A graft-qualified selector names an unknown graft.
        ReferentialIntegrityError: The named graft has not been loaded.
    """

    tree_query = query if isinstance(query, TreeQuery) else TreeQuery.parse(query)
    LOGGER.debug("query=%s glob=%s graft=%s", tree_query.query, tree_query.glob, tree_query.graft)
    if tree_query.graft:
        graft = config.get_graft(tree_query.graft)
        if forest is None or graft.id is None:
            raise ReferentialIntegrityError(f"{graft.name}: graft has not been loaded")
        return resolve_trees(forest.get(graft.id), tree_query.without_graft(), forest=forest)

    if tree_query.include_gardens:
        contexts = garden_trees(config, tree_query)
        if contexts:
            return contexts

    if tree_query.include_groups:
        contexts = []
        for group in config.groups:
            if tree_query.matches(group.name):
                contexts.extend(trees_from_group(config, group))
        if contexts:
            return contexts

    if tree_query.include_trees:
        contexts = [
            TreeContext(tree=idx, config=config.id)
            for idx, tree in enumerate(config.trees)
            if tree_query.matches(tree.name)
        ]
        if contexts:
            return contexts

    if tree_query.is_default:
        context = tree_from_path(config, tree_query.query)
        if context is not None:
            return [context]

    return []


def garden_trees(config: Configuration, tree_query: TreeQuery) -> list[TreeContext]:
    """Return the contexts of every garden whose name matches ``tree_query``."""

    contexts: list[TreeContext] = []
    for garden in config.gardens:
        if tree_query.matches(garden.name):
            contexts.extend(trees_from_garden(config, garden))
    return contexts


def trees_from_garden(config: Configuration, garden: Garden) -> list[TreeContext]:
    """Expand a garden's groups and then its trees into contexts for that garden."""

    contexts: list[TreeContext] = []
    for group_pattern in garden.groups:
        for group in config.groups:
            if glob_matches(group_pattern, group.name):
                contexts.extend(trees_from_group(config, group, garden=garden.index))
    for tree_pattern in garden.trees:
        contexts.extend(trees_from_pattern(config, tree_pattern, garden=garden.index))
    return contexts


def trees_from_group(
    config: Configuration,
    group: Group,
    *,
    garden: GardenIndex | None = None,
    _seen: frozenset[str] = frozenset(),
) -> list[TreeContext]:
    """Expand ``group`` members, recursing into nested groups.

    A member pattern that matches trees contributes those trees; otherwise it
    is matched against group names and each matching group is expanded. A
    group that is already being expanded is skipped.
    """

    seen = _seen | {group.name}
    contexts: list[TreeContext] = []
    for member in group.members:
        matched = trees_from_pattern(config, member, garden=garden, group=group.index)
        if matched:
            contexts.extend(matched)
            continue
        for nested in config.groups:
            if nested.name in seen or not glob_matches(member, nested.name):
                continue
            contexts.extend(trees_from_group(config, nested, garden=garden, _seen=seen))
    return contexts


def trees_from_pattern(
    config: Configuration,
    pattern: str,
    *,
    garden: GardenIndex | None = None,
    group: GroupIndex | None = None,
) -> list[TreeContext]:
    """Return one context per tree whose name matches the glob ``pattern``."""

    return [
        TreeContext(tree=idx, config=config.id, garden=garden, group=group)
        for idx, tree in enumerate(config.trees)
        if glob_matches(pattern, tree.name)
    ]


def tree_context(config: Configuration, tree: str, garden: str | None = None) -> TreeContext:
    """Resolve exactly one tree, optionally paired with exactly one garden.

    Args:
        config: Configuration to search.
        tree: Tree name, or a path to a known tree.
        garden: Optional garden name (or glob) that must contain the tree.

    Returns:
        TreeContext: The single resolved context.

    Raises:
        ConfigurationError: The tree or garden cannot be found, or the garden
            does not contain the tree.
    """

    tree_name = syntax.trim(tree)
    idx = config.tree_index(tree_name)
    if idx is None:
        by_path = tree_from_path(config, tree)
        if by_path is None:
            raise ConfigurationError(f"tree not found: {tree}")
        idx = by_path.tree
    context = TreeContext(tree=idx, config=config.id)
    if not garden:
        return context

    contexts = garden_trees(config, TreeQuery.parse(syntax.GARDEN_MARKER + syntax.trim(garden)))
    if not contexts:
        raise ConfigurationError(f"garden not found: {garden}")
    for candidate in contexts:
        if candidate.tree == idx:
            return TreeContext(tree=idx, config=config.id, garden=candidate.garden)
    raise ConfigurationError(f"invalid arguments: '{tree}' is not part of the '{garden}' garden")


def tree_from_path(config: Configuration, path: str) -> TreeContext | None:
    """Return the context of the tree located at ``path``, if any.

    Relative paths are tried against the current directory and then against
    each entry of the configuration's tree search path.
    """

    candidates = [Path(path).expanduser()]
    if not candidates[0].is_absolute():
        candidates.extend(base / path for base in config.tree_search_path)
    for candidate in candidates:
        if not candidate.exists():
            continue
        name = tree_name_from_abspath(config, candidate.resolve())
        if name is not None:
            idx = config.tree_index(name)
            if idx is not None:
                return TreeContext(tree=idx, config=config.id)
    return None


def tree_name_from_abspath(config: Configuration, path: Path) -> str | None:
    """Map a canonical filesystem ``path`` back to a declared tree name."""

    for tree in config.trees:
        if tree.is_symlink or not tree.path_is_valid():
            continue
        tree_path = Path(tree.path_as_ref())
        try:
            canonical = tree_path.resolve(strict=True)
        except OSError:
            continue
        if canonical == path:
            return tree.name
    return None


__all__ = [
    "garden_trees",
    "resolve_trees",
    "tree_context",
    "tree_from_path",
    "tree_name_from_abspath",
    "trees_from_garden",
    "trees_from_group",
    "trees_from_pattern",
]
