# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""The root configuration aggregate and its initialisation lifecycle.

A :class:`Configuration` is populated by the loader and then initialised once:

1. ``root`` is evaluated and stored as :attr:`Configuration.root_path`.
2. Every tree path (and symlink target) is resolved to an absolute path.
3. Garden and group indices are assigned.
4. Variables are reset and built-in values are written into their slots.

Between evaluations against different contexts, :meth:`Configuration.reset`
clears cached values so one tree's results never leak into the next.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .. import evaluation, syntax
from ..errors import GardenAssertionError, NoSuchGraftError
from .entities import ConfigId, Garden, Graft, Group, Template, Tree, TreeIndex
from .variables import MultiVariable, NamedVariable, Variable, find_variable, reset_all

LOGGER = logging.getLogger(__name__)

GARDEN_ROOT: Final[str] = "GARDEN_ROOT"
GARDEN_CONFIG_DIR: Final[str] = "GARDEN_CONFIG_DIR"
TREE_NAME: Final[str] = "TREE_NAME"
TREE_PATH: Final[str] = "TREE_PATH"
DEFAULT_SHELL: Final[str] = "sh"


@dataclass(slots=True)
class Configuration:
    """An instantiated garden document."""

    root: Variable = field(default_factory=Variable)
    root_path: Path = field(default_factory=Path)
    shell: str = DEFAULT_SHELL
    variables: list[NamedVariable] = field(default_factory=list)
    environment: list[MultiVariable] = field(default_factory=list)
    commands: list[MultiVariable] = field(default_factory=list)
    gitconfig: list[NamedVariable] = field(default_factory=list)
    trees: list[Tree] = field(default_factory=list)
    gardens: list[Garden] = field(default_factory=list)
    groups: list[Group] = field(default_factory=list)
    templates: list[Template] = field(default_factory=list)
    grafts: list[Graft] = field(default_factory=list)
    tree_search_path: list[Path] = field(default_factory=list)
    path: Path | None = None
    dirname: Path | None = None
    id: ConfigId | None = None
    parent_id: ConfigId | None = None

    # Lifecycle -----------------------------------------------------------------

    def initialize(self) -> None:
        """Resolve the root and tree paths, assign indices and reset variables."""

        self._ensure_builtin_variables()
        self.reset_builtin_variables()

        value = evaluation.value(self, self.root.expr)
        self.root_path = self._resolve_root(value)
        self.root.set_value(str(self.root_path))
        self.reset()
        LOGGER.debug("root=%s config=%s", self.root_path, self.path)

        self.update_tree_paths()
        self.update_indexes()
        if not self.tree_search_path:
            self.tree_search_path = [self.root_path]
            if self.dirname is not None and self.dirname != self.root_path:
                self.tree_search_path.append(self.dirname)
        self.reset()

    def reset(self) -> None:
        """Clear cached values and rewrite the built-in variables."""

        self.reset_variables()
        self.reset_builtin_variables()

    def reset_variables(self) -> None:
        """Clear every cached value except the structural tree paths."""

        reset_all(self.variables, self.environment, self.commands, self.gitconfig)
        for tree in self.trees:
            tree.reset_variables()
        for template in self.templates:
            template.reset_variables()
        for garden in self.gardens:
            garden.reset_variables()

    def reset_builtin_variables(self) -> None:
        """Write ``GARDEN_ROOT`` and the per-tree ``TREE_NAME``/``TREE_PATH`` slots."""

        root = self.root.get_value()
        if root is not None:
            _write_slot(self.variables, 0, GARDEN_ROOT, root)
        if self.dirname is not None:
            _write_slot(self.variables, 1, GARDEN_CONFIG_DIR, str(self.dirname))
        for tree in self.trees:
            _write_slot(tree.variables, 0, TREE_NAME, tree.name)
            if tree.path_is_valid():
                _write_slot(tree.variables, 1, TREE_PATH, tree.path_as_ref())

    def update_indexes(self) -> None:
        """Assign the stable ``index`` of every group and garden."""

        for idx, group in enumerate(self.groups):
            group.index = idx
        for idx, garden in enumerate(self.gardens):
            garden.index = idx

    def update_tree_paths(self) -> None:
        """Evaluate each tree's ``path`` (and ``symlink``) relative to the root."""

        for tree in self.trees:
            tree.path.set_value(self.eval_tree_path(tree.path.expr or tree.name))
            if tree.is_symlink:
                tree.symlink.set_value(self.eval_tree_path(tree.symlink.expr))

    def _ensure_builtin_variables(self) -> None:
        _ensure_slots(self.variables, (GARDEN_ROOT, GARDEN_CONFIG_DIR))
        for tree in self.trees:
            _ensure_slots(tree.variables, (TREE_NAME, TREE_PATH))

    def _resolve_root(self, value: str) -> Path:
        if not value:
            return self.dirname if self.dirname is not None else Path.cwd()
        root = Path(value).expanduser()
        if root.is_absolute():
            return root
        base = self.dirname if self.dirname is not None else Path.cwd()
        return base / root

    # Paths ---------------------------------------------------------------------

    def tree_path(self, path: str) -> str:
        """Return ``path`` made absolute against the garden root."""

        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            return str(candidate)
        return str(self.root_path / candidate)

    def eval_tree_path(self, path: str) -> str:
        """Evaluate ``path`` and make it absolute against the garden root."""

        return self.tree_path(evaluation.value(self, path))

    def config_path(self, path: str) -> str:
        """Return ``path`` made absolute against the document directory."""

        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            return str(candidate)
        if self.dirname is not None:
            return str(self.dirname / candidate)
        return self.tree_path(path)

    def eval_config_path(self, path: str) -> str:
        """Evaluate ``path`` and make it absolute against the document directory."""

        return self.config_path(evaluation.value(self, path))

    def set_path(self, path: Path) -> None:
        """Record the document path and its directory."""

        self.path = path
        self.dirname = path.parent

    def get_path(self) -> Path:
        """Return the document path.

        Raises:
            GardenAssertionError: The configuration was not read from a file.
        """

        if self.path is None:
            raise GardenAssertionError("cfg.path is unset")
        return self.path

    # Lookups -------------------------------------------------------------------

    def set_variable(self, name: str, expr: str) -> None:
        """Override (or add) the global variable ``name`` with ``expr``."""

        existing = find_variable(self.variables, name)
        if existing is None:
            self.variables.append(NamedVariable.new(name, expr))
        else:
            existing.set_expr(expr)
            existing.reset()

    def tree_index(self, name: str) -> TreeIndex | None:
        """Return the index of the tree called ``name``."""

        for idx, tree in enumerate(self.trees):
            if tree.name == name:
                return idx
        return None

    def get_tree(self, name: str) -> Tree | None:
        """Return the tree called ``name``."""

        idx = self.tree_index(name)
        return None if idx is None else self.trees[idx]

    def get_garden(self, name: str) -> Garden | None:
        """Return the garden called ``name``."""

        return next((garden for garden in self.gardens if garden.name == name), None)

    def get_group(self, name: str) -> Group | None:
        """Return the group called ``name``."""

        return next((group for group in self.groups if group.name == name), None)

    def get_template(self, name: str) -> Template | None:
        """Return the template called ``name``."""

        return next((template for template in self.templates if template.name == name), None)

    def contains_graft(self, name: str) -> bool:
        """Return ``True`` when this configuration declares the graft ``name``."""

        graft_name = syntax.trim(name)
        return any(graft.name == graft_name for graft in self.grafts)

    def get_graft(self, name: str) -> Graft:
        """Return the graft declared as ``name``.

        Args:
            name: Graft name; whitespace and a selector marker are ignored.

        Returns:
            Graft: The declared graft.

        Raises:
            NoSuchGraftError: This configuration declares no such graft.
        """

        graft_name = syntax.trim(name)
        for graft in self.grafts:
            if graft.name == graft_name:
                return graft
        raise NoSuchGraftError(name)


def _ensure_slots(variables: list[NamedVariable], names: tuple[str, ...]) -> None:
    for slot, name in enumerate(names):
        if len(variables) > slot and variables[slot].name == name:
            continue
        existing = find_variable(variables, name)
        if existing is not None:
            variables.remove(existing)
        variables.insert(slot, NamedVariable.new(name, ""))


def _write_slot(variables: list[NamedVariable], slot: int, name: str, value: str) -> None:
    if len(variables) > slot and variables[slot].name == name:
        variables[slot].set_expr(value)
        variables[slot].set_value(value)


__all__ = [
    "DEFAULT_SHELL",
    "GARDEN_CONFIG_DIR",
    "GARDEN_ROOT",
    "TREE_NAME",
    "TREE_PATH",
    "Configuration",
]
