# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Trees, templates, groups, gardens and grafts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NewType

from ..errors import ConfigurationError
from .variables import MultiVariable, NamedVariable, Variable, reset_all

TreeIndex = int
GroupIndex = int
GardenIndex = int
ConfigId = NewType("ConfigId", int)


@dataclass(slots=True)
class Tree:
    """A named working directory and the variables scoped to it.

    ``path`` is resolved once by :meth:`Configuration.initialize` and is never
    cleared by :meth:`reset_variables`; it is structural rather than scoped.
    """

    name: str
    path: Variable = field(default_factory=Variable)
    is_symlink: bool = False
    symlink: Variable = field(default_factory=Variable)
    templates: list[str] = field(default_factory=list)
    variables: list[NamedVariable] = field(default_factory=list)
    environment: list[MultiVariable] = field(default_factory=list)
    commands: list[MultiVariable] = field(default_factory=list)
    gitconfig: list[NamedVariable] = field(default_factory=list)
    remotes: list[NamedVariable] = field(default_factory=list)
    clone_depth: int = 0

    def path_is_valid(self) -> bool:
        """Return ``True`` once the tree path has been resolved."""

        return self.path.has_value()

    def path_as_ref(self) -> str:
        """Return the resolved absolute tree path.

        Raises:
            ConfigurationError: The path has not been resolved.
        """

        value = self.path.get_value()
        if value is None:
            raise ConfigurationError(f"unset tree path for {self.name}")
        return value

    def symlink_as_ref(self) -> str:
        """Return the resolved symlink target.

        Raises:
            ConfigurationError: The symlink target has not been resolved.
        """

        value = self.symlink.get_value()
        if value is None:
            raise ConfigurationError(f"unset symlink path for {self.name}")
        return value

    def reset_variables(self) -> None:
        """Clear every scoped cache except the structural ``path``."""

        reset_all(self.variables, self.gitconfig, self.remotes, self.environment, self.commands)


@dataclass(slots=True)
class Template:
    """Reusable bundle of variables and commands applied to trees by name."""

    name: str
    extend: list[str] = field(default_factory=list)
    variables: list[NamedVariable] = field(default_factory=list)
    environment: list[MultiVariable] = field(default_factory=list)
    commands: list[MultiVariable] = field(default_factory=list)
    gitconfig: list[NamedVariable] = field(default_factory=list)
    remotes: list[NamedVariable] = field(default_factory=list)
    clone_depth: int = 0

    def reset_variables(self) -> None:
        reset_all(self.variables, self.gitconfig, self.remotes, self.environment, self.commands)


@dataclass(slots=True)
class Group:
    """Named, ordered list of tree or group name patterns."""

    name: str
    members: list[str] = field(default_factory=list)
    index: GroupIndex = 0


@dataclass(slots=True)
class Garden:
    """Named aggregate of trees and groups with its own overlay scope."""

    name: str
    trees: list[str] = field(default_factory=list)
    groups: list[str] = field(default_factory=list)
    variables: list[NamedVariable] = field(default_factory=list)
    environment: list[MultiVariable] = field(default_factory=list)
    commands: list[MultiVariable] = field(default_factory=list)
    gitconfig: list[NamedVariable] = field(default_factory=list)
    index: GardenIndex = 0

    def reset_variables(self) -> None:
        reset_all(self.variables, self.gitconfig, self.environment, self.commands)


@dataclass(slots=True)
class Graft:
    """Named link to a child configuration document.

    ``root`` optionally remaps the child's root relative to the parent root and
    ``config`` is the child document path relative to the parent document.
    ``id`` is filled in once the loader attaches the child to the forest.
    """

    name: str
    root: str = ""
    config: str = ""
    id: ConfigId | None = None


__all__ = [
    "ConfigId",
    "Garden",
    "GardenIndex",
    "Graft",
    "Group",
    "GroupIndex",
    "Template",
    "Tree",
    "TreeIndex",
]
