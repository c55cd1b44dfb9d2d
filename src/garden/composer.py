# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Arena of configurations linked by graft relationships.

The forest owns every :class:`~garden.model.Configuration` in the process.
Nodes are addressed by small integer :data:`~garden.model.ConfigId` handles;
parent and child links are stored as handles, never as object references, so
the structure stays acyclic by construction: grafts are only ever appended
beneath an existing node.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from .errors import ReferentialIntegrityError
from .model import ConfigId, Configuration


@dataclass(slots=True)
class _Node:
    config: Configuration
    parent: ConfigId | None = None
    children: list[ConfigId] = field(default_factory=list)


class ConfigForest:
    """Own the root configuration and every graft attached beneath it."""

    def __init__(self, root: Configuration) -> None:
        """Create the forest with ``root`` as its fixed root node.

        Args:
            root: Root configuration; it is stamped with the root id.
        """

        self._nodes: list[_Node] = [_Node(config=root)]
        self._root_id = ConfigId(0)
        root.id = self._root_id
        root.parent_id = None

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[ConfigId]:
        return (ConfigId(idx) for idx in range(len(self._nodes)))

    def root_id(self) -> ConfigId:
        """Return the id of the root configuration."""

        return self._root_id

    def root(self) -> Configuration:
        """Return the root configuration."""

        return self.get(self._root_id)

    def get(self, config_id: ConfigId) -> Configuration:
        """Return the configuration stored under ``config_id``.

        Raises:
            ReferentialIntegrityError: No node exists for ``config_id``.
        """

        return self._node(config_id).config

    def parent_id(self, config_id: ConfigId) -> ConfigId | None:
        """Return the parent id of ``config_id`` (``None`` for the root)."""

        return self._node(config_id).parent

    def children(self, config_id: ConfigId) -> list[ConfigId]:
        """Return the ids of the grafts attached directly beneath ``config_id``."""

        return list(self._node(config_id).children)

    def add_graft(self, parent_id: ConfigId, config: Configuration) -> ConfigId:
        """Attach ``config`` beneath ``parent_id`` and return its new id.

        The child is stamped with its own id and with ``parent_id``.

        Raises:
            ReferentialIntegrityError: ``parent_id`` does not exist.
        """

        parent = self._node(parent_id)
        graft_id = ConfigId(len(self._nodes))
        self._nodes.append(_Node(config=config, parent=parent_id))
        parent.children.append(graft_id)
        config.id = graft_id
        config.parent_id = parent_id
        return graft_id

    def graft_config(self, config_id: ConfigId, name: str) -> Configuration:
        """Return the configuration attached for graft ``name`` of ``config_id``.

        Raises:
            NoSuchGraftError: The configuration declares no such graft.
            ReferentialIntegrityError: The graft has not been attached.
        """

        graft = self.get(config_id).get_graft(name)
        if graft.id is None:
            raise ReferentialIntegrityError(f"{graft.name}: graft has not been loaded")
        return self.get(graft.id)

    def _node(self, config_id: ConfigId) -> _Node:
        if not 0 <= config_id < len(self._nodes):
            raise ReferentialIntegrityError(f"unknown configuration id: {config_id}")
        return self._nodes[config_id]


__all__ = ["ConfigForest"]
