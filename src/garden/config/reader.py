# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Read garden YAML documents into :class:`~garden.model.Configuration` trees.

A document looks like::

    garden:
      root: ${GARDEN_CONFIG_DIR}
      shell: sh
    variables: {name: expr}
    environment: {NAME: expr | [expr, ...]}
    commands: {name: command | [command, ...]}
    templates: {name: {extend: [...], variables: ..., environment: ..., ...}}
    trees: {name: url | {path: ..., url: ..., templates: [...], ...}}
    groups: {name: [pattern, ...]}
    gardens: {name: {trees: [...], groups: [...], variables: ..., ...}}
    grafts: {name: path | {config: path, root: path}}

Scalars are kept as strings; YAML booleans become ``"true"``/``"false"`` and
single values are accepted wherever lists are.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Final

import yaml
from pydantic import ValidationError

from ..composer import ConfigForest
from ..errors import ConfigurationError
from ..model import (
    Configuration,
    Garden,
    Graft,
    Group,
    MultiVariable,
    NamedVariable,
    Template,
    Tree,
    Variable,
)
from .options import GraftEntry

LOGGER = logging.getLogger(__name__)

DEFAULT_ROOT: Final[str] = "${GARDEN_CONFIG_DIR}"
ORIGIN: Final[str] = "origin"


def read_yaml(path: Path) -> dict[str, Any]:
    """Return the top-level mapping stored in ``path``.

    Raises:
        ConfigurationError: The file cannot be read, is not valid YAML, or
            does not hold a mapping.
    """

    try:
        with path.open(encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except OSError as exc:
        raise ConfigurationError(f"unable to read {path}: {exc.strerror or exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"{path}: invalid YAML: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"{path}: expected a mapping at the top level")
    return dict(data)


def parse(data: Mapping[str, Any], config: Configuration | None = None) -> Configuration:
    """Populate ``config`` (or a new configuration) from a document mapping.

    The configuration is not initialised; call
    :meth:`Configuration.initialize` once overrides have been applied.
    """

    cfg = config if config is not None else Configuration()
    garden_section = _mapping(data.get("garden"), "garden")
    cfg.root = Variable(_string(garden_section.get("root", DEFAULT_ROOT)))
    if "shell" in garden_section:
        cfg.shell = _string(garden_section["shell"]) or cfg.shell

    cfg.variables = _named_variables(data.get("variables"), "variables")
    cfg.environment = _multi_variables(data.get("environment"), "environment")
    cfg.commands = _multi_variables(data.get("commands"), "commands")
    cfg.gitconfig = _named_variables(data.get("gitconfig"), "gitconfig")
    cfg.templates = [
        _template(name, raw) for name, raw in _mapping(data.get("templates"), "templates").items()
    ]
    cfg.trees = [_tree(name, raw) for name, raw in _mapping(data.get("trees"), "trees").items()]
    cfg.groups = [
        Group(name=str(name), members=_strings(raw))
        for name, raw in _mapping(data.get("groups"), "groups").items()
    ]
    cfg.gardens = [_garden(name, raw) for name, raw in _mapping(data.get("gardens"), "gardens").items()]
    cfg.grafts = [_graft(name, raw) for name, raw in _mapping(data.get("grafts"), "grafts").items()]
    return cfg


def read_config(
    path: Path | None,
    *,
    root: str | None = None,
    overrides: Iterable[tuple[str, str]] = (),
) -> Configuration:
    """Read and initialise a single configuration without loading its grafts.

    Args:
        path: Document to read; ``None`` yields an empty configuration rooted
            at the current directory.
        root: Replacement root, resolved against the current directory.
        overrides: ``(name, expr)`` pairs replacing global variables.

    Returns:
        Configuration: The initialised configuration.
    """

    config = Configuration()
    if path is not None:
        config.set_path(path.resolve())
        parse(read_yaml(path), config)
    if root is not None:
        override = Path(root).expanduser()
        config.root = Variable(str(override if override.is_absolute() else Path.cwd() / override))
    for name, expr in overrides:
        config.set_variable(name, expr)
    config.initialize()
    return config


def load_forest(
    path: Path | None,
    *,
    root: str | None = None,
    overrides: Iterable[tuple[str, str]] = (),
) -> ConfigForest:
    """Read the root configuration and attach every graft beneath it.

    Raises:
        ConfigurationError: A document cannot be read, or grafts form a cycle.
    """

    config = read_config(path, root=root, overrides=overrides)
    forest = ConfigForest(config)
    active = [config.path] if config.path is not None else []
    _load_grafts(forest, config, active)
    return forest


def _load_grafts(forest: ConfigForest, parent: Configuration, active: list[Path]) -> None:
    assert parent.id is not None
    for graft in parent.grafts:
        graft_path = Path(parent.eval_config_path(graft.config)).resolve()
        if graft_path in active:
            chain = " -> ".join(str(item) for item in [*active, graft_path])
            raise ConfigurationError(f"{graft.name}: graft cycle detected: {chain}")
        child = Configuration()
        child.set_path(graft_path)
        parse(read_yaml(graft_path), child)
        if graft.root:
            child.root = Variable(parent.eval_tree_path(graft.root))
        child.initialize()
        graft.id = forest.add_graft(parent.id, child)
        LOGGER.debug("graft=%s id=%s config=%s", graft.name, graft.id, graft_path)
        _load_grafts(forest, child, [*active, graft_path])


# Sections ----------------------------------------------------------------------


def _tree(name: Any, raw: Any) -> Tree:
    tree = Tree(name=str(name))
    if raw is None:
        return tree
    if isinstance(raw, str):
        tree.remotes.append(NamedVariable.new(ORIGIN, raw))
        return tree
    section = _mapping(raw, f"trees.{name}")
    tree.path = Variable(_string(section.get("path", "")))
    if "symlink" in section:
        tree.is_symlink = True
        tree.symlink = Variable(_string(section["symlink"]))
    tree.templates = _strings(section.get("templates"))
    tree.variables = _named_variables(section.get("variables"), f"trees.{name}.variables")
    tree.environment = _multi_variables(section.get("environment"), f"trees.{name}.environment")
    tree.commands = _multi_variables(section.get("commands"), f"trees.{name}.commands")
    tree.gitconfig = _named_variables(section.get("gitconfig"), f"trees.{name}.gitconfig")
    tree.remotes = _remotes(section, f"trees.{name}")
    tree.clone_depth = _depth(section.get("depth"), f"trees.{name}.depth")
    return tree


def _template(name: Any, raw: Any) -> Template:
    section = _mapping(raw, f"templates.{name}")
    return Template(
        name=str(name),
        extend=_strings(section.get("extend")),
        variables=_named_variables(section.get("variables"), f"templates.{name}.variables"),
        environment=_multi_variables(section.get("environment"), f"templates.{name}.environment"),
        commands=_multi_variables(section.get("commands"), f"templates.{name}.commands"),
        gitconfig=_named_variables(section.get("gitconfig"), f"templates.{name}.gitconfig"),
        remotes=_remotes(section, f"templates.{name}"),
        clone_depth=_depth(section.get("depth"), f"templates.{name}.depth"),
    )


def _garden(name: Any, raw: Any) -> Garden:
    section = _mapping(raw, f"gardens.{name}")
    return Garden(
        name=str(name),
        trees=_strings(section.get("trees")),
        groups=_strings(section.get("groups")),
        variables=_named_variables(section.get("variables"), f"gardens.{name}.variables"),
        environment=_multi_variables(section.get("environment"), f"gardens.{name}.environment"),
        commands=_multi_variables(section.get("commands"), f"gardens.{name}.commands"),
        gitconfig=_named_variables(section.get("gitconfig"), f"gardens.{name}.gitconfig"),
    )


def _graft(name: Any, raw: Any) -> Graft:
    try:
        entry = GraftEntry.from_raw(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"grafts.{name}: expected a path or a mapping with 'config'") from exc
    return Graft(name=str(name), root=entry.root, config=entry.config)


def _remotes(section: Mapping[str, Any], where: str) -> list[NamedVariable]:
    remotes = _named_variables(section.get("remotes"), f"{where}.remotes")
    if "url" in section and all(remote.name != ORIGIN for remote in remotes):
        remotes.insert(0, NamedVariable.new(ORIGIN, _string(section["url"])))
    return remotes


# Scalars -----------------------------------------------------------------------


def _mapping(value: Any, where: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"{where}: expected a mapping")
    return value


def _string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _strings(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [_string(entry) for entry in value]
    return [_string(value)]


def _named_variables(value: Any, where: str) -> list[NamedVariable]:
    variables: list[NamedVariable] = []
    for name, raw in _mapping(value, where).items():
        for expr in _strings(raw) if isinstance(raw, list) else [_string(raw)]:
            variables.append(NamedVariable.new(str(name), expr))
    return variables


def _multi_variables(value: Any, where: str) -> list[MultiVariable]:
    return [MultiVariable.from_exprs(str(name), _strings(raw)) for name, raw in _mapping(value, where).items()]


def _depth(value: Any, where: str) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{where}: expected an integer, got {value!r}") from exc


__all__ = ["DEFAULT_ROOT", "load_forest", "parse", "read_config", "read_yaml"]
