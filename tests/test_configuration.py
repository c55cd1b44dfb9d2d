# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for configuration initialisation and reset."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from garden import evaluation
from garden.config import read_config
from garden.errors import ConfigurationError, GardenAssertionError, NoSuchGraftError
from garden.model import (
    Graft,
    GARDEN_CONFIG_DIR,
    GARDEN_ROOT,
    TREE_NAME,
    TREE_PATH,
    Configuration,
    Tree,
    Variable,
)


def test_initialize_inserts_builtin_slots(data_config: Configuration) -> None:
    assert [variable.name for variable in data_config.variables[:2]] == [GARDEN_ROOT, GARDEN_CONFIG_DIR]
    for tree in data_config.trees:
        assert [variable.name for variable in tree.variables[:2]] == [TREE_NAME, TREE_PATH]
        assert tree.variables[0].get_value() == tree.name
        assert tree.variables[1].get_value() == tree.path_as_ref()


def test_initialize_resolves_tree_paths(data_config: Configuration) -> None:
    alpha = data_config.get_tree("alpha")
    beta = data_config.get_tree("beta")
    link = data_config.get_tree("delta-link")
    assert alpha is not None and beta is not None and link is not None

    assert alpha.path_as_ref() == str(data_config.root_path / "alpha")
    assert beta.path_as_ref() == str(data_config.root_path / "beta-src")
    assert link.is_symlink
    assert link.symlink_as_ref() == str(data_config.root_path / "alpha")


def test_initialize_assigns_indexes(data_config: Configuration) -> None:
    assert [group.index for group in data_config.groups] == list(range(len(data_config.groups)))
    assert [garden.index for garden in data_config.gardens] == list(range(len(data_config.gardens)))


def test_reset_clears_values_but_keeps_paths(data_config: Configuration) -> None:
    beta_idx = data_config.tree_index("beta")
    assert beta_idx is not None
    evaluation.tree_value(data_config, "${flavor} ${greeting}", beta_idx)
    flavor = data_config.trees[beta_idx].variables[-1]
    assert flavor.name == "flavor"
    assert flavor.get_value() == "beta"

    data_config.reset()

    assert flavor.get_value() is None
    assert data_config.trees[beta_idx].path_is_valid()
    assert data_config.variables[0].get_value() == str(data_config.root_path)
    assert data_config.trees[beta_idx].variables[1].get_value() == str(data_config.root_path / "beta-src")


def test_relative_root_is_based_on_document_directory(write_garden: Callable[..., Path]) -> None:
    path = write_garden(
        """
        garden:
          root: src
        trees:
          one: {}
        """
    )
    config = read_config(path)
    assert config.root_path == path.resolve().parent / "src"
    assert config.trees[0].path_as_ref() == str(path.resolve().parent / "src" / "one")


def test_empty_root_falls_back_to_document_directory(write_garden: Callable[..., Path]) -> None:
    path = write_garden(
        """
        garden:
          root: ""
        """
    )
    assert read_config(path).root_path == path.resolve().parent


def test_exec_root(write_garden: Callable[..., Path]) -> None:
    path = write_garden(
        """
        garden:
          root: $ echo /opt/garden
        """
    )
    assert read_config(path).root_path == Path("/opt/garden")


def test_root_and_variable_overrides(
    write_garden: Callable[..., Path],
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    path = write_garden(
        """
        variables:
          name: original
        """
    )
    monkeypatch.chdir(tmp_path)
    config = read_config(path, root="elsewhere", overrides=[("name", "override"), ("extra", "${name}!")])

    assert config.root_path == tmp_path.resolve() / "elsewhere"
    assert evaluation.value(config, "${extra}") == "override!"


def test_config_and_tree_paths(data_config: Configuration, data_config_path: Path) -> None:
    config_dir = data_config_path.resolve().parent
    assert data_config.config_path("other.yaml") == str(config_dir / "other.yaml")
    assert data_config.tree_path("src") == str(data_config.root_path / "src")
    assert data_config.eval_tree_path("${greeting}") == str(data_config.root_path / "hello")
    assert data_config.eval_config_path("/abs/${greeting}") == "/abs/hello"
    assert data_config.get_path() == data_config_path.resolve()


def test_unset_paths_raise() -> None:
    with pytest.raises(GardenAssertionError, match="cfg.path is unset"):
        Configuration().get_path()
    tree = Tree(name="loose", path=Variable("loose"))
    with pytest.raises(ConfigurationError, match="unset tree path for loose"):
        tree.path_as_ref()


def test_missing_graft(data_config: Configuration) -> None:
    assert not data_config.contains_graft("lib")
    with pytest.raises(NoSuchGraftError, match="lib: no such graft"):
        data_config.get_graft("lib")


def test_relative_and_absolute_tree_paths(write_garden: Callable[..., Path]) -> None:
    config = read_config(
        write_garden(
            """
            garden:
              root: /home/u/code
            trees:
              foo: {}
              abs:
                path: /abs/x
            """
        )
    )
    assert config.get_tree("foo").path_as_ref() == "/home/u/code/foo"
    assert config.get_tree("abs").path_as_ref() == "/abs/x"


def test_get_graft_returns_declared_graft() -> None:
    graft = Graft(name="x", config="x.yaml")
    config = Configuration(grafts=[graft])
    assert config.contains_graft(" x ")
    assert config.get_graft("x") is graft
    assert config.get_graft("@x") is graft
