# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for reading garden documents and loading grafts."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from garden.config import CONFIG_NAME, find_config, load_forest, parse, read_yaml, search_directories
from garden.errors import ConfigurationError


def test_parse_document_shape(data_config_path: Path) -> None:
    config = parse(read_yaml(data_config_path))

    assert config.shell == "sh"
    assert [tree.name for tree in config.trees] == ["alpha", "beta", "gamma", "delta-link"]
    alpha, beta, gamma, link = config.trees
    assert alpha.templates == ["derived"]
    assert [(remote.name, remote.expr) for remote in alpha.remotes] == [("origin", "https://${host}/alpha.git")]
    assert beta.path.expr == "beta-src"
    assert [(remote.name, remote.expr) for remote in gamma.remotes] == [("origin", "https://example.com/gamma.git")]
    assert link.is_symlink and link.symlink.expr == "alpha"
    assert config.get_template("derived") is not None
    assert config.get_template("derived").extend == ["base"]
    assert config.get_group("core").members == ["alpha", "beta"]
    assert config.get_garden("dev").groups == ["core"]
    assert config.get_garden("dev").trees == ["gamma"]


def test_scalar_normalisation(write_garden: Callable[..., Path]) -> None:
    config = parse(
        read_yaml(
            write_garden(
                """
                variables:
                  flag: false
                  number: 3
                commands:
                  single: echo one
                  many: [echo one, echo two]
                trees:
                  shallow:
                    depth: 1
                    remotes:
                      upstream: https://example.com/upstream.git
                    gitconfig:
                      remote.origin.pushurl: [a, b]
                """
            )
        )
    )
    assert [(var.name, var.expr) for var in config.variables] == [("flag", "false"), ("number", "3")]
    assert [len(entry) for entry in config.commands] == [1, 2]
    tree = config.trees[0]
    assert tree.clone_depth == 1
    assert [remote.name for remote in tree.remotes] == ["upstream"]
    assert [entry.expr for entry in tree.gitconfig] == ["a", "b"]


def test_empty_document(write_garden: Callable[..., Path]) -> None:
    config = parse(read_yaml(write_garden("")))
    assert config.trees == []
    assert config.root.expr == "${GARDEN_CONFIG_DIR}"


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("trees: [one, two]\n", "trees: expected a mapping"),
        ("- just\n- a list\n", "expected a mapping at the top level"),
        ("trees: {a: {depth: deep}}\n", "expected an integer"),
        ("grafts: {lib: [1, 2]}\n", "grafts.lib"),
        ("trees: {a: [unclosed\n", "invalid YAML"),
    ],
)
def test_invalid_documents(write_garden: Callable[..., Path], text: str, message: str) -> None:
    with pytest.raises(ConfigurationError, match=message):
        parse(read_yaml(write_garden(text)))


def test_missing_document(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="unable to read"):
        read_yaml(tmp_path / "absent.yaml")


def test_graft_root_is_remapped(write_garden: Callable[..., Path], tmp_path: Path) -> None:
    write_garden("trees:\n  util: {}\n", name="lib/garden.yaml")
    root = write_garden(
        """
        grafts:
          lib:
            config: lib/garden.yaml
            root: vendor/lib
        """
    )

    forest = load_forest(root)
    graft = forest.root().get_graft("lib")
    assert graft.id is not None
    child = forest.get(graft.id)

    assert child.root_path == tmp_path.resolve() / "vendor" / "lib"
    assert child.trees[0].path_as_ref() == str(tmp_path.resolve() / "vendor" / "lib" / "util")
    assert forest.parent_id(graft.id) == forest.root_id()


def test_graft_cycle_is_rejected(write_garden: Callable[..., Path]) -> None:
    write_garden("grafts:\n  back: ../garden.yaml\n", name="sub/garden.yaml")
    root = write_garden("grafts:\n  sub: sub/garden.yaml\n")

    with pytest.raises(ConfigurationError, match="graft cycle"):
        load_forest(root)


def test_find_config_search_order(tmp_path: Path) -> None:
    xdg = tmp_path / "xdg"
    (xdg / "garden").mkdir(parents=True)
    (xdg / "garden" / CONFIG_NAME).write_text("", encoding="utf-8")
    env = {"XDG_CONFIG_HOME": str(xdg)}

    assert find_config(cwd=tmp_path, env=env) == xdg / "garden" / CONFIG_NAME

    (tmp_path / "etc" / "garden").mkdir(parents=True)
    (tmp_path / "etc" / "garden" / CONFIG_NAME).write_text("", encoding="utf-8")
    assert find_config(cwd=tmp_path, env=env) == tmp_path / "etc" / "garden" / CONFIG_NAME

    (tmp_path / CONFIG_NAME).write_text("", encoding="utf-8")
    assert find_config(cwd=tmp_path, env=env) == tmp_path / CONFIG_NAME


def test_find_config_explicit(tmp_path: Path) -> None:
    custom = tmp_path / "garden" / "custom.yaml"
    custom.parent.mkdir()
    custom.write_text("", encoding="utf-8")

    assert find_config(custom, cwd=tmp_path) == custom
    assert find_config(Path("custom.yaml"), cwd=tmp_path, env={"HOME": str(tmp_path)}) == custom
    with pytest.raises(ConfigurationError, match="unable to find configuration"):
        find_config(Path("missing.yaml"), cwd=tmp_path, env={"HOME": str(tmp_path)})


def test_search_directories_default_to_home(tmp_path: Path) -> None:
    directories = search_directories(tmp_path, {"HOME": "/home/someone"})
    assert directories[3] == Path("/home/someone/.config/garden")
    assert directories[-1] == Path("/etc/garden")
