# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for variable evaluation, scoping and environment construction."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from garden import evaluation, process
from garden.config import read_config
from garden.evaluation import Evaluator
from garden.model import Configuration, TreeContext


def _tree(config: Configuration, name: str) -> int:
    idx = config.tree_index(name)
    assert idx is not None
    return idx


def _garden(config: Configuration, name: str) -> int:
    garden = config.get_garden(name)
    assert garden is not None
    return garden.index


def test_global_substitution(data_config: Configuration) -> None:
    assert evaluation.value(data_config, "${greeting}, world") == "hello, world"
    assert evaluation.value(data_config, "${prefix}") == f"{data_config.root_path}/local"


def test_builtins_resolve_root_and_config_dir(data_config: Configuration, data_config_path: Path) -> None:
    config_dir = data_config_path.resolve().parent
    assert evaluation.value(data_config, "${GARDEN_CONFIG_DIR}") == str(config_dir)
    assert evaluation.value(data_config, "${GARDEN_ROOT}") == str(config_dir / "trees")


def test_tree_builtins(data_config: Configuration) -> None:
    beta = _tree(data_config, "beta")
    assert evaluation.tree_value(data_config, "${TREE_NAME}", beta) == "beta"
    assert evaluation.tree_value(data_config, "${TREE_PATH}", beta) == str(data_config.root_path / "beta-src")


def test_yaml_booleans_become_strings(data_config: Configuration) -> None:
    assert evaluation.value(data_config, "${enabled}") == "true"


def test_unknown_name_expands_to_empty(data_config: Configuration, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GARDEN_TEST_MISSING", raising=False)
    assert evaluation.value(data_config, "[${GARDEN_TEST_MISSING}]") == "[]"


def test_process_environment_is_the_last_fallback(
    data_config: Configuration,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("GARDEN_TEST_VALUE", "from-env")
    monkeypatch.setenv("greeting", "shadowed")
    assert evaluation.value(data_config, "${GARDEN_TEST_VALUE}") == "from-env"
    assert evaluation.value(data_config, "${greeting}") == "hello"


def test_cyclic_reference_terminates(data_config: Configuration) -> None:
    assert evaluation.value(data_config, "${cycle-a}") == ""
    assert evaluation.value(data_config, "<${cycle-b}>") == "<>"


def test_shell_syntax_passes_through(data_config: Configuration) -> None:
    assert evaluation.value(data_config, 'echo "$@" $(pwd) $HOME') == 'echo "$@" $(pwd) $HOME'


def test_scope_precedence(data_config: Configuration) -> None:
    alpha = _tree(data_config, "alpha")
    beta = _tree(data_config, "beta")
    dev = _garden(data_config, "dev")

    # derived template wins over the base template it extends
    assert evaluation.tree_value(data_config, "${flavor}", alpha) == "derived"
    # tree-local wins over templates
    assert evaluation.tree_value(data_config, "${flavor}", beta) == "beta"
    # inherited through extend
    assert evaluation.tree_value(data_config, "${host}", alpha) == "example.com"
    # garden overrides global
    assert evaluation.tree_value(data_config, "${greeting}", alpha, dev) == "hi"
    assert evaluation.tree_value(data_config, "${greeting}", alpha) == "hello"
    # tree variables are invisible globally
    assert evaluation.value(data_config, "${local}") == ""


def test_exec_expression_captures_trimmed_stdout(data_config: Configuration) -> None:
    assert evaluation.value(data_config, "${answer}") == "42"
    assert evaluation.value(data_config, "$ printf '%s\\n\\n' ${greeting}") == "hello"


def test_exec_expression_runs_once_per_pass(data_config: Configuration) -> None:
    calls: list[str] = []

    def capture(command: str, **_: object) -> str:
        calls.append(command)
        return f"out-{len(calls)}"

    evaluator = Evaluator(data_config, capture=capture)
    assert evaluator.evaluate("${answer} ${answer}") == "out-1 out-1"
    assert evaluator.evaluate("${answer}") == "out-1"
    assert calls == ["echo 42"]

    data_config.reset()
    assert Evaluator(data_config, capture=capture).evaluate("${answer}") == "out-2"
    assert calls == ["echo 42", "echo 42"]


def test_exec_marker_checked_before_substitution(
    data_config: Configuration,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    commands: list[str] = []

    def capture(command: str, **_: object) -> str:
        commands.append(command)
        return ""

    monkeypatch.setattr(process, "capture_stdout", capture)
    data_config.set_variable("dollar", "$")
    assert evaluation.value(data_config, "${dollar} echo") == "$ echo"
    assert commands == []


def test_environment_operators_and_order(
    data_config: Configuration,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("PATH", "/usr/bin:/bin")
    monkeypatch.setenv("GREETING", "inherited")
    context = TreeContext(tree=_tree(data_config, "alpha"), garden=_garden(data_config, "dev"))

    env = dict(evaluation.environment(data_config, context))

    assert env["PATH"] == f"{data_config.root_path}/local/bin:/usr/bin:/bin"
    assert env["GREETING"] == "hi"
    assert env["GARDEN_ENV"] == "dev"
    assert env["TEMPLATE_VAR"] == "from-derived"


def test_append_and_prepend(write_garden: Callable[..., Path], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GARDEN_LIST", raising=False)
    monkeypatch.setenv("GARDEN_SEARCH", "base")
    config = read_config(
        write_garden(
            """
            environment:
              GARDEN_LIST+: [a, b]
              GARDEN_SEARCH: [x, y]
            trees:
              one: {}
            """
        )
    )

    pairs = evaluation.environment(config, TreeContext(tree=0))

    assert ("GARDEN_LIST", "a") in pairs
    assert dict(pairs)["GARDEN_LIST"] == "a:b"
    assert dict(pairs)["GARDEN_SEARCH"] == "y:x:base"


def test_commands_scope_order(data_config: Configuration) -> None:
    alpha = TreeContext(tree=_tree(data_config, "alpha"))
    beta = TreeContext(tree=_tree(data_config, "beta"))

    assert evaluation.command(data_config, alpha, "build") == ["echo base-build"]
    assert evaluation.command(data_config, beta, "build") == ["echo beta-build"]
    assert evaluation.command(data_config, alpha, "echo-name") == ["echo alpha"]
    assert evaluation.command(data_config, alpha, "missing") == []


def test_multi_variable_evaluation(data_config: Configuration) -> None:
    path_entry = data_config.environment[0]
    values = evaluation.multi_variable(data_config, path_entry, TreeContext(tree=0))
    assert values == [f"{data_config.root_path}/local/bin"]


def test_plain_text_is_returned_unchanged(data_config: Configuration) -> None:
    for text in ["", "plain text", "cost: $5", "$HOME/${", "{braces}"]:
        assert evaluation.value(data_config, text) == text
