# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the subprocess wrappers."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from garden.process import (
    LAUNCH_FAILURE_STATUS,
    SIGNAL_STATUS_BASE,
    capture_stdout,
    overlay_environment,
    run_command,
)


def test_run_command_returns_exit_status(tmp_path: Path) -> None:
    assert run_command(["sh", "-c", "exit 0"], cwd=tmp_path) == 0
    assert run_command(["sh", "-c", "exit 7"], cwd=tmp_path) == 7


def test_run_command_applies_cwd_and_env(tmp_path: Path) -> None:
    target = tmp_path / "out.txt"
    status = run_command(
        ["sh", "-c", 'printf "%s:%s" "$GARDEN_TEST" "$(pwd)" > out.txt'],
        cwd=tmp_path,
        env={"GARDEN_TEST": "value"},
    )
    assert status == 0
    assert target.read_text(encoding="utf-8") == f"value:{tmp_path.resolve()}"


def test_run_command_launch_failure(tmp_path: Path) -> None:
    assert run_command(["garden-no-such-executable"], cwd=tmp_path) == LAUNCH_FAILURE_STATUS
    assert run_command(["sh"], cwd=tmp_path / "missing") == LAUNCH_FAILURE_STATUS


def test_capture_stdout_trims_trailing_whitespace(tmp_path: Path) -> None:
    assert capture_stdout("printf 'value\\n\\n  '", cwd=tmp_path) == "value"
    assert capture_stdout("echo partial; exit 3", cwd=tmp_path) == "partial"
    assert capture_stdout("true", shell="garden-no-such-shell") == ""


def test_overlay_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GARDEN_INHERITED", "yes")
    merged = overlay_environment({"GARDEN_EXTRA": "1"})
    assert merged["GARDEN_INHERITED"] == "yes"
    assert merged["GARDEN_EXTRA"] == "1"


def _write_tool(directory: Path, name: str, body: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    tool = directory / name
    tool.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    tool.chmod(0o755)
    return tool


def test_run_command_resolves_executable_on_overlaid_path(tmp_path: Path) -> None:
    bin_dir = tmp_path / "local" / "bin"
    _write_tool(bin_dir, "garden-path-tool", "exit 7")
    env = {"PATH": f"{bin_dir}{os.pathsep}{os.environ.get('PATH', os.defpath)}"}

    assert run_command(["garden-path-tool"], cwd=tmp_path, env=env) == 7
    assert run_command(["garden-path-tool"], cwd=tmp_path) == LAUNCH_FAILURE_STATUS


def test_run_command_reports_signals_like_a_shell(tmp_path: Path) -> None:
    assert run_command(["sh", "-c", "kill -9 $$"], cwd=tmp_path) == SIGNAL_STATUS_BASE + 9


def test_capture_stdout_keeps_undecodable_output(tmp_path: Path) -> None:
    output = capture_stdout("printf 'ok\\377'", cwd=tmp_path)
    assert output == "ok�"


def test_capture_stdout_uses_overlaid_path(tmp_path: Path) -> None:
    bin_dir = tmp_path / "bin"
    _write_tool(bin_dir, "garden-echo-tool", "echo from-tool")
    env = {"PATH": f"{bin_dir}{os.pathsep}{os.environ.get('PATH', os.defpath)}"}

    assert capture_stdout("garden-echo-tool", cwd=tmp_path, env=env) == "from-tool"
