# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for colour modes and progress rendering."""

from __future__ import annotations

import pytest

from garden.display import ColorMode, Display
from garden.model import Tree, Variable


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("auto", ColorMode.AUTO),
        ("always", ColorMode.ON),
        ("YES", ColorMode.ON),
        ("1", ColorMode.ON),
        ("never", ColorMode.OFF),
        ("n", ColorMode.OFF),
    ],
)
def test_color_mode_from_raw(raw: str, expected: ColorMode) -> None:
    assert ColorMode.from_raw(raw) is expected


def test_color_mode_rejects_unknown_values() -> None:
    with pytest.raises(ValueError, match="invalid color mode"):
        ColorMode.from_raw("sometimes")


def test_explicit_modes_ignore_terminal() -> None:
    assert ColorMode.ON.is_enabled()
    assert not ColorMode.OFF.is_enabled()


def test_render_tree() -> None:
    display = Display.create(color=False)
    tree = Tree(name="alpha", path=Variable("alpha", "/src/alpha"))

    assert display.render_tree(tree, "/src/alpha", verbose=False).plain == "# alpha"
    assert display.render_tree(tree, "/src/alpha", verbose=True).plain == "# alpha  /src/alpha"
    assert display.render_missing_tree(tree, "/src/alpha", verbose=False).plain == "# alpha (skipped)"


def test_print_tree_reports_missing_paths(capsys: pytest.CaptureFixture[str], tmp_path) -> None:
    display = Display.create(color=False)
    present = Tree(name="present", path=Variable("present", str(tmp_path)))
    missing = Tree(name="missing", path=Variable("missing", str(tmp_path / "missing")))

    assert display.print_tree(present, verbose=False, quiet=False)
    assert not display.print_tree(missing, verbose=True, quiet=False)

    err = capsys.readouterr().err
    assert "# present" in err
    assert f"# missing {tmp_path / 'missing'} (skipped)" in err


def test_error_line(capsys: pytest.CaptureFixture[str]) -> None:
    Display.create(color=False).error("boom")
    assert capsys.readouterr().err.strip() == "error: boom"
