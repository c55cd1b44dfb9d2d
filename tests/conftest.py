# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from textwrap import dedent

import pytest

from garden.config import read_config
from garden.model import Configuration

DATA_DIR = Path(__file__).resolve().parent / "data"


class RecordingRunner:
    """Process runner double that records invocations and returns canned statuses.

    Statuses are looked up by the name of the working directory.
    """

    def __init__(self, statuses: Mapping[str, int] | None = None) -> None:
        self.statuses = dict(statuses or {})
        self.calls: list[tuple[list[str], Path | None, dict[str, str]]] = []

    def __call__(
        self,
        args: Sequence[str],
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> int:
        path = Path(cwd) if cwd is not None else None
        self.calls.append((list(args), path, dict(env or {})))
        if path is None:
            return 0
        return self.statuses.get(path.name, 0)

    @property
    def directories(self) -> list[str]:
        return [path.name for _, path, _ in self.calls if path is not None]


@pytest.fixture
def data_config_path() -> Path:
    """Return the path of the shared garden document."""
    return DATA_DIR / "garden.yaml"


@pytest.fixture
def data_config(data_config_path: Path) -> Configuration:
    """Return the initialised shared garden document."""
    return read_config(data_config_path)


@pytest.fixture
def write_garden(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper writing a garden document (and tree directories) under ``tmp_path``."""

    def _write(text: str, *, name: str = "garden.yaml", trees: Sequence[str] = ()) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(text), encoding="utf-8")
        for tree in trees:
            (tmp_path / tree).mkdir(parents=True, exist_ok=True)
        return path

    return _write


@pytest.fixture
def recording_runner() -> RecordingRunner:
    """Return a fresh :class:`RecordingRunner`."""
    return RecordingRunner()
