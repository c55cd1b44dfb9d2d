# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate the garden document when ``--config`` does not name one."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Final

from ..errors import ConfigurationError

LOGGER = logging.getLogger(__name__)

CONFIG_NAME: Final[str] = "garden.yaml"


def search_directories(cwd: Path | None = None, env: Mapping[str, str] | None = None) -> list[Path]:
    """Return the directories searched for a garden document, in order.

    Args:
        cwd: Directory relative entries are based on (defaults to the current one).
        env: Environment used for ``XDG_CONFIG_HOME`` and ``HOME``.

    Returns:
        list[Path]: ``.``, ``./garden``, ``./etc/garden``, the user config
        directory and ``/etc/garden``.
    """

    base = cwd or Path.cwd()
    environ = os.environ if env is None else env
    xdg = environ.get("XDG_CONFIG_HOME")
    if xdg:
        user_dir = Path(xdg)
    else:
        home = environ.get("HOME")
        user_dir = (Path(home) if home else Path.home()) / ".config"
    return [
        base,
        base / "garden",
        base / "etc" / "garden",
        user_dir / "garden",
        Path("/etc/garden"),
    ]


def find_config(
    path: Path | None = None,
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Path | None:
    """Return the garden document to load, or ``None`` when there is none.

    An explicit ``path`` that exists is used as-is. A bare file name that does
    not exist relative to ``cwd`` is looked up in :func:`search_directories`.

    Raises:
        ConfigurationError: An explicit ``path`` cannot be found.
    """

    base = cwd or Path.cwd()
    if path is not None:
        candidate = path.expanduser()
        if not candidate.is_absolute():
            candidate = base / candidate
        if candidate.is_file():
            return candidate
        if len(path.parts) == 1:
            for directory in search_directories(base, env):
                found = directory / path
                if found.is_file():
                    return found
        raise ConfigurationError(f"unable to find configuration: {path}")

    for directory in search_directories(base, env):
        found = directory / CONFIG_NAME
        if found.is_file():
            LOGGER.debug("config=%s", found)
            return found
    return None


__all__ = ["CONFIG_NAME", "find_config", "search_directories"]
