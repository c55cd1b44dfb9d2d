# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Document loading, discovery and option models."""

from __future__ import annotations

from .discovery import CONFIG_NAME, find_config, search_directories
from .options import CommandOptions, GraftEntry
from .reader import DEFAULT_ROOT, load_forest, parse, read_config, read_yaml

__all__ = [
    "CONFIG_NAME",
    "DEFAULT_ROOT",
    "CommandOptions",
    "GraftEntry",
    "find_config",
    "load_forest",
    "parse",
    "read_config",
    "read_yaml",
    "search_directories",
]
