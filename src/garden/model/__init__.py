# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Data model for gardens, groups, trees, templates and grafts."""

from __future__ import annotations

from .configuration import (
    DEFAULT_SHELL,
    GARDEN_CONFIG_DIR,
    GARDEN_ROOT,
    TREE_NAME,
    TREE_PATH,
    Configuration,
)
from .context import EvalContext, TreeContext, TreeQuery, compile_glob, glob_matches
from .entities import ConfigId, Garden, GardenIndex, Graft, Group, GroupIndex, Template, Tree, TreeIndex
from .variables import MultiVariable, NamedVariable, Variable, find_variable

__all__ = [
    "DEFAULT_SHELL",
    "GARDEN_CONFIG_DIR",
    "GARDEN_ROOT",
    "TREE_NAME",
    "TREE_PATH",
    "ConfigId",
    "Configuration",
    "EvalContext",
    "Garden",
    "GardenIndex",
    "Graft",
    "Group",
    "GroupIndex",
    "MultiVariable",
    "NamedVariable",
    "Template",
    "Tree",
    "TreeContext",
    "TreeIndex",
    "TreeQuery",
    "Variable",
    "compile_glob",
    "find_variable",
    "glob_matches",
]
