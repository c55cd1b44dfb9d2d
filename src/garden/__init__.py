# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Run commands across collections of source trees described in YAML."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
