# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Validated models for global command-line options and graft entries."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..display import ColorMode
from ..errors import UsageError


class CommandOptions(BaseModel):
    """Options shared by every ``garden`` subcommand."""

    model_config = ConfigDict(validate_assignment=True)

    config: Path | None = None
    chdir: Path | None = None
    color: ColorMode = ColorMode.AUTO
    debug: tuple[str, ...] = Field(default_factory=tuple)
    root: str | None = None
    variables: tuple[str, ...] = Field(default_factory=tuple)
    verbose: int = 0
    quiet: bool = False

    @field_validator("color", mode="before")
    @classmethod
    def _coerce_color(cls, value: ColorMode | str) -> ColorMode:
        """Return ``value`` parsed into a :class:`ColorMode`.

        Raises:
            ValueError: ``value`` is not a recognised colour setting.
        """

        if isinstance(value, ColorMode):
            return value
        return ColorMode.from_raw(str(value))

    @field_validator("debug", "variables", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Sequence[str] | str | None) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        return tuple(str(entry) for entry in value)

    def is_debug(self, category: str) -> bool:
        """Return ``True`` when ``--debug <category>`` was requested."""

        return category in self.debug

    def overrides(self) -> list[tuple[str, str]]:
        """Return the ``--set name=value`` overrides as pairs.

        Raises:
            UsageError: An entry is missing the ``=`` separator or a name.
        """

        pairs: list[tuple[str, str]] = []
        for entry in self.variables:
            name, sep, value = entry.partition("=")
            name = name.strip()
            if not sep or not name:
                raise UsageError(f"invalid --set argument '{entry}', expected name=value")
            pairs.append((name, value))
        return pairs


class GraftEntry(BaseModel):
    """Normalised ``grafts`` entry: a document path and an optional root."""

    model_config = ConfigDict(extra="ignore")

    config: str
    root: str = ""

    @classmethod
    def from_raw(cls, raw: Any) -> GraftEntry:
        """Return an entry from a bare path string or a ``{config, root}`` mapping.

        Raises:
            pydantic.ValidationError: ``raw`` has neither shape.
        """

        if isinstance(raw, str):
            return cls(config=raw)
        if isinstance(raw, Mapping):
            return cls.model_validate(dict(raw))
        return cls.model_validate(raw)


__all__ = ["CommandOptions", "GraftEntry"]
