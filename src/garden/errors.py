# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Error taxonomy shared by the garden core and its command-line surface."""

from __future__ import annotations

from typing import Final

EXIT_ERROR: Final[int] = 1
EXIT_USAGE: Final[int] = 2


class GardenError(Exception):
    """Base class for failures that abort the current garden operation."""

    exit_code: int = EXIT_ERROR

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        """Initialise the error with a message and an optional exit code.

        Args:
            message: Human-readable description of the failure.
            exit_code: Process exit status associated with the failure. The
                class default is used when omitted.
        """

        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationError(GardenError):
    """Raised for malformed documents, unresolvable paths and unset fields."""


class NoSuchGraftError(ConfigurationError):
    """Raised when a configuration does not declare the requested graft."""

    def __init__(self, name: str) -> None:
        super().__init__(f"{name}: no such graft")
        self.name = name


class UsageError(GardenError):
    """Raised when a command is invoked without its required arguments."""

    exit_code = EXIT_USAGE


class ReferentialIntegrityError(GardenError):
    """Raised when an entity referenced by name or id does not exist."""


class GardenAssertionError(GardenError):
    """Raised when an internal invariant is violated."""


class ExitStatus(GardenError):
    """Request that the process exits with ``code`` without printing anything."""

    def __init__(self, code: int) -> None:
        super().__init__("", exit_code=code)
        self.code = code


__all__ = [
    "EXIT_ERROR",
    "EXIT_USAGE",
    "ConfigurationError",
    "ExitStatus",
    "GardenAssertionError",
    "GardenError",
    "NoSuchGraftError",
    "ReferentialIntegrityError",
    "UsageError",
]
