# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution.

Two operations are exposed to the core:

* :func:`run_command` runs an argument vector in a working directory with an
  environment overlay and returns its exit status.
* :func:`capture_stdout` runs a shell command and returns its trimmed stdout,
  used to evaluate exec expressions.

Neither raises for a failed launch or a non-zero exit: the caller receives a
status (or whatever output was captured) and decides what to do with it.
"""

from __future__ import annotations

import logging
import os
import shutil

# Bandit: subprocess usage is intentional; we pass argument vectors and never
# enable ``shell=True`` on the Python side.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Final, Protocol

LOGGER = logging.getLogger(__name__)

LAUNCH_FAILURE_STATUS: Final[int] = 1
SIGNAL_STATUS_BASE: Final[int] = 128


class ProcessRunner(Protocol):
    """Run ``args`` in ``cwd`` with ``env`` overlaid and return the exit status."""

    def __call__(
        self,
        args: Sequence[str],
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> int: ...


def _normalize_args(args: Sequence[str], env: Mapping[str, str]) -> list[str]:
    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    if os.sep in head or Path(head).is_absolute():
        return [head, *rest]

    # The child's PATH, not ours, decides which executable runs.
    resolved = shutil.which(head, path=env.get("PATH", os.defpath))
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def overlay_environment(env: Mapping[str, str] | None) -> dict[str, str]:
    """Return the inherited process environment with ``env`` applied on top."""

    merged = dict(os.environ)
    if env:
        merged.update(env)
    return merged


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | str | None = None,
    env: Mapping[str, str] | None = None,
) -> int:
    """Run *args* to completion and return its exit status.

    Args:
        args: Argument vector; the executable is resolved on the ``PATH`` of
            the overlaid environment.
        cwd: Working directory for the child process.
        env: Variables overlaid on the inherited environment.

    Returns:
        int: The child exit status, or :data:`LAUNCH_FAILURE_STATUS` when the
        process could not be started. A child killed by signal ``N`` reports
        ``128 + N`` as a shell does.
    """

    merged = overlay_environment(env)
    try:
        normalized = _normalize_args(args, merged)
        # Bandit: commands come from the user's own configuration and CLI.
        completed = subprocess.run(  # nosec B603
            normalized,
            cwd=str(cwd) if cwd is not None else None,
            env=merged,
            check=False,
        )
    except (OSError, ValueError) as exc:
        LOGGER.debug("launch failed command=%s error=%s", list(args), exc)
        return LAUNCH_FAILURE_STATUS
    if completed.returncode < 0:
        LOGGER.debug("killed by signal=%s command=%s", -completed.returncode, list(args))
        return SIGNAL_STATUS_BASE - completed.returncode
    return completed.returncode


def capture_stdout(
    command: str,
    *,
    shell: str = "sh",
    cwd: Path | str | None = None,
    env: Mapping[str, str] | None = None,
) -> str:
    """Run ``command`` through ``shell -c`` and return its trimmed stdout.

    Args:
        command: Command line interpreted by ``shell``.
        shell: Shell executable used to interpret ``command``.
        cwd: Working directory for the child process.
        env: Variables overlaid on the inherited environment.

    Returns:
        str: Captured standard output with trailing whitespace removed. Launch
        failures and non-zero exits yield whatever was captured, possibly "".
    """

    merged = overlay_environment(env)
    try:
        normalized = _normalize_args([shell, "-c", command], merged)
        # Bandit: exec expressions are authored in the user's configuration.
        completed = subprocess.run(  # nosec B603
            normalized,
            cwd=str(cwd) if cwd is not None else None,
            env=merged,
            check=False,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            stdin=subprocess.DEVNULL,
        )
    except (OSError, ValueError) as exc:
        LOGGER.debug("exec expression failed command=%s error=%s", command, exc)
        return ""
    if completed.returncode != 0:
        LOGGER.debug("exec expression status=%s command=%s", completed.returncode, command)
    return (completed.stdout or "").rstrip()


__all__ = [
    "LAUNCH_FAILURE_STATUS",
    "SIGNAL_STATUS_BASE",
    "ProcessRunner",
    "capture_stdout",
    "overlay_environment",
    "run_command",
]
