# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer customisations: sorted help, ``--`` passthrough and custom commands."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Final

import click
import typer
from click.core import Context, Parameter
from click.formatting import HelpFormatter
from typer.core import TyperCommand, TyperGroup

from .dispatch import Command, CustomCommand, parse_command

ARGUMENT_PARAM_TYPE: Final[str] = "argument"
PASSTHROUGH_KEY: Final[str] = "garden.passthrough"
PASSTHROUGH_SEPARATOR: Final[str] = "--"


class SortedTyperCommand(TyperCommand):
    """Typer command that renders options in sorted order within help output."""

    def format_options(self, ctx: Context, formatter: HelpFormatter) -> None:
        """Render positional arguments and then the options sorted by name."""

        argument_records: list[tuple[str, str]] = []
        option_entries: list[tuple[tuple[str, int], tuple[str, str]]] = []
        for index, param in enumerate(self.get_params(ctx)):
            record = param.get_help_record(ctx)
            if record is None:
                continue
            if getattr(param, "param_type_name", "") == ARGUMENT_PARAM_TYPE:
                argument_records.append(record)
                continue
            option_entries.append(((_primary_option_name(param), index), record))

        if argument_records:
            with formatter.section("Arguments"):
                formatter.write_dl(argument_records)
        if option_entries:
            with formatter.section("Options"):
                formatter.write_dl([record for _, record in sorted(option_entries, key=lambda item: item[0])])


class PassthroughCommand(SortedTyperCommand):
    """Command whose arguments after ``--`` are handed to the executed commands.

    The trailing arguments are stored in ``ctx.meta`` and retrieved with
    :func:`passthrough_arguments`.
    """

    def parse_args(self, ctx: Context, args: list[str]) -> list[str]:
        if PASSTHROUGH_SEPARATOR in args:
            index = args.index(PASSTHROUGH_SEPARATOR)
            ctx.meta[PASSTHROUGH_KEY] = args[index + 1 :]
            args = args[:index]
        else:
            ctx.meta[PASSTHROUGH_KEY] = []
        return super().parse_args(ctx, args)


def passthrough_arguments(ctx: Context) -> list[str]:
    """Return the arguments that followed ``--`` on the command line."""

    return list(ctx.meta.get(PASSTHROUGH_KEY, []))


class GardenGroup(TyperGroup):
    """Command group resolving aliases and treating unknown names as custom commands.

    Attributes:
        custom_factory: Builds the click command run for a :class:`CustomCommand`;
            subclasses assign it as a ``staticmethod``.
    """

    command_class = SortedTyperCommand
    custom_factory: Callable[[str], click.Command] | None = None

    def get_command(self, ctx: Context, cmd_name: str) -> click.Command | None:
        parsed = parse_command(cmd_name)
        if isinstance(parsed, Command):
            return super().get_command(ctx, parsed.value)
        builtin = super().get_command(ctx, cmd_name)
        if builtin is not None:
            return builtin
        return self._custom_command(parsed)

    def _custom_command(self, custom: CustomCommand) -> click.Command | None:
        if self.custom_factory is None or custom.name.startswith("-"):
            return None
        command = self.custom_factory(custom.name)
        command.name = custom.name
        return command


def create_typer(*, cls: type[TyperGroup] | None = None, **kwargs: Any) -> typer.Typer:
    """Return a :class:`typer.Typer` using :class:`GardenGroup` by default."""

    return typer.Typer(cls=cls or GardenGroup, **kwargs)


def _primary_option_name(param: Parameter) -> str:
    option_names: Iterable[str] = tuple(getattr(param, "opts", ())) + tuple(getattr(param, "secondary_opts", ()))
    long_names = [name for name in option_names if name.startswith("--")]
    candidate = long_names[0] if long_names else (next(iter(option_names), "") or param.name or "")
    return candidate.lstrip("-").lower()


__all__ = [
    "GardenGroup",
    "PassthroughCommand",
    "SortedTyperCommand",
    "create_typer",
    "passthrough_arguments",
]
