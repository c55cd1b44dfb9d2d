# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Expression-backed variables with a resettable cached value.

A :class:`Variable` holds an expression such as ``${root}/src`` or
``$ git config remote.origin.url`` together with the value computed for it
during the current evaluation pass. The cached value is returned verbatim
until :meth:`Variable.reset` clears it, which is what lets an exec-backed
variable launch its sub-process at most once per pass.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field


@dataclass(slots=True)
class Variable:
    """Expression plus the value cached for the current evaluation pass."""

    expr: str = ""
    _value: str | None = field(default=None, repr=False)

    def get_value(self) -> str | None:
        """Return the cached value, or ``None`` when it has not been computed."""

        return self._value

    def set_value(self, value: str) -> None:
        """Store ``value`` as the computed result of :attr:`expr`."""

        self._value = value

    def has_value(self) -> bool:
        """Return ``True`` once a value has been cached."""

        return self._value is not None

    def reset(self) -> None:
        """Forget the cached value so the next evaluation recomputes it."""

        self._value = None


@dataclass(slots=True)
class NamedVariable:
    """A :class:`Variable` bound to a name that is unique within its scope."""

    name: str
    variable: Variable = field(default_factory=Variable)

    @classmethod
    def new(cls, name: str, expr: str, value: str | None = None) -> NamedVariable:
        """Build a named variable from an expression and optional cached value."""

        return cls(name=name, variable=Variable(expr, value))

    @property
    def expr(self) -> str:
        """Return the expression bound to this name."""

        return self.variable.expr

    def set_expr(self, expr: str) -> None:
        """Replace the expression. The cached value is left untouched."""

        self.variable.expr = expr

    def get_value(self) -> str | None:
        """Return the cached value, or ``None`` when unset."""

        return self.variable.get_value()

    def set_value(self, value: str) -> None:
        """Cache ``value`` for the bound expression."""

        self.variable.set_value(value)

    def reset(self) -> None:
        """Forget the cached value."""

        self.variable.reset()


@dataclass(slots=True)
class MultiVariable:
    """A name bound to an ordered sequence of variables.

    Used for environment entries and command lists, where one name may
    contribute several values.
    """

    name: str
    variables: list[Variable] = field(default_factory=list)

    @classmethod
    def from_exprs(cls, name: str, exprs: Iterable[str]) -> MultiVariable:
        """Build a multi-variable with one :class:`Variable` per expression."""

        return cls(name=name, variables=[Variable(expr) for expr in exprs])

    def __iter__(self) -> Iterator[Variable]:
        return iter(self.variables)

    def __len__(self) -> int:
        return len(self.variables)

    def get(self, index: int) -> Variable:
        """Return the variable stored at ``index``."""

        return self.variables[index]

    def reset(self) -> None:
        """Forget every cached value in the sequence."""

        for variable in self.variables:
            variable.reset()


def find_variable(variables: Iterable[NamedVariable], name: str) -> NamedVariable | None:
    """Return the first variable in ``variables`` called ``name``.

    Args:
        variables: Scope to search in declaration order.
        name: Exact variable name.

    Returns:
        NamedVariable | None: The matching entry, or ``None``.
    """

    for candidate in variables:
        if candidate.name == name:
            return candidate
    return None


def reset_all(*scopes: Iterable[NamedVariable] | Iterable[MultiVariable]) -> None:
    """Reset every named or multi variable contained in ``scopes``."""

    for scope in scopes:
        for entry in scope:
            entry.reset()


__all__ = [
    "MultiVariable",
    "NamedVariable",
    "Variable",
    "find_variable",
    "reset_all",
]
