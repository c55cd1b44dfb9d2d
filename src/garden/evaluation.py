# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Variable evaluation: ``${name}`` substitution and exec expressions.

Evaluation is total. A reference that cannot be resolved expands to the empty
string, a failed exec expression yields whatever output it produced, and a
reference cycle (``a -> b -> a``) resolves the re-entrant name to the empty
string instead of recursing.

Names are looked up through the scope chain of the evaluation context:

1. the tree's own variables, then those of its templates (tree-local wins),
2. the garden's variables,
3. the configuration's global variables,
4. built-ins synthesised from the context (``GARDEN_ROOT``,
   ``GARDEN_CONFIG_DIR``, ``TREE_NAME``, ``TREE_PATH``),
5. the inherited process environment.

Each :class:`~garden.model.Variable` caches its value after the first
evaluation. :meth:`Configuration.reset` clears those caches between contexts.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Final

from . import process, syntax

if TYPE_CHECKING:
    from .model import (
        Configuration,
        EvalContext,
        Garden,
        GardenIndex,
        MultiVariable,
        NamedVariable,
        Template,
        Tree,
        TreeContext,
        TreeIndex,
        Variable,
    )

LOGGER = logging.getLogger(__name__)

_REFERENCE_RE: Final[re.Pattern[str]] = re.compile(r"\$\{([^{}]*)\}")

CaptureFn = Callable[..., str]
Environment = list[tuple[str, str]]


class Evaluator:
    """Evaluate expressions against one configuration and context.

    An evaluator instance represents a single evaluation pass: it tracks the
    names currently being resolved so cyclic references terminate.
    """

    def __init__(
        self,
        config: Configuration,
        *,
        tree: TreeIndex | None = None,
        garden: GardenIndex | None = None,
        capture: CaptureFn | None = None,
    ) -> None:
        """Bind the evaluator to ``config`` and an optional tree and garden.

        Args:
            config: Configuration providing the global scope.
            tree: Index of the tree whose scope takes precedence.
            garden: Index of the garden whose scope follows the tree's.
            capture: Replacement for :func:`garden.process.capture_stdout`.
        """

        self.config = config
        self.tree: Tree | None = config.trees[tree] if tree is not None else None
        self.garden: Garden | None = config.gardens[garden] if garden is not None else None
        self._capture = capture
        self._active: set[str] = set()

    @classmethod
    def for_context(
        cls,
        config: Configuration,
        context: TreeContext | EvalContext,
        *,
        capture: CaptureFn | None = None,
    ) -> Evaluator:
        """Return an evaluator for the tree and garden named by ``context``."""

        return cls(config, tree=context.tree, garden=context.garden, capture=capture)

    # Expressions ---------------------------------------------------------------

    def evaluate(self, expr: str) -> str:
        """Return the value of ``expr``.

        Args:
            expr: Literal text with ``${name}`` references, or an exec
                expression beginning with ``$ ``.

        Returns:
            str: The substituted text, or the trimmed output of the command.
        """

        if syntax.is_exec(expr):
            return self._execute(self.substitute(syntax.trim_exec(expr)))
        return self.substitute(expr)

    def substitute(self, text: str) -> str:
        """Replace every ``${name}`` in ``text`` with its resolved value."""

        if "${" not in text:
            return text
        return _REFERENCE_RE.sub(lambda match: self.lookup(match.group(1).strip()), text)

    def evaluate_variable(self, variable: Variable) -> str:
        """Return the cached value of ``variable``, computing it on first use."""

        cached = variable.get_value()
        if cached is not None:
            return cached
        result = self.evaluate(variable.expr)
        variable.set_value(result)
        return result

    def evaluate_multi(self, multi: MultiVariable) -> list[str]:
        """Evaluate every entry of ``multi`` in order."""

        return [self.evaluate_variable(variable) for variable in multi]

    def lookup(self, name: str) -> str:
        """Resolve ``name`` through the scope chain, returning "" when unresolved."""

        if name in self._active:
            LOGGER.debug("cyclic reference name=%s", name)
            return ""
        found = self.find(name)
        if found is not None:
            self._active.add(name)
            try:
                return self.evaluate_variable(found.variable)
            finally:
                self._active.discard(name)
        builtin = self._builtin(name)
        if builtin is not None:
            return builtin
        return os.environ.get(name, "")

    def find(self, name: str) -> NamedVariable | None:
        """Return the variable that ``name`` resolves to in this context."""

        for scope in self._variable_scopes():
            for candidate in scope:
                if candidate.name == name:
                    return candidate
        return None

    # Environment and commands --------------------------------------------------

    def environment(self) -> Environment:
        """Return the evaluated environment as ordered ``(name, value)`` pairs.

        Entries contribute in scope order (global, garden, templates, tree).
        ``NAME=`` replaces, ``NAME+`` appends with ``:`` and a bare ``NAME``
        prepends with ``:`` onto the value accumulated so far, falling back to
        the inherited process environment.
        """

        values: dict[str, str] = {}
        result: Environment = []
        for entry in self._environment_entries():
            is_assign = syntax.is_replace_op(entry.name)
            is_append = syntax.is_append_op(entry.name)
            name = syntax.trim_op(entry.name)
            for value in self.evaluate_multi(entry):
                current = values.get(name, os.environ.get(name))
                if current is None or is_assign:
                    updated = value
                elif is_append:
                    updated = f"{current}{syntax.PATH_SEPARATOR}{value}"
                else:
                    updated = f"{value}{syntax.PATH_SEPARATOR}{current}"
                values[name] = updated
                result.append((name, updated))
        return result

    def commands(self, name: str) -> list[str]:
        """Return the evaluated command lines registered under ``name``.

        Global commands run first, then the garden's, then the tree's. A
        tree-local command replaces a same-named command from its templates.
        """

        result: list[str] = []
        scopes: list[Iterable[MultiVariable]] = [self.config.commands]
        if self.garden is not None:
            scopes.append(self.garden.commands)
        if self.tree is not None:
            scopes.append(self._tree_commands(name))
        for scope in scopes:
            for entry in scope:
                if entry.name == name:
                    result.extend(self.evaluate_multi(entry))
        return result

    def command_names(self) -> list[str]:
        """Return every command name visible in this context, in first-seen order."""

        scopes: list[Iterable[MultiVariable]] = [self.config.commands]
        if self.garden is not None:
            scopes.append(self.garden.commands)
        if self.tree is not None:
            scopes.append(self.tree.commands)
            scopes.extend(template.commands for template in self.templates())
        names: dict[str, None] = {}
        for scope in scopes:
            for entry in scope:
                names.setdefault(entry.name, None)
        return list(names)

    def named_values(self, variables: Iterable[NamedVariable]) -> list[tuple[str, str]]:
        """Evaluate named variables such as remotes or gitconfig entries."""

        return [(entry.name, self.evaluate_variable(entry.variable)) for entry in variables]

    def templates(self) -> Iterator[Template]:
        """Yield the current tree's templates depth-first through ``extend``."""

        if self.tree is None:
            return
        seen: set[str] = set()
        pending = list(self.tree.templates)
        while pending:
            template_name = pending.pop(0)
            if template_name in seen:
                continue
            seen.add(template_name)
            template = self.config.get_template(template_name)
            if template is None:
                LOGGER.debug("unknown template name=%s tree=%s", template_name, self.tree.name)
                continue
            yield template
            pending[:0] = template.extend

    # Internals -----------------------------------------------------------------

    def _variable_scopes(self) -> Iterator[Iterable[NamedVariable]]:
        if self.tree is not None:
            yield self.tree.variables
            for template in self.templates():
                yield template.variables
        if self.garden is not None:
            yield self.garden.variables
        yield self.config.variables

    def _environment_entries(self) -> Iterator[MultiVariable]:
        yield from self.config.environment
        if self.garden is not None:
            yield from self.garden.environment
        if self.tree is not None:
            for template in reversed(list(self.templates())):
                yield from template.environment
            yield from self.tree.environment

    def _tree_commands(self, name: str) -> list[MultiVariable]:
        assert self.tree is not None
        own = [entry for entry in self.tree.commands if entry.name == name]
        if own:
            return own
        for template in self.templates():
            inherited = [entry for entry in template.commands if entry.name == name]
            if inherited:
                return inherited
        return []

    def _builtin(self, name: str) -> str | None:
        if name == "GARDEN_ROOT":
            root = self.config.root.get_value()
            return root if root is not None else ""
        if name == "GARDEN_CONFIG_DIR":
            return str(self.config.dirname) if self.config.dirname is not None else ""
        if self.tree is not None:
            if name == "TREE_NAME":
                return self.tree.name
            if name == "TREE_PATH":
                return self.tree.path.get_value() or ""
        return None

    def _execute(self, command: str) -> str:
        capture = self._capture or process.capture_stdout
        return capture(command, shell=self.config.shell, cwd=self._exec_cwd())

    def _exec_cwd(self) -> Path | None:
        if self.tree is not None and self.tree.path_is_valid():
            path = Path(self.tree.path_as_ref())
            if path.is_dir():
                return path
        if self.config.dirname is not None and self.config.dirname.is_dir():
            return self.config.dirname
        return None


def value(config: Configuration, expr: str) -> str:
    """Evaluate ``expr`` in the global scope of ``config``."""

    return Evaluator(config).evaluate(expr)


def tree_value(
    config: Configuration,
    expr: str,
    tree: TreeIndex,
    garden: GardenIndex | None = None,
) -> str:
    """Evaluate ``expr`` in the scope of ``tree`` and an optional ``garden``."""

    return Evaluator(config, tree=tree, garden=garden).evaluate(expr)


def environment(config: Configuration, context: TreeContext | EvalContext) -> Environment:
    """Return the evaluated environment for ``context``."""

    return Evaluator.for_context(config, context).environment()


def command(config: Configuration, context: TreeContext | EvalContext, name: str) -> list[str]:
    """Return the evaluated command lines called ``name`` for ``context``."""

    return Evaluator.for_context(config, context).commands(name)


def multi_variable(
    config: Configuration,
    multi: MultiVariable,
    context: TreeContext | EvalContext,
) -> list[str]:
    """Evaluate every entry of ``multi`` in ``context``."""

    return Evaluator.for_context(config, context).evaluate_multi(multi)


__all__ = [
    "Environment",
    "Evaluator",
    "command",
    "environment",
    "multi_variable",
    "tree_value",
    "value",
]
