# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run commands across the trees selected by a query.

Execution is sequential: each context is evaluated and its process awaited
before the next begins. Configuration caches are reset before every context
so values computed for one tree never leak into the next.

Exit status aggregation keeps the *last* non-zero status observed. A failing
tree never stops the remaining trees from running.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

from . import process
from .composer import ConfigForest
from .display import Display
from .errors import ConfigurationError, UsageError
from .evaluation import Evaluator
from .model import Configuration, TreeContext
from .process import ProcessRunner
from .query import resolve_trees

LOGGER = logging.getLogger(__name__)


def aggregate_exit_status(statuses: Iterable[int]) -> int:
    """Return the last non-zero status in ``statuses``, or 0.

    Every status is consumed, so lazily produced statuses all run.
    """

    last_nonzero = 0
    for status in statuses:
        if status != 0:
            last_nonzero = status
    return last_nonzero


@dataclass(slots=True)
class Orchestrator:
    """Drive resolved tree contexts through evaluation and process execution.

    Attributes:
        config: Configuration the selectors are resolved against.
        forest: Forest used to reach graft configurations.
        runner: Process runner; defaults to :func:`garden.process.run_command`.
        display: Renderer for progress lines.
        quiet: Suppress progress lines.
        verbose: Include tree paths in progress lines.
    """

    config: Configuration
    forest: ConfigForest | None = None
    runner: ProcessRunner | None = None
    display: Display = field(default_factory=lambda: Display.create(color=False))
    quiet: bool = False
    verbose: bool = False

    # exec ----------------------------------------------------------------------

    def run(self, query: str, command: Sequence[str]) -> int:
        """Run ``command`` in every non-symlink tree selected by ``query``.

        Args:
            query: Tree query selecting gardens, groups or trees.
            command: Argument vector executed in each tree directory.

        Returns:
            int: The last non-zero exit status, or 0.

        Raises:
            UsageError: ``command`` is empty.
        """

        if not command:
            raise UsageError("a command to execute must be specified")
        contexts = self.resolve(query)
        return aggregate_exit_status(self._exec_contexts(contexts, command))

    def exec_in_context(self, context: TreeContext, command: Sequence[str]) -> int:
        """Evaluate the environment for ``context`` and run ``command`` in its tree."""

        config = self.config_for(context)
        config.reset()
        tree = config.trees[context.tree]
        env = dict(Evaluator.for_context(config, context).environment())
        path = tree.path_as_ref()
        self.display.print_tree_details(tree, verbose=self.verbose, quiet=self.quiet)
        LOGGER.debug("exec tree=%s path=%s command=%s", tree.name, path, list(command))
        return self._runner(command, cwd=path, env=env)

    # cmd -----------------------------------------------------------------------

    def run_commands(
        self,
        query: str,
        names: Sequence[str],
        *,
        arguments: Sequence[str] = (),
        keep_going: bool = False,
    ) -> int:
        """Run the named ``commands`` entries in every tree selected by ``query``.

        Each command line runs as ``<shell> -e -c <line> <name> <arguments...>``
        inside the tree. Trees missing on disk are reported and skipped. Unless
        ``keep_going`` is set, a failing command stops the remaining commands
        for that tree; other trees still run.

        Returns:
            int: The last non-zero exit status, or 0.
        """

        if not names:
            raise UsageError("a command name must be specified")
        contexts = self.resolve(query)
        statuses = (
            self.commands_in_context(context, names, arguments=arguments, keep_going=keep_going)
            for context in contexts
            if not self.config_for(context).trees[context.tree].is_symlink
        )
        return aggregate_exit_status(statuses)

    def commands_in_context(
        self,
        context: TreeContext,
        names: Sequence[str],
        *,
        arguments: Sequence[str] = (),
        keep_going: bool = False,
    ) -> int:
        """Run the named commands for a single context and return its status."""

        config = self.config_for(context)
        config.reset()
        tree = config.trees[context.tree]
        if not self.display.print_tree(tree, verbose=self.verbose, quiet=self.quiet):
            return 0
        evaluator = Evaluator.for_context(config, context)
        env = dict(evaluator.environment())
        path = tree.path_as_ref()
        status = 0
        for name in names:
            lines = evaluator.commands(name)
            if not lines:
                LOGGER.debug("no command name=%s tree=%s", name, tree.name)
            for line in lines:
                argv = [config.shell, "-e", "-c", line, name, *arguments]
                LOGGER.debug("cmd tree=%s name=%s line=%s", tree.name, name, line)
                result = self._runner(argv, cwd=path, env=env)
                if result == 0:
                    continue
                status = result
                if not keep_going:
                    return status
        return status

    # shell ---------------------------------------------------------------------

    def open_shell(self, query: str, tree: str | None = None) -> int:
        """Run the configuration shell interactively inside one selected tree.

        Args:
            query: Tree query; the first matching context is used.
            tree: Optional tree name that must be among the matches.

        Returns:
            int: The shell's exit status.

        Raises:
            ConfigurationError: Nothing matches, or ``tree`` is not matched.
        """

        contexts = [ctx for ctx in self.resolve(query) if not self.config_for(ctx).trees[ctx.tree].is_symlink]
        if tree is not None:
            contexts = [ctx for ctx in contexts if self.config_for(ctx).trees[ctx.tree].name == tree]
        if not contexts:
            target = f"{tree} in {query}" if tree else query
            raise ConfigurationError(f"unable to find a tree for: {target}")
        context = contexts[0]
        config = self.config_for(context)
        config.reset()
        env = dict(Evaluator.for_context(config, context).environment())
        return self._runner([config.shell], cwd=config.trees[context.tree].path_as_ref(), env=env)

    # helpers -------------------------------------------------------------------

    def resolve(self, query: str) -> list[TreeContext]:
        """Resolve ``query`` against the configuration (and its grafts)."""

        return resolve_trees(self.config, query, forest=self.forest)

    def config_for(self, context: TreeContext) -> Configuration:
        """Return the configuration that ``context`` belongs to."""

        if self.forest is None or context.config is None or context.config == self.config.id:
            return self.config
        return self.forest.get(context.config)

    def _exec_contexts(self, contexts: Iterable[TreeContext], command: Sequence[str]) -> Iterator[int]:
        for context in contexts:
            if self.config_for(context).trees[context.tree].is_symlink:
                continue
            yield self.exec_in_context(context, command)

    @property
    def _runner(self) -> ProcessRunner:
        return self.runner or process.run_command


def run(
    config: Configuration,
    query: str,
    command: Sequence[str],
    *,
    quiet: bool = False,
    verbose: bool = False,
    forest: ConfigForest | None = None,
    runner: ProcessRunner | None = None,
    display: Display | None = None,
) -> int:
    """Run ``command`` across the trees selected by ``query``.

    Args:
        config: Configuration the query is resolved against.
        query: Tree query selecting gardens, groups or trees.
        command: Argument vector executed in each tree directory.
        quiet: Suppress per-tree progress lines.
        verbose: Include tree paths in progress lines.
        forest: Forest used to reach graft configurations.
        runner: Process runner override.
        display: Progress renderer override.

    Returns:
        int: The last non-zero exit status observed, or 0.
    """

    orchestrator = Orchestrator(
        config=config,
        forest=forest,
        runner=runner,
        display=display or Display.create(color=False),
        quiet=quiet,
        verbose=verbose,
    )
    return orchestrator.run(query, command)


__all__ = ["Orchestrator", "aggregate_exit_status", "run"]
