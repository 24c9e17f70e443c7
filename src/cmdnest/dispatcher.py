"""Top-level dispatch: alias expansion, then a builtin, a script, or an external program."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import click

from .aliases import AliasTable
from .commands import SHELL_ENVIRONMENT_BUILTINS, default_registry
from .commands.base import BuiltinRegistry
from .completion import COMPLETE_FLAG, CompletionCoordinator
from .context import CommandContext
from .process import ProcessRunner
from .resolver import CommandResolver

logger = logging.getLogger(__name__)

HELP_FLAGS = ("-h", "-help", "--help")


class Dispatcher:
    def __init__(
        self,
        context: CommandContext,
        aliases: Optional[AliasTable] = None,
        builtins: Optional[BuiltinRegistry] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        self.context = context
        self.aliases = aliases if aliases is not None else AliasTable()
        self.builtins = builtins if builtins is not None else default_registry()
        self.runner = runner or ProcessRunner()
        self.resolver = CommandResolver(
            context.search_paths,
            reserved_names=self.builtins.names(),
            chain=context.command_chain,
        )
        self._coordinator: Optional[CompletionCoordinator] = None

    @property
    def coordinator(self) -> CompletionCoordinator:
        if self._coordinator is None:
            self._coordinator = CompletionCoordinator(
                self.context, self.aliases, self.builtins, runner=self.runner
            )
        return self._coordinator

    def dispatch(self, argv: Sequence[str]) -> int:
        """Run the command ``argv`` names and return the exit status to relay."""
        argv = list(argv)
        help_builtin = self.builtins.get("help")
        if not argv:
            help_builtin.print_usage(self, err=True)
            return 1
        if argv[0] in HELP_FLAGS:
            argv = ["help"] + argv[1:]

        from_alias = self.aliases.has_alias(argv[0])
        argv = self.aliases.expand(argv)
        head = argv[0]

        builtin = self.builtins.get(head)
        if builtin is not None:
            if argv[1:2] == [COMPLETE_FLAG] and head not in SHELL_ENVIRONMENT_BUILTINS:
                return self.complete_builtin(builtin, argv[2:])
            logger.debug(f"Running builtin {head} with args {argv[1:]}")
            return builtin.run(self, argv[1:])

        if from_alias and self.resolver.lookup(head) is None:
            return self.run_external(argv)
        return self.run_command(argv)

    def run_command(self, argv: List[str]) -> int:
        result = self.resolver.resolve(argv)
        return self.runner.run(
            [str(result.script_path), *result.remaining],
            cwd=self.context.root_dir,
            env=self.context.child_env(result.consumed),
        )

    def run_external(self, argv: List[str]) -> int:
        logger.debug(f"Running external program {argv}")
        return self.runner.run(argv, cwd=self.context.root_dir, env=self.context.child_env())

    def complete(self, word_index: int, argv: Sequence[str]) -> List[str]:
        return self.coordinator.complete(word_index, argv)

    def complete_builtin(self, builtin, args: List[str]) -> int:
        """Answer ``<builtin> --complete <wordIndex> [args...]``; always exits 0."""
        try:
            word_index = int(args[0])
        except (IndexError, ValueError):
            logger.debug(f"Invalid completion request for {builtin.name}: {args}")
            return 0
        for candidate in self.coordinator.complete_builtin(builtin, word_index, args[1:]):
            click.echo(candidate)
        return 0
