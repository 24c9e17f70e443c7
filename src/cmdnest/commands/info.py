"""Builtins that describe the command namespace: help, listings and completion."""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..completion import filter_prefix
from ..errors import CmdNestError
from ..namespace import CommandNode, find_node, list_children
from .base import Builtin

if TYPE_CHECKING:
    from ..completion import CompletionCoordinator
    from ..dispatcher import Dispatcher


def _summary_rows(
    dispatcher: "Dispatcher", names: List[str], directories: Optional[List[Path]] = None
) -> List[Tuple[str, str]]:
    """Pair each name with its builtin summary or manifest summary.

    Without ``directories`` names are top-level, so builtins win.
    """
    rows = []
    for name in names:
        builtin = dispatcher.builtins.get(name) if directories is None else None
        if builtin is not None:
            rows.append((name, builtin.summary))
            continue
        node = find_node(directories or dispatcher.context.search_paths, name)
        summary = (node.spec.summary or "") if node is not None else ""
        rows.append((name, summary))
    return rows


class HelpBuiltin(Builtin):
    name = "help"
    summary = "Show usage, or help for a command, builtin or alias"
    usage = "help [command...]"

    def print_usage(self, dispatcher: "Dispatcher", err: bool = False) -> None:
        context = dispatcher.context
        console = Console(stderr=err, highlight=False)
        console.print(f"Usage: {context.program_name} <command> [arguments...]", markup=False)

        table = Table(show_header=False, box=None, pad_edge=False)
        table.add_column("name", style="bold cyan", no_wrap=True)
        table.add_column("summary")

        scripts = [n for n in dispatcher.resolver.top_level_names() if n not in dispatcher.builtins]
        if scripts:
            table.add_row("[bold]Commands[/bold]", "")
            for name, summary in _summary_rows(dispatcher, scripts):
                table.add_row(f"  {escape(name)}", escape(summary))
        table.add_row("[bold]Builtins[/bold]", "")
        for builtin in dispatcher.builtins.all():
            table.add_row(f"  {builtin.name}", builtin.summary)
        aliases = dispatcher.aliases.list_aliases()
        if aliases:
            table.add_row("[bold]Aliases[/bold]", "")
            for name in aliases:
                expansion = shlex.join(dispatcher.aliases.get_alias(name))
                table.add_row(f"  {escape(name)}", escape(f"alias for: {expansion}"))
        console.print(table)
        console.print(
            f"Run '{context.program_name} help <command>' for help on a specific command.", markup=False
        )

    def run(self, dispatcher: "Dispatcher", args: List[str]) -> int:
        if not args:
            self.print_usage(dispatcher)
            return 0

        context = dispatcher.context
        builtin = dispatcher.builtins.get(args[0])
        if builtin is not None:
            click.echo(builtin.help_text(context))
            return 0

        expansion = dispatcher.aliases.get_alias(args[0])
        if expansion is not None:
            click.echo(f"{context.program_name} {args[0]} is an alias for: {shlex.join(expansion)}")
            return 0

        result = dispatcher.resolver.resolve_prefix(args)
        click.echo(self._command_help(dispatcher, result.node, result.consumed))
        return 0

    def _command_help(self, dispatcher: "Dispatcher", node: CommandNode, consumed) -> str:
        context = dispatcher.context
        spec = node.spec
        lines = [f"{context.program_name} {' '.join(consumed)}", ""]
        lines.append(spec.help.rstrip() if spec.help else spec.summary or "No help available.")
        children = list_children(node)
        if children:
            lines.extend(["", "Subcommands:"])
            lines.extend(f"  {child}" for child in children)
        return "\n".join(lines)

    def complete(self, coordinator: "CompletionCoordinator", word_index: int, args: List[str]) -> List[str]:
        candidates = coordinator.complete_command_path(word_index, args)
        if word_index == 0:
            extra = coordinator.aliases.list_aliases()
            candidates = sorted(set(candidates) | set(filter_prefix(extra, args[0])))
        return candidates


class CommandsBuiltin(Builtin):
    name = "commands"
    summary = "List commands, or the subcommands of a command"
    usage = "commands [--summaries] [command...]"

    def run(self, dispatcher: "Dispatcher", args: List[str]) -> int:
        summaries = "--summaries" in args
        path = [a for a in args if a != "--summaries"]

        directories = None
        if not path:
            names = dispatcher.resolver.top_level_names()
        else:
            result = dispatcher.resolver.resolve_prefix(path)
            if result.remaining:
                raise CmdNestError(f"Unknown command: {' '.join(path)}")
            names = list_children(result.node)
            if not names:
                raise CmdNestError(f"{' '.join(path)} has no subcommands")
            directories = [result.node.namespace_dir]

        if not summaries:
            for name in names:
                click.echo(name)
            return 0

        rows = _summary_rows(dispatcher, names, directories)
        width = max(len(name) for name, _ in rows)
        for name, summary in rows:
            click.echo(f"  {name.ljust(width)}  {summary}".rstrip())
        return 0

    def complete(self, coordinator: "CompletionCoordinator", word_index: int, args: List[str]) -> List[str]:
        path = [a for a in args[:word_index] if a != "--summaries"]
        word = args[word_index]
        flags = [] if "--summaries" in args[:word_index] else filter_prefix(["--summaries"], word)
        return flags + coordinator.complete_command_path(len(path), path + [word])


class AliasesBuiltin(Builtin):
    name = "aliases"
    summary = "List aliases, or show what an alias expands to"
    usage = "aliases [name]"

    def run(self, dispatcher: "Dispatcher", args: List[str]) -> int:
        if not args:
            for name in dispatcher.aliases.list_aliases():
                click.echo(name)
            return 0
        expansion = dispatcher.aliases.get_alias(args[0])
        if expansion is None:
            raise CmdNestError(f"Unknown alias: {args[0]}")
        click.echo(shlex.join(expansion))
        return 0

    def complete(self, coordinator: "CompletionCoordinator", word_index: int, args: List[str]) -> List[str]:
        if word_index != 0:
            return []
        return filter_prefix(coordinator.aliases.list_aliases(), args[0])


class BuiltinsBuiltin(Builtin):
    name = "builtins"
    summary = "List the commands built into the framework"
    usage = "builtins"

    def run(self, dispatcher: "Dispatcher", args: List[str]) -> int:
        for name in dispatcher.builtins.names():
            click.echo(name)
        return 0


class CompleteBuiltin(Builtin):
    name = "complete"
    summary = "Print tab-completion candidates for a partial command line"
    usage = "complete <word-index> [arguments...]"

    def run(self, dispatcher: "Dispatcher", args: List[str]) -> int:
        if not args:
            return 0
        try:
            word_index = int(args[0])
        except ValueError:
            self.logger.debug(f"Invalid word index: {args[0]!r}")
            return 0
        for candidate in dispatcher.complete(word_index, args[1:]):
            click.echo(candidate)
        return 0
