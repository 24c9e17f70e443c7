"""Completion coordinator: tab-completion candidates for a partially typed command line.

A request is a word index plus the argv typed so far. The coordinator
classifies the request by its first word and either answers it directly
(top-level names, builtin arguments, alias file arguments, namespace
subcommands) or delegates to the resolved command's own ``--complete``
handler with a word index translated into the command's local argv.

Completion never fails: anything unexpected produces an empty list.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .aliases import AliasTable
from .context import CommandContext
from .errors import DelegateCompletionFailure, ResolutionError
from .namespace import CommandNode, list_children
from .process import ProcessRunner
from .resolver import CommandResolver

logger = logging.getLogger(__name__)

COMPLETE_FLAG = "--complete"


def filter_prefix(candidates: Iterable[str], word: str) -> List[str]:
    return [c for c in candidates if c.startswith(word)]


def complete_paths(base_dir: Path, word: str, directories_only: bool = False) -> List[str]:
    """Filesystem entries matching ``word``, relative to ``base_dir``.

    Directory candidates end with a path separator. Hidden entries are only
    offered when the partial name itself starts with a dot.
    """
    if "/" in word:
        head, _, partial = word.rpartition("/")
        prefix = head + "/"
        search = Path(os.path.expanduser(prefix))
        if not search.is_absolute():
            search = base_dir / search
    else:
        prefix, partial, search = "", word, base_dir

    try:
        entries = list(search.iterdir())
    except OSError:
        return []

    results = []
    for entry in entries:
        name = entry.name
        if not name.startswith(partial):
            continue
        if name.startswith(".") and not partial.startswith("."):
            continue
        is_dir = entry.is_dir()
        if directories_only and not is_dir:
            continue
        results.append(prefix + name + ("/" if is_dir else ""))
    return sorted(results)


def flag_candidates(word: str) -> List[str]:
    """Help flag forms offered for the first word."""
    if word == "-" or word.startswith("--"):
        flags = ["--help"]
    elif word.startswith("-h"):
        flags = ["-help"]
    else:
        flags = []
    return filter_prefix(flags, word)


def _in_range(word_index: int, argv: Sequence[str]) -> bool:
    # The word being completed is at most one past the words typed so far.
    return 0 <= word_index <= len(argv)


@dataclass(frozen=True)
class CompletionContext:
    word_index: int
    argv: Tuple[str, ...]

    @classmethod
    def create(cls, word_index: int, argv: Sequence[str]) -> "CompletionContext":
        """Pad ``argv`` so ``argv[word_index]`` always exists."""
        argv = list(argv)
        if word_index >= len(argv):
            argv.extend([""] * (word_index + 1 - len(argv)))
        return cls(word_index=word_index, argv=tuple(argv))

    @property
    def word(self) -> str:
        return self.argv[self.word_index]


@dataclass(frozen=True)
class CompletionPlan:
    """Where a resolution-based completion request lands."""

    node: CommandNode
    names: Tuple[str, ...]
    local_index: int
    args: Tuple[str, ...]

    @property
    def consumed(self) -> int:
        return len(self.names)

    @property
    def in_namespace(self) -> bool:
        # The word being completed is the next segment of a namespace.
        return self.local_index == 0 and self.node.is_namespace

    def delegate_argv(self) -> List[str]:
        return [str(self.node.path), COMPLETE_FLAG, str(self.local_index), *self.args]


class CompletionCoordinator:
    def __init__(
        self,
        context: CommandContext,
        aliases: AliasTable,
        builtins,
        runner: Optional[ProcessRunner] = None,
    ):
        self.context = context
        self.aliases = aliases
        self.builtins = builtins
        self.runner = runner or ProcessRunner()
        self.resolver = CommandResolver(
            context.search_paths, reserved_names=builtins.names(), chain=context.command_chain
        )

    def complete(self, word_index: int, argv: Sequence[str]) -> List[str]:
        if not _in_range(word_index, argv):
            return []
        request = CompletionContext.create(word_index, argv)
        word = request.word

        if word_index == 0:
            return self.complete_top_level(word)

        head = request.argv[0]
        builtin = self.builtins.get(head)
        if builtin is not None:
            return self.complete_builtin(builtin, word_index - 1, request.argv[1:])

        if self.aliases.has_alias(head):
            return complete_paths(self.context.root_dir, word)

        plan = self.plan(word_index, request.argv)
        if plan is None:
            return []
        if plan.in_namespace:
            return filter_prefix(list_children(plan.node), word)
        if plan.node.supports_completion:
            return filter_prefix(self._delegate(plan), word)
        return []

    def complete_builtin(self, builtin, word_index: int, args: Sequence[str]) -> List[str]:
        """Candidates a builtin offers for ``args[word_index]``, its own argv."""
        if not _in_range(word_index, args):
            return []
        request = CompletionContext.create(word_index, args)
        return filter_prefix(builtin.complete(self, word_index, list(request.argv)), request.word)

    def complete_top_level(self, word: str) -> List[str]:
        names = set(self.resolver.top_level_names()) | set(self.aliases.list_aliases())
        return flag_candidates(word) + filter_prefix(sorted(names), word)

    def complete_command_path(self, word_index: int, argv: Sequence[str]) -> List[str]:
        """Complete command names only, never delegating.

        Used by builtins such as ``help`` whose arguments are command paths.
        """
        if not _in_range(word_index, argv):
            return []
        request = CompletionContext.create(word_index, argv)
        if word_index == 0:
            names = set(self.resolver.top_level_names())
            return filter_prefix(sorted(names), request.word)
        plan = self.plan(word_index, request.argv)
        if plan is None or not plan.in_namespace:
            return []
        return filter_prefix(list_children(plan.node), request.word)

    def plan(self, word_index: int, argv: Sequence[str]) -> Optional[CompletionPlan]:
        """Resolve the words before ``word_index`` and translate the index.

        After resolution consumes ``k`` words, the command's local word index
        is ``word_index - k`` and its argv is ``argv[k:]``.
        """
        if not _in_range(word_index, argv):
            return None
        request = CompletionContext.create(word_index, argv)
        typed = list(request.argv[:word_index])
        try:
            result = self.resolver.resolve_prefix(typed)
        except ResolutionError:
            return None
        k = result.depth
        return CompletionPlan(
            node=result.node,
            names=result.consumed,
            local_index=word_index - k,
            args=tuple(request.argv[k:]),
        )

    def _delegate(self, plan: CompletionPlan) -> List[str]:
        argv = plan.delegate_argv()
        try:
            return self.runner.capture(
                argv,
                cwd=self.context.root_dir,
                env=self.context.child_env(plan.names),
            )
        except DelegateCompletionFailure as e:
            logger.debug(f"Completion delegate failed: {e}")
            return []
