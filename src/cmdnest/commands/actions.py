"""Builtins that run something on the user's behalf and relay its exit status."""

from __future__ import annotations

import shlex
from typing import TYPE_CHECKING, List

from ..completion import complete_paths
from ..errors import MissingArgumentError
from .base import Builtin

if TYPE_CHECKING:
    from ..completion import CompletionCoordinator
    from ..dispatcher import Dispatcher


class FileArgumentBuiltin(Builtin):
    """A builtin whose arguments are paths under the project root."""

    def complete(self, coordinator: "CompletionCoordinator", word_index: int, args: List[str]) -> List[str]:
        return complete_paths(coordinator.context.root_dir, args[word_index])


class EditBuiltin(FileArgumentBuiltin):
    name = "edit"
    summary = "Open files in the configured editor"
    usage = "edit <path...>"

    def run(self, dispatcher: "Dispatcher", args: List[str]) -> int:
        context = dispatcher.context
        if not args:
            raise MissingArgumentError(self.name, "a file path", context.program_name)
        argv = shlex.split(context.editor) + args
        return dispatcher.runner.run(argv, cwd=context.root_dir, env=context.child_env())


class RunBuiltin(FileArgumentBuiltin):
    name = "run"
    summary = "Run an arbitrary command line from the project root"
    usage = "run <command> [arguments...]"

    def run(self, dispatcher: "Dispatcher", args: List[str]) -> int:
        context = dispatcher.context
        if not args:
            raise MissingArgumentError(self.name, "a command", context.program_name)
        return dispatcher.runner.run(args, cwd=context.root_dir, env=context.child_env())
