"""Builtins that only make sense inside the caller's interactive shell.

``cd``, ``pushd``, ``popd`` and ``unenv`` change the state of the shell that
typed them, which a child process cannot do. The shell function emitted by
``env`` handles them in the shell itself; reaching the Python process means
the function was never installed, so they fail with a fixed message.
"""

from __future__ import annotations

import os
import re
import shlex
import sys
from typing import TYPE_CHECKING, List

import click

from ..completion import complete_paths
from ..errors import BuiltinUsageError, CmdNestError
from .base import Builtin

if TYPE_CHECKING:
    from ..completion import CompletionCoordinator
    from ..dispatcher import Dispatcher

_FUNCTION_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")


class ShellEnvironmentBuiltin(Builtin):
    """Fails deterministically whatever its arguments."""

    def run(self, dispatcher: "Dispatcher", args: List[str]) -> int:
        raise BuiltinUsageError(self.name, dispatcher.context.program)


class CdBuiltin(ShellEnvironmentBuiltin):
    name = "cd"
    summary = "Change to a directory relative to the project root"
    usage = "cd [directory]"

    def complete(self, coordinator: "CompletionCoordinator", word_index: int, args: List[str]) -> List[str]:
        if word_index != 0:
            return []
        return complete_paths(coordinator.context.root_dir, args[word_index], directories_only=True)


class PushdBuiltin(CdBuiltin):
    name = "pushd"
    summary = "Push a directory relative to the project root onto the directory stack"
    usage = "pushd [directory]"


class PopdBuiltin(ShellEnvironmentBuiltin):
    name = "popd"
    summary = "Pop a directory off the directory stack"
    usage = "popd"


class UnenvBuiltin(ShellEnvironmentBuiltin):
    name = "unenv"
    summary = "Remove the shell function installed by env"
    usage = "unenv"


_ENV_TEMPLATE = """\
{fn}() {{
  case "$1" in
  cd|pushd)
    builtin "$1" {root}/"${{2:-}}"
    ;;
  popd)
    builtin popd "${{@:2}}"
    ;;
  unenv)
    unset -f {fn} _{fn}_complete
    complete -r {fn} 2>/dev/null
    ;;
  *)
    {program} "$@"
    ;;
  esac
}}

_{fn}_complete() {{
  local IFS=$'\\n'
  COMPREPLY=($({program} complete "$((COMP_CWORD - 1))" "${{COMP_WORDS[@]:1}}"))
  if [[ "${{#COMPREPLY[@]}}" -eq 1 && "${{COMPREPLY[0]}}" == */ ]]; then
    compopt -o nospace
  fi
}}
complete -F _{fn}_complete {fn}
"""


class EnvBuiltin(Builtin):
    name = "env"
    summary = "Print a bash snippet that installs this program as a shell function"
    usage = "env [function-name]"

    @staticmethod
    def program_command(program: str) -> str:
        """Shell words that re-run this program.

        Under ``python -m cmdnest`` the invocation path is the package's
        ``__main__.py``, which cannot run on its own.
        """
        if os.path.basename(program) == "__main__.py":
            return f"{shlex.quote(sys.executable)} -m cmdnest"
        return shlex.quote(os.path.abspath(program))

    def render(self, dispatcher: "Dispatcher", fn: str) -> str:
        context = dispatcher.context
        return _ENV_TEMPLATE.format(
            fn=fn,
            root=shlex.quote(str(context.root_dir)),
            program=self.program_command(context.program),
        )

    def run(self, dispatcher: "Dispatcher", args: List[str]) -> int:
        fn = args[0] if args else dispatcher.context.program_name
        if not _FUNCTION_NAME.match(fn):
            raise CmdNestError(
                f"Invalid shell function name: {fn}",
                f'Use letters, digits, "_" or "-", e.g. "{dispatcher.context.program_name} env proj".',
            )
        click.echo(self.render(dispatcher, fn), nl=False)
        return 0
