"""Error taxonomy for the cmdnest dispatcher.

Every user-visible error is a :class:`click.ClickException`, so click writes it
to stderr and exits with status 1. Delegate completion failures are internal
and never reach the user.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

import click


class CmdNestError(click.ClickException):
    """Base class for all CLI-visible errors."""

    #: Short, actionable suggestion shown after the main message.
    hint: Optional[str] = None

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message)
        if hint is not None:
            self.hint = hint

    @property
    def formatted_message(self) -> str:
        """The main message, then the hint (if any) in yellow on its own line."""
        lines = [self.message]
        if self.hint:
            lines.append(click.style(self.hint, fg="yellow"))
        return "\n".join(lines)

    # Click calls show to emit the message.
    def show(self, file=None) -> None:
        click.echo(self.formatted_message, err=True, file=file)


class ResolutionError(CmdNestError):
    """Raised when no command matches a token at some namespace depth."""

    def __init__(
        self,
        token: str,
        available: Iterable[str],
        level: Sequence[str] = (),
        chain: Sequence[str] = (),
    ) -> None:
        self.token = token
        self.available = sorted(set(available))
        self.level = tuple(level)
        self.chain = tuple(chain)

        if self.level and not token:
            headline = f"Missing subcommand for: {' '.join(self.level)}"
        else:
            headline = f"Unknown command: {token}"
        if self.chain:
            headline = f"{' '.join(self.chain)}: {headline}"

        if self.level:
            header = f"Available {' '.join(self.level)} subcommands are:"
        else:
            header = "Available commands are:"
        lines = [headline, "", header]
        lines.extend(f"  {name}" for name in self.available)
        super().__init__("\n".join(lines))


class BuiltinUsageError(CmdNestError):
    """Raised when a shell-environment builtin runs as an ordinary subprocess."""

    def __init__(self, name: str, program: str) -> None:
        self.name = name
        self.program = program
        super().__init__(
            f'{name} is only available after using "{program} env" to set up\n'
            "your shell environment."
        )


class ConfigError(CmdNestError):
    """Raised when there's a configuration problem."""

    def __init__(self, details: str):
        super().__init__(
            f"Configuration problem: {details}",
            "Check the YAML syntax of cmdnest.yaml and the CMDNEST_* environment variables.",
        )


class CommandExecutionError(CmdNestError):
    """Raised when a resolved command or alias target cannot be started."""

    def __init__(self, argv: Sequence[str], reason: str):
        self.argv = list(argv)
        name = argv[0] if argv else ""
        super().__init__(f"Failed to run {name}: {reason}")


class MissingArgumentError(CmdNestError):
    """Raised when a builtin is invoked without a required argument."""

    def __init__(self, builtin: str, what: str, program: str):
        super().__init__(
            f"{builtin}: {what} required",
            f"Run {click.style(f'{program} help {builtin}', fg='cyan')} for usage.",
        )


class DelegateCompletionFailure(Exception):
    """A completion delegate exited non-zero or produced unusable output.

    Never surfaced: the completion coordinator turns it into an empty
    candidate list.
    """

    def __init__(self, argv: Sequence[str], reason: str):
        self.argv = list(argv)
        self.reason = reason
        super().__init__(f"{' '.join(self.argv)}: {reason}")
