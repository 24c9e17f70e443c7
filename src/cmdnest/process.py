"""Spawn / wait / capture abstraction for child commands.

Commands run as separate processes and the caller blocks until they exit.
No timeouts are enforced. Completion delegates never write to our stderr:
their diagnostics are discarded so they cannot be mistaken for candidates.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .errors import CommandExecutionError, DelegateCompletionFailure

logger = logging.getLogger(__name__)


def _exit_status(returncode: int) -> int:
    # Killed by signal N: report 128 + N like a POSIX shell.
    if returncode < 0:
        return 128 - returncode
    return returncode


class ProcessRunner:
    """Runs commands in child processes."""

    def run(
        self,
        argv: Sequence[str],
        cwd: Optional[Path] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> int:
        """Run ``argv`` with inherited stdio and return its exit status."""
        logger.debug(f"Running {list(argv)} in {cwd}")
        try:
            completed = subprocess.run(list(argv), cwd=cwd, env=env)
        except FileNotFoundError as e:
            raise CommandExecutionError(argv, "command not found") from e
        except PermissionError as e:
            raise CommandExecutionError(argv, "permission denied") from e
        except OSError as e:
            raise CommandExecutionError(argv, str(e)) from e

        status = _exit_status(completed.returncode)
        logger.debug(f"{argv[0]} exited with status {status}")
        return status

    def capture(
        self,
        argv: Sequence[str],
        cwd: Optional[Path] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> List[str]:
        """Run ``argv`` and return its non-empty stdout lines.

        stderr is discarded and stdin is closed.

        Raises:
            DelegateCompletionFailure: the process could not start, exited
                non-zero, printed nothing, or printed undecodable output.
        """
        logger.debug(f"Capturing output of {list(argv)}")
        try:
            completed = subprocess.run(
                list(argv),
                cwd=cwd,
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise DelegateCompletionFailure(argv, str(e)) from e

        if completed.returncode != 0:
            raise DelegateCompletionFailure(argv, f"exit status {completed.returncode}")
        try:
            text = completed.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DelegateCompletionFailure(argv, "output is not valid UTF-8") from e

        lines = [line for line in text.splitlines() if line.strip()]
        if not lines:
            raise DelegateCompletionFailure(argv, "no output")
        return lines
