"""Immutable per-invocation context threaded through resolution, completion and builtins."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Sequence, Tuple

logger = logging.getLogger(__name__)

# Environment variables the framework exports to every child process.
ENV_ROOTDIR = "CMDNEST_ROOTDIR"
ENV_SCRIPTS_DIR = "CMDNEST_SCRIPTS_DIR"
ENV_PROGRAM = "CMDNEST_PROGRAM"
ENV_CMD_NAME = "CMDNEST_CMD_NAME"


@dataclass(frozen=True)
class CommandContext:
    root_dir: Path
    scripts_dir: Path
    program: str
    command_chain: Tuple[str, ...] = ()
    plugin_dirs: Tuple[Path, ...] = ()
    editor: str = "vi"

    @property
    def search_paths(self) -> Tuple[Path, ...]:
        """Top-level command directories in lookup order.

        The scripts directory comes first, then configured plugin directories,
        then every ``<scripts_dir>/plugins/*/bin``. Missing directories are
        skipped; the list is computed on each call so new plugins show up
        immediately.
        """
        paths = [self.scripts_dir, *self.plugin_dirs]
        plugins_root = self.scripts_dir / "plugins"
        if plugins_root.is_dir():
            try:
                plugins = list(plugins_root.iterdir())
            except OSError as e:
                logger.debug(f"Cannot list {plugins_root}: {e}")
                plugins = []
            paths.extend(sorted(p / "bin" for p in plugins if (p / "bin").is_dir()))

        seen = set()
        result = []
        for p in paths:
            if p in seen or not p.is_dir():
                continue
            seen.add(p)
            result.append(p)
        return tuple(result)

    @property
    def program_name(self) -> str:
        return os.path.basename(self.program) or self.program

    def with_chain(self, names: Sequence[str]) -> "CommandContext":
        """Context for a command reached through ``names``."""
        return replace(self, command_chain=self.command_chain + tuple(names))

    def child_env(self, consumed: Sequence[str] = ()) -> Dict[str, str]:
        """Environment for a child process that runs the command ``consumed``."""
        env = dict(os.environ)
        env[ENV_ROOTDIR] = str(self.root_dir)
        env[ENV_SCRIPTS_DIR] = str(self.scripts_dir)
        env[ENV_PROGRAM] = self.program
        env[ENV_CMD_NAME] = " ".join(self.command_chain + tuple(consumed))
        return env
