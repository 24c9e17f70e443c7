"""Environment-based configuration using pydantic-settings.

This module defines the Settings class that loads configuration from
``CMDNEST_*`` environment variables and an optional .env file, and merges it
over the project's ``cmdnest.yaml`` to build the immutable CommandContext.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import PROJECT_FILE_NAME, ProjectConfig
from .context import CommandContext

# Captured once at import time, before anything can rewrite sys.argv.
_INVOCATION_PATH = sys.argv[0] if sys.argv and sys.argv[0] else "cmdnest"


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="CMDNEST_", case_sensitive=False, extra="ignore"
    )

    # Layout
    rootdir: Optional[Path] = Field(default=None, description="Project root directory")
    scripts_dir: Optional[Path] = Field(default=None, description="Command scripts directory")
    plugin_dirs: str = Field(default="", description="Extra search paths, os.pathsep separated")
    config: Optional[Path] = Field(default=None, description="Path to cmdnest.yaml")

    # Invocation
    program: Optional[str] = Field(default=None, description="Invocation path of the program")
    cmd_name: str = Field(default="", description="Command-name chain of the calling command")
    editor: Optional[str] = None

    # Logging
    log_level: str = Field(default="WARNING", description="Application log level")
    log_format: str = Field(default="text", description="Log format: json or text")

    def plugin_dir_list(self) -> List[Path]:
        return [Path(p) for p in self.plugin_dirs.split(os.pathsep) if p]

    def root(self) -> Path:
        return (self.rootdir or Path.cwd()).resolve()

    def project_config(self) -> ProjectConfig:
        path = self.config or (self.root() / PROJECT_FILE_NAME)
        return ProjectConfig.load(Path(path))

    def to_context(self, project: Optional[ProjectConfig] = None) -> CommandContext:
        """Merge environment settings over the project file into a CommandContext.

        Environment variables take precedence over ``cmdnest.yaml``, which
        takes precedence over the defaults.
        """
        root = self.root()
        if project is None:
            project = self.project_config()

        scripts_dir = self.scripts_dir or project.scripts_dir or "scripts"
        plugin_dirs = self.plugin_dir_list() or [Path(p) for p in project.plugin_dirs]
        editor = self.editor or project.editor or os.environ.get("EDITOR") or "vi"

        return CommandContext(
            root_dir=root,
            scripts_dir=root / scripts_dir,
            program=self.program or _INVOCATION_PATH,
            command_chain=tuple(self.cmd_name.split()),
            plugin_dirs=tuple(root / p for p in plugin_dirs),
            editor=editor,
        )
