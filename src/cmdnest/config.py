"""YAML configuration models: the project file and per-directory command manifests."""

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError

logger = logging.getLogger(__name__)

PROJECT_FILE_NAME = "cmdnest.yaml"
MANIFEST_FILE_NAME = ".cmdnest.yaml"


class ProjectConfig(BaseModel):
    """Settings read from ``cmdnest.yaml`` at the project root."""

    scripts_dir: Optional[str] = Field(
        default=None, description="Scripts directory, relative to the root"
    )
    plugin_dirs: List[str] = Field(
        default_factory=list, description="Extra command search paths"
    )
    editor: Optional[str] = Field(default=None, description="Editor used by `edit`")
    aliases: Dict[str, List[str]] = Field(
        default_factory=dict, description="Alias name -> expansion tokens"
    )

    @field_validator("aliases", mode="before")
    def split_alias_strings(cls, v):
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("aliases must be a mapping of name -> expansion")
        normalized = {}
        for name, expansion in v.items():
            if isinstance(expansion, str):
                expansion = shlex.split(expansion)
            if not expansion:
                raise ValueError(f"alias {name!r} has an empty expansion")
            normalized[str(name)] = [str(tok) for tok in expansion]
        return normalized

    @classmethod
    def from_file(cls, path: Path) -> "ProjectConfig":
        """Load configuration from a YAML file."""
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        except (yaml.YAMLError, ValidationError, TypeError) as e:
            raise ConfigError(f"{path}: {e}") from e

    @classmethod
    def load(cls, path: Path) -> "ProjectConfig":
        """Load ``path`` if it exists, otherwise return the defaults."""
        if path.exists():
            return cls.from_file(path)
        return cls()


class CommandSpec(BaseModel):
    """Capabilities a command declares without being executed."""

    summary: Optional[str] = None
    help: Optional[str] = None
    complete: bool = Field(
        default=False,
        description="Command implements `--complete <wordIndex> <argv...>`",
    )


class NamespaceManifest(BaseModel):
    """Contents of a ``.cmdnest.yaml`` file inside one namespace level."""

    commands: Dict[str, CommandSpec] = Field(default_factory=dict)

    @field_validator("commands", mode="before")
    def allow_bare_entries(cls, v):
        # `name:` with no body declares nothing but is still valid
        if v is None:
            return {}
        if isinstance(v, dict):
            return {k: (spec if spec is not None else {}) for k, spec in v.items()}
        return v

    def spec_for(self, name: str) -> CommandSpec:
        return self.commands.get(name) or CommandSpec()

    @classmethod
    def load(cls, directory: Path) -> "NamespaceManifest":
        """Read the manifest in ``directory``; a bad or missing file reads as empty."""
        path = directory / MANIFEST_FILE_NAME
        if not path.is_file():
            return cls()
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        except (OSError, yaml.YAMLError, ValidationError, TypeError) as e:
            logger.warning(f"Ignoring invalid command manifest {path}: {e}")
            return cls()
