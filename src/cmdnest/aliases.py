"""Alias table: short names that expand to argument templates.

Expansion is token0 replacement and happens once per invocation. If an
expansion's first token is itself an alias it stays a literal command name,
so alias cycles cannot occur.
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Union

from .config import ProjectConfig

logger = logging.getLogger(__name__)

# Common text tools, each run as-is from the project root.
DEFAULT_ALIASES: Dict[str, List[str]] = {
    name: [name]
    for name in (
        "awk",
        "cat",
        "diff",
        "find",
        "grep",
        "head",
        "less",
        "ls",
        "sed",
        "sort",
        "tail",
        "wc",
        "xargs",
    )
}

AliasSource = Union[Mapping[str, Union[str, Sequence[str]]], ProjectConfig, Path, None]


def _tokens(expansion: Union[str, Sequence[str]]) -> List[str]:
    if isinstance(expansion, str):
        return shlex.split(expansion)
    return [str(tok) for tok in expansion]


def load(source: AliasSource = None, include_defaults: bool = True) -> Dict[str, List[str]]:
    """Build the alias mapping from ``source``.

    ``source`` may be a plain mapping, a loaded ProjectConfig, or the path of
    a project YAML file. Entries from ``source`` override the defaults.
    """
    aliases: Dict[str, List[str]] = {}
    if include_defaults:
        aliases.update({k: list(v) for k, v in DEFAULT_ALIASES.items()})

    if source is None:
        return aliases
    if isinstance(source, Path):
        source = ProjectConfig.load(source)
    if isinstance(source, ProjectConfig):
        source = source.aliases

    for name, expansion in source.items():
        tokens = _tokens(expansion)
        if not tokens:
            logger.warning(f"Skipping alias {name!r} with an empty expansion")
            continue
        aliases[name] = tokens
    return aliases


class AliasTable:
    def __init__(self, aliases: Optional[Mapping[str, Sequence[str]]] = None):
        if aliases is None:
            aliases = DEFAULT_ALIASES
        self.aliases = {name: list(tokens) for name, tokens in aliases.items()}

    @classmethod
    def from_source(cls, source: AliasSource = None) -> "AliasTable":
        return cls(load(source))

    def has_alias(self, name: str) -> bool:
        return name in self.aliases

    def expand(self, argv: Sequence[str]) -> List[str]:
        """Replace ``argv[0]`` with its expansion, at most once."""
        argv = list(argv)
        if not argv:
            return argv
        expansion = self.aliases.get(argv[0])
        if not expansion:
            return argv
        logger.debug(f"Expanded alias {argv[0]!r} to {expansion!r}")
        return list(expansion) + argv[1:]

    def list_aliases(self) -> List[str]:
        return sorted(self.aliases.keys())

    def get_alias(self, name: str) -> Optional[List[str]]:
        expansion = self.aliases.get(name)
        return list(expansion) if expansion is not None else None
