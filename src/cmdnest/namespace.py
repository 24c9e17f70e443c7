"""On-demand view of the filesystem command namespace.

A command is an executable file in a search directory. A sibling directory
``<name>.d`` holds its subcommands under the same convention. A ``<name>.d``
directory without a runnable ``<name>`` is a namespace-only node: it groups
subcommands but cannot run by itself. Nothing here is cached, so commands added
between invocations are visible immediately.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from .config import CommandSpec, NamespaceManifest

logger = logging.getLogger(__name__)

NAMESPACE_SUFFIX = ".d"


@dataclass(frozen=True)
class CommandNode:
    name: str
    path: Path
    is_namespace: bool
    is_leaf: bool

    @property
    def namespace_dir(self) -> Optional[Path]:
        if not self.is_namespace:
            return None
        return self.path.parent / f"{self.name}{NAMESPACE_SUFFIX}"

    @property
    def spec(self) -> CommandSpec:
        return NamespaceManifest.load(self.path.parent).spec_for(self.name)

    @property
    def supports_completion(self) -> bool:
        """Whether the leaf declared the ``--complete`` protocol in its manifest."""
        return self.is_leaf and self.spec.complete


def is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def _valid_name(name: str) -> bool:
    return (
        bool(name)
        and not name.startswith(".")
        and "/" not in name
        and os.sep not in name
        and not name.endswith(NAMESPACE_SUFFIX)
    )


def find_node(directories: Iterable[Path], name: str) -> Optional[CommandNode]:
    """Return the first node called ``name`` across ``directories``."""
    if not _valid_name(name):
        return None
    for directory in directories:
        leaf = directory / name
        is_leaf = is_executable(leaf)
        is_namespace = (directory / f"{name}{NAMESPACE_SUFFIX}").is_dir()
        if is_leaf or is_namespace:
            return CommandNode(name=name, path=leaf, is_namespace=is_namespace, is_leaf=is_leaf)
    return None


def list_names(directories: Iterable[Path]) -> List[str]:
    """Sorted, de-duplicated command names visible across ``directories``."""
    names = set()
    for directory in directories:
        try:
            entries = list(directory.iterdir())
        except OSError as e:
            logger.debug(f"Cannot list {directory}: {e}")
            continue
        for entry in entries:
            name = entry.name
            if name.startswith("."):
                continue
            if entry.is_dir():
                if name.endswith(NAMESPACE_SUFFIX) and len(name) > len(NAMESPACE_SUFFIX):
                    names.add(name[: -len(NAMESPACE_SUFFIX)])
            elif _valid_name(name) and is_executable(entry):
                names.add(name)
    return sorted(names)


def list_children(node: CommandNode) -> List[str]:
    ns = node.namespace_dir
    return list_names([ns]) if ns is not None else []
