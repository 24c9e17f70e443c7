"""Command resolver: map a token sequence onto the deepest matching command.

Resolution is a pure read of the filesystem. The walk prefers the longest
match: after selecting ``argv[i]`` it tries ``argv[i+1]`` inside
``argv[i].d``, and a deeper match supersedes the shallower one. When the next
token does not match, the shallower leaf stays the target and every remaining
token, the unmatched one included, becomes a plain argument.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import ResolutionError
from .namespace import CommandNode, find_node, list_children, list_names

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionResult:
    node: CommandNode
    consumed: Tuple[str, ...]
    remaining: Tuple[str, ...]

    @property
    def script_path(self) -> Path:
        return self.node.path

    @property
    def depth(self) -> int:
        return len(self.consumed)


class CommandResolver:
    """Resolves argv against a list of top-level search directories.

    ``reserved_names`` are names the dispatcher handles itself (builtins).
    They are never resolved here but are listed alongside the top-level
    commands when resolution fails.
    """

    def __init__(
        self,
        search_paths: Sequence[Path],
        reserved_names: Iterable[str] = (),
        chain: Sequence[str] = (),
    ):
        self.search_paths = list(search_paths)
        self.reserved_names = list(reserved_names)
        self.chain = tuple(chain)

    def top_level_names(self) -> List[str]:
        return sorted(set(list_names(self.search_paths)) | set(self.reserved_names))

    def lookup(self, name: str) -> Optional[CommandNode]:
        return find_node(self.search_paths, name)

    def _walk(self, argv: List[str]) -> Tuple[CommandNode, int]:
        if not argv:
            raise ResolutionError("", self.top_level_names(), chain=self.chain)

        node = self.lookup(argv[0])
        if node is None:
            raise ResolutionError(argv[0], self.top_level_names(), chain=self.chain)

        i = 0
        while node.is_namespace and i + 1 < len(argv):
            child = find_node([node.namespace_dir], argv[i + 1])
            if child is None:
                break
            node = child
            i += 1
        return node, i

    def resolve(self, argv: Sequence[str]) -> ResolutionResult:
        """Find the command ``argv`` names.

        Raises:
            ResolutionError: ``argv[0]`` matches no top-level command, or a
                namespace-only node is not followed by a matching subcommand.
        """
        argv = list(argv)
        node, i = self._walk(argv)

        consumed = tuple(argv[: i + 1])
        if not node.is_leaf:
            # Namespace-only nodes need a subcommand to run.
            token = argv[i + 1] if i + 1 < len(argv) else ""
            raise ResolutionError(token, list_children(node), level=consumed, chain=self.chain)

        result = ResolutionResult(node=node, consumed=consumed, remaining=tuple(argv[i + 1 :]))
        logger.debug(f"Resolved {list(consumed)} to {node.path} with args {list(result.remaining)}")
        return result

    def resolve_prefix(self, argv: Sequence[str]) -> ResolutionResult:
        """Like :meth:`resolve`, but a namespace-only node is an acceptable target.

        Completion uses this to find the deepest node reached by the tokens
        typed so far, whether or not that node can run.
        """
        argv = list(argv)
        node, i = self._walk(argv)
        return ResolutionResult(node=node, consumed=tuple(argv[: i + 1]), remaining=tuple(argv[i + 1 :]))


def resolve(root_dir: Path, argv: Sequence[str]) -> ResolutionResult:
    """Resolve ``argv`` against a single command directory."""
    return CommandResolver([Path(root_dir)]).resolve(argv)
