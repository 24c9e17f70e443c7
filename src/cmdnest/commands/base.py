"""Base class and registry for commands the framework implements itself."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, List, Optional

from ..context import CommandContext

if TYPE_CHECKING:
    from ..completion import CompletionCoordinator
    from ..dispatcher import Dispatcher


class Builtin(ABC):
    """A command implemented in-process rather than as an external script."""

    #: Name the user types.
    name: str = ""
    #: One-line description for `help` and `commands --summaries`.
    summary: str = ""
    #: Usage line shown by `help <name>`, without the program name.
    usage: str = ""

    def __init__(self):
        self.logger = logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}"
        )

    @abstractmethod
    def run(self, dispatcher: "Dispatcher", args: List[str]) -> int:
        """Execute the builtin and return its exit status."""
        pass

    def complete(self, coordinator: "CompletionCoordinator", word_index: int, args: List[str]) -> List[str]:
        """Candidates for ``args[word_index]``. Builtins offer none by default."""
        return []

    def help_text(self, context: CommandContext) -> str:
        lines = [f"{context.program_name} {self.usage or self.name}", "", self.summary]
        return "\n".join(lines)


class BuiltinRegistry:
    """Registry of builtins, keyed by name."""

    def __init__(self):
        self._builtins: Dict[str, Builtin] = {}
        self.logger = logging.getLogger(__name__)

    def register(self, builtin: Builtin) -> None:
        self._builtins[builtin.name] = builtin
        self.logger.debug(f"Registered builtin: {builtin.name}")

    def get(self, name: str) -> Optional[Builtin]:
        return self._builtins.get(name)

    def names(self) -> List[str]:
        return sorted(self._builtins)

    def all(self) -> List[Builtin]:
        return [self._builtins[name] for name in self.names()]

    def __contains__(self, name: str) -> bool:
        return name in self._builtins
