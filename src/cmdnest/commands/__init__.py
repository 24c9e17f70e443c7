"""Commands built into the framework.

Environment-mutating builtins (``cd``, ``pushd``, ``popd``, ``unenv``) only work
through the shell function printed by ``env``; the rest run in-process.
"""

from .actions import EditBuiltin, RunBuiltin
from .base import Builtin, BuiltinRegistry
from .info import AliasesBuiltin, BuiltinsBuiltin, CommandsBuiltin, CompleteBuiltin, HelpBuiltin
from .shell import CdBuiltin, EnvBuiltin, PopdBuiltin, PushdBuiltin, UnenvBuiltin

BUILTIN_CLASSES = (
    AliasesBuiltin,
    BuiltinsBuiltin,
    CdBuiltin,
    CommandsBuiltin,
    CompleteBuiltin,
    EditBuiltin,
    EnvBuiltin,
    HelpBuiltin,
    PopdBuiltin,
    PushdBuiltin,
    RunBuiltin,
    UnenvBuiltin,
)

# Builtins that change the calling shell and fail outside it.
SHELL_ENVIRONMENT_BUILTINS = ("cd", "popd", "pushd", "unenv")


def default_registry() -> BuiltinRegistry:
    registry = BuiltinRegistry()
    for cls in BUILTIN_CLASSES:
        registry.register(cls())
    return registry


__all__ = [
    "BUILTIN_CLASSES",
    "SHELL_ENVIRONMENT_BUILTINS",
    "Builtin",
    "BuiltinRegistry",
    "default_registry",
]
