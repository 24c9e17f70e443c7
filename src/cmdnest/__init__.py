"""
cmdnest - filesystem-backed command dispatch with nested namespaces and tab completion.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
