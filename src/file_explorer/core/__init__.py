"""Traversal engine and its configuration."""

from file_explorer.core.explorer import Explorer, ScanStrategy, explore

__all__ = [
    "Explorer",
    "ScanStrategy",
    "explore",
]
