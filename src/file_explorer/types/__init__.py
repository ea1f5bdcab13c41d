"""Type definitions and protocols for file-explorer.

This package provides:
- Data models (immutable dataclasses)
- Protocol definitions for the policy collaborators
- Type aliases (PEP 695 syntax)
"""

from file_explorer.types.aliases import PathInput
from file_explorer.types.models import FailedPath, ScanStats
from file_explorer.types.protocols import Exclusions, Filter

__all__ = [
    # Type aliases
    "PathInput",
    # Data models
    "FailedPath",
    "ScanStats",
    # Protocols
    "Exclusions",
    "Filter",
]
