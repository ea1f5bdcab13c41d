"""File Explorer - lazy asynchronous enumeration of files for scanning pipelines.

Given a set of starting paths, the explorer yields the individual files found
beneath them while tolerating per-path I/O failures and honouring pluggable
exclusion and filter policies.
"""

from file_explorer.core.data.filesystem import (
    AcceptAllFilter,
    CompositeFilter,
    DefaultExclusionFilter,
    ExclusionFilter,
    ExtensionFilter,
    GlobFilter,
    NoExclusions,
    PatternType,
)
from file_explorer.core.explorer import Explorer, ScanStrategy, explore
from file_explorer.types import Exclusions, FailedPath, Filter, ScanStats

__all__ = [
    "AcceptAllFilter",
    "CompositeFilter",
    "DefaultExclusionFilter",
    "Exclusions",
    "ExclusionFilter",
    "Explorer",
    "ExtensionFilter",
    "FailedPath",
    "Filter",
    "GlobFilter",
    "NoExclusions",
    "PatternType",
    "ScanStats",
    "ScanStrategy",
    "explore",
]
