"""Filesystem policies consulted by the explorer during traversal."""

from __future__ import annotations

from .exclusions import (
    DefaultExclusionFilter,
    ExactPattern,
    ExclusionFilter,
    ExclusionPattern,
    ExtensionPattern,
    GitignorePattern,
    GlobPattern,
    NoExclusions,
    PatternType,
    RegexPattern,
)
from .filters import AcceptAllFilter, CompositeFilter, ExtensionFilter, GlobFilter

__all__ = [
    "AcceptAllFilter",
    "CompositeFilter",
    "DefaultExclusionFilter",
    "ExactPattern",
    "ExclusionFilter",
    "ExclusionPattern",
    "ExtensionFilter",
    "ExtensionPattern",
    "GitignorePattern",
    "GlobFilter",
    "GlobPattern",
    "NoExclusions",
    "PatternType",
    "RegexPattern",
]
