"""Exclusion policies for filesystem traversal.

Every policy here satisfies the ``Exclusions`` protocol: ``is_excluded`` is a
pure predicate over the path value. Patterns match against the final path
component; subtree exclusions compare whole paths. No policy touches the
filesystem.
"""

from __future__ import annotations

import fnmatch
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable
from enum import Enum
from os import PathLike
from pathlib import Path, PurePath
from typing import override


class PatternType(str, Enum):
    """Enumeration for different pattern types."""

    GLOB = "glob"
    REGEX = "regex"
    EXTENSION = "extension"
    EXACT = "exact"
    GITIGNORE = "gitignore"


class ExclusionPattern(ABC):
    """Base class for name-based exclusion patterns."""

    def __init__(self, pattern: str, case_sensitive: bool = True) -> None:
        """Initialize the exclusion pattern.

        Args:
            pattern: The pattern string
            case_sensitive: Whether pattern matching is case-sensitive
        """
        self.pattern: str = pattern
        self.case_sensitive: bool = case_sensitive

    @abstractmethod
    def matches(self, path: PurePath) -> bool:
        """Check if the pattern matches the given path.

        Args:
            path: Path to check

        Returns:
            True if the pattern matches, False otherwise
        """

    @abstractmethod
    def compile(self) -> None:
        """Precompute whatever ``matches`` needs."""

    def _fold(self, value: str) -> str:
        return value if self.case_sensitive else value.lower()

    @override
    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.pattern!r}, case_sensitive={self.case_sensitive})"


class GlobPattern(ExclusionPattern):
    """Glob-style pattern matched against the entry name with fnmatch."""

    def __init__(self, pattern: str, case_sensitive: bool = True) -> None:
        super().__init__(pattern, case_sensitive)
        self._compiled: str | None = None

    @override
    def compile(self) -> None:
        self._compiled = self._fold(self.pattern)

    @override
    def matches(self, path: PurePath) -> bool:
        if self._compiled is None:
            self.compile()
        assert self._compiled is not None
        # fnmatchcase so that case folding is ours, not the platform's
        return fnmatch.fnmatchcase(self._fold(path.name), self._compiled)


class RegexPattern(ExclusionPattern):
    """Regular expression searched within the entry name."""

    def __init__(self, pattern: str, case_sensitive: bool = True) -> None:
        super().__init__(pattern, case_sensitive)
        self._compiled: re.Pattern[str] | None = None

    @override
    def compile(self) -> None:
        flags = 0 if self.case_sensitive else re.IGNORECASE
        self._compiled = re.compile(self.pattern, flags)

    @override
    def matches(self, path: PurePath) -> bool:
        if self._compiled is None:
            self.compile()
        assert self._compiled is not None
        return bool(self._compiled.search(path.name))


class ExtensionPattern(ExclusionPattern):
    """File extension matcher; the leading dot is optional in the pattern."""

    def __init__(self, pattern: str, case_sensitive: bool = True) -> None:
        super().__init__(pattern, case_sensitive)
        self._compiled: str | None = None

    @override
    def compile(self) -> None:
        ext = self.pattern if self.pattern.startswith(".") else f".{self.pattern}"
        self._compiled = self._fold(ext)

    @override
    def matches(self, path: PurePath) -> bool:
        if self._compiled is None:
            self.compile()
        assert self._compiled is not None
        return self._fold(path.suffix) == self._compiled


class ExactPattern(ExclusionPattern):
    """Exact entry name matcher."""

    def __init__(self, pattern: str, case_sensitive: bool = True) -> None:
        super().__init__(pattern, case_sensitive)
        self._compiled: str | None = None

    @override
    def compile(self) -> None:
        self._compiled = self._fold(self.pattern)

    @override
    def matches(self, path: PurePath) -> bool:
        if self._compiled is None:
            self.compile()
        return self._fold(path.name) == self._compiled


class GitignorePattern(ExclusionPattern):
    """Git-style ignore pattern.

    Patterns without a slash match the entry name. Patterns containing a
    slash match a trailing run of whole path components, so ``build/*.o``
    excludes ``/src/build/main.o``. ``**/`` spans zero or more whole components.

    Negation (a leading ``!``) cannot be expressed as an exclusion and is
    rejected; write ``\\!`` for a name that starts with ``!``.
    """

    def __init__(self, pattern: str, case_sensitive: bool = True) -> None:
        if pattern.startswith("!"):
            msg = f"Negated gitignore patterns are not supported: {pattern!r}"
            raise ValueError(msg)
        super().__init__(pattern, case_sensitive)
        self._compiled: re.Pattern[str] | None = None
        self._anchored: bool = False

    @override
    def compile(self) -> None:
        pattern = self.pattern.rstrip("/")
        if pattern.startswith("\\!"):
            pattern = pattern[1:]
        self._anchored = "/" in pattern
        pattern = pattern.lstrip("/")

        parts: list[str] = []
        i = 0
        while i < len(pattern):
            segment_start = i == 0 or pattern[i - 1] == "/"
            if segment_start and pattern.startswith("**/", i):
                parts.append("(?:.*/)?")
                i += 3
            elif segment_start and pattern.startswith("**", i) and i + 2 == len(pattern):
                parts.append(".*")
                i += 2
            elif pattern[i] == "*":
                parts.append("[^/]*")
                i += 1
            elif pattern[i] == "?":
                parts.append("[^/]")
                i += 1
            else:
                parts.append(re.escape(pattern[i]))
                i += 1

        flags = 0 if self.case_sensitive else re.IGNORECASE
        prefix = "(?:^|/)" if self._anchored else "^"
        self._compiled = re.compile(f"{prefix}{''.join(parts)}$", flags)

    @override
    def matches(self, path: PurePath) -> bool:
        if self._compiled is None:
            self.compile()
        assert self._compiled is not None
        target = path.as_posix() if self._anchored else path.name
        return bool(self._compiled.search(target))


class NoExclusions:
    """Exclusion policy that never excludes anything."""

    def is_excluded(self, path: Path) -> bool:  # noqa: ARG002
        return False

    @override
    def __repr__(self) -> str:
        return "NoExclusions()"


class ExclusionFilter:
    """Exclusion policy combining name patterns and excluded subtrees.

    A path is excluded when any pattern matches its name, or when it equals
    or lies beneath one of the excluded paths. Path comparison is purely
    lexical; callers should pass excluded paths spelled the same way as the
    base paths handed to the explorer.
    """

    def __init__(self, case_sensitive: bool = True) -> None:
        """Initialize the exclusion filter.

        Args:
            case_sensitive: Whether pattern matching is case-sensitive
        """
        self.case_sensitive: bool = case_sensitive
        self._patterns: list[ExclusionPattern] = []
        self._paths: set[Path] = set()
        self._compiled: bool = False

    def add_pattern(self, pattern: str, pattern_type: PatternType = PatternType.GLOB) -> None:
        """Add an exclusion pattern.

        Args:
            pattern: Pattern string
            pattern_type: Type of pattern to add

        Raises:
            ValueError: If the type is unknown or the pattern is a negated
                gitignore pattern
        """
        pattern_class = _PATTERN_CLASSES[PatternType(pattern_type)]
        self._patterns.append(pattern_class(pattern, self.case_sensitive))
        self._compiled = False

    def add_patterns(self, patterns: Iterable[str], pattern_type: PatternType = PatternType.GLOB) -> None:
        """Add multiple exclusion patterns of the same type."""
        for pattern in patterns:
            self.add_pattern(pattern, pattern_type)

    def add_glob_patterns(self, patterns: Iterable[str]) -> None:
        self.add_patterns(patterns, PatternType.GLOB)

    def add_extensions(self, extensions: Iterable[str]) -> None:
        """Add file extension patterns (with or without leading dot)."""
        self.add_patterns(extensions, PatternType.EXTENSION)

    def add_exact_names(self, names: Iterable[str]) -> None:
        self.add_patterns(names, PatternType.EXACT)

    def add_regex_patterns(self, patterns: Iterable[str]) -> None:
        self.add_patterns(patterns, PatternType.REGEX)

    def add_gitignore_patterns(self, patterns: Iterable[str]) -> None:
        self.add_patterns(patterns, PatternType.GITIGNORE)

    def add_paths(self, paths: Iterable[str | PathLike[str]]) -> None:
        """Exclude whole subtrees.

        Args:
            paths: Paths whose descendants (and themselves) are excluded
        """
        self._paths.update(Path(p) for p in paths)

    def compile(self) -> None:
        """Compile all patterns up front."""
        for pattern in self._patterns:
            pattern.compile()
        self._compiled = True

    def is_excluded(self, path: Path) -> bool:
        """Check if a path should be excluded.

        Args:
            path: Path to check

        Returns:
            True if the path should be excluded, False otherwise
        """
        if not self._compiled:
            self.compile()

        if self._paths and (path in self._paths or not self._paths.isdisjoint(path.parents)):
            return True

        return any(pattern.matches(path) for pattern in self._patterns)

    def clear(self) -> None:
        """Remove every pattern and excluded path."""
        self._patterns.clear()
        self._paths.clear()
        self._compiled = False

    @property
    def pattern_count(self) -> int:
        """Number of name patterns configured."""
        return len(self._patterns)

    @property
    def excluded_paths(self) -> frozenset[Path]:
        return frozenset(self._paths)

    @override
    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(patterns={self.pattern_count}, "
            f"paths={len(self._paths)}, case_sensitive={self.case_sensitive})"
        )


_PATTERN_CLASSES: dict[PatternType, type[ExclusionPattern]] = {
    PatternType.GLOB: GlobPattern,
    PatternType.REGEX: RegexPattern,
    PatternType.EXTENSION: ExtensionPattern,
    PatternType.EXACT: ExactPattern,
    PatternType.GITIGNORE: GitignorePattern,
}


class DefaultExclusionFilter(ExclusionFilter):
    """Exclusion filter preloaded with common noise directories and files."""

    def __init__(self, case_sensitive: bool = True) -> None:
        super().__init__(case_sensitive)
        self._add_default_patterns()

    def _add_default_patterns(self) -> None:
        # Version control and tooling caches
        self.add_exact_names([
            ".git",
            ".svn",
            ".hg",
            "node_modules",
            "__pycache__",
            ".pytest_cache",
            ".mypy_cache",
            ".ruff_cache",
            ".tox",
            ".nox",
            ".venv",
        ])

        # OS metadata
        self.add_exact_names([
            ".DS_Store",
            "Thumbs.db",
            "desktop.ini",
            "$RECYCLE.BIN",
            "System Volume Information",
            "lost+found",
            ".Trash",
        ])

        self.add_glob_patterns([
            "*.tmp",
            "*.swp",
            "~$*",
        ])
