"""Emission filters for discovered files.

Each filter satisfies the ``Filter`` protocol and is consulted when a file
path is about to be returned from the explorer. Filters look at the path value
only.
"""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable
from pathlib import Path
from typing import override

from file_explorer.types.protocols import Filter


class AcceptAllFilter:
    """Filter that emits every file."""

    def accepts(self, path: Path) -> bool:  # noqa: ARG002
        return True

    @override
    def __repr__(self) -> str:
        return "AcceptAllFilter()"


class ExtensionFilter:
    """Accept only files whose suffix is in an allow-list.

    Extensions may be given with or without the leading dot. Matching is
    case-insensitive by default since extensions are routinely upper-cased
    on some platforms.
    """

    def __init__(self, extensions: Iterable[str], case_sensitive: bool = False) -> None:
        """Initialize the extension filter.

        Args:
            extensions: Allowed extensions, e.g. ``["py", ".md"]``
            case_sensitive: Whether suffix comparison is case-sensitive
        """
        self.case_sensitive: bool = case_sensitive
        self.extensions: frozenset[str] = frozenset(
            self._fold(ext if ext.startswith(".") else f".{ext}") for ext in extensions
        )

    def _fold(self, value: str) -> str:
        return value if self.case_sensitive else value.lower()

    def accepts(self, path: Path) -> bool:
        return self._fold(path.suffix) in self.extensions

    @override
    def __repr__(self) -> str:
        return f"ExtensionFilter({sorted(self.extensions)!r})"


class GlobFilter:
    """Accept only files whose name matches at least one glob."""

    def __init__(self, patterns: Iterable[str], case_sensitive: bool = True) -> None:
        self.case_sensitive: bool = case_sensitive
        self.patterns: tuple[str, ...] = tuple(
            p if case_sensitive else p.lower() for p in patterns
        )

    def accepts(self, path: Path) -> bool:
        name = path.name if self.case_sensitive else path.name.lower()
        return any(fnmatch.fnmatchcase(name, pattern) for pattern in self.patterns)

    @override
    def __repr__(self) -> str:
        return f"GlobFilter({list(self.patterns)!r})"


class CompositeFilter:
    """Accept a file only when every member filter accepts it.

    An empty composite accepts everything.
    """

    def __init__(self, *filters: Filter) -> None:
        self.filters: tuple[Filter, ...] = filters

    def accepts(self, path: Path) -> bool:
        return all(f.accepts(path) for f in self.filters)

    @override
    def __repr__(self) -> str:
        inner = ", ".join(repr(f) for f in self.filters)
        return f"CompositeFilter({inner})"
