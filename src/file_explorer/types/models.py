"""Data models for file-explorer.

This module defines immutable dataclasses used to report traversal results
between the explorer and its callers.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class FailedPath:
    """A path the explorer could not process, paired with the cause.

    Entries are appended to the explorer's failure log in the order the
    failures happened. Unpacks as a ``(path, error)`` pair.
    """

    path: Path
    error: OSError

    def __iter__(self) -> Iterator[Path | OSError]:
        yield self.path
        yield self.error

    def describe(self) -> str:
        """Human-readable one-line description of the failure."""
        reason = self.error.strerror or str(self.error)
        return f"{self.path}: {reason}"


@dataclass(slots=True)
class ScanStats:
    """Running counters for one enumeration.

    Updated by the explorer as it works; read by callers for summaries.
    """

    files_emitted: int = 0
    files_filtered: int = 0
    paths_excluded: int = 0
    directories_expanded: int = 0
    roots_dropped: int = 0
