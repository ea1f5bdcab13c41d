"""Protocol definitions for the explorer's policy collaborators.

The explorer never owns its policies; it only calls these predicates at
well-defined points. Implementations must be pure: they may inspect the path
value but must not touch the filesystem or mutate explorer state.
"""

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class Exclusions(Protocol):
    """Policy deciding whether a path is skipped before it is enqueued.

    Consulted for both files and directories. An excluded directory is never
    expanded, so everything beneath it is skipped as well.
    """

    def is_excluded(self, path: Path) -> bool:
        """Check whether a path should be skipped.

        Args:
            path: Candidate path discovered during traversal

        Returns:
            True if the path must be neither enqueued nor logged
        """
        ...


@runtime_checkable
class Filter(Protocol):
    """Policy deciding whether a file path is emitted."""

    def accepts(self, path: Path) -> bool:
        """Check whether a file path should be emitted.

        Args:
            path: File path about to be returned by the explorer

        Returns:
            True if the path should be emitted, False to discard it
        """
        ...
