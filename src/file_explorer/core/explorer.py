"""Lazy asynchronous enumeration of files beneath a set of starting paths.

The explorer keeps two pending stacks, one for directories still to be
expanded and one for files still to be emitted. Each call to ``next`` drains
a file if one is pending, otherwise it expands one directory and tries again.
I/O failures never escape ``next``; they are collected in the failure log and
reported on this module's logger, which acts as the diagnostic sink.

All blocking filesystem calls are offloaded with ``asyncio.to_thread`` so the
event loop is never blocked. Traversal itself stays on the caller's task: the
explorer does not spawn tasks and does not fan out across directories.
"""

import asyncio
import logging
import os
import stat
import threading
from collections import deque
from collections.abc import AsyncIterator, Iterable, Iterator
from contextlib import ExitStack
from enum import Enum
from pathlib import Path
from typing import Self, override

from file_explorer.core.data.filesystem.exclusions import NoExclusions
from file_explorer.core.data.filesystem.filters import AcceptAllFilter
from file_explorer.types.aliases import PathInput
from file_explorer.types.models import FailedPath, ScanStats
from file_explorer.types.protocols import Exclusions, Filter

logger = logging.getLogger(__name__)


class ScanStrategy(str, Enum):
    """Order in which pending directories are expanded."""

    DEPTH_FIRST = "depth_first"
    BREADTH_FIRST = "breadth_first"


def is_dir(path: Path) -> bool:
    """Classify a path with a metadata probe that follows symlinks.

    Args:
        path: Path to probe

    Returns:
        True for directories, False for anything else

    Raises:
        OSError: If the metadata call fails (missing path, broken link, ...)
    """
    return stat.S_ISDIR(os.stat(path).st_mode)


async def async_is_dir(path: Path) -> bool:
    """Async variant of ``is_dir`` running the probe in a worker thread."""
    return await asyncio.to_thread(is_dir, path)


class _DirectoryReader:
    """Directory iterator whose open, read and close serialize on a lock.

    Reads run in worker threads. If the awaiting task is cancelled while a
    read is in flight, the worker still holds the lock; ``try_close`` then
    reports failure instead of blocking the event loop, and the caller hands
    ``close`` to a worker thread that runs once the read returns.
    """

    def __init__(self, path: Path) -> None:
        self.path: Path = path
        self._entries: Iterator[os.DirEntry[str]] | None = None
        self._closed: bool = False
        self._stack: ExitStack = ExitStack()
        self._lock: threading.Lock = threading.Lock()

    def open(self) -> None:
        with self._lock:
            if not self._closed:
                self._entries = self._stack.enter_context(os.scandir(self.path))

    def read(self) -> os.DirEntry[str] | None:
        with self._lock:
            if self._entries is None:
                return None
            return next(self._entries, None)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        with self._lock:
            self._release()

    def try_close(self) -> bool:
        """Close without waiting; False if another thread holds the iterator."""
        if not self._lock.acquire(blocking=False):
            return False
        try:
            self._release()
        finally:
            self._lock.release()
        return True

    def _release(self) -> None:
        self._closed = True
        self._entries = None
        self._stack.close()


class Explorer:
    """Stateful, single-task enumerator of the files beneath some base paths.

    Base paths may be files or directories. Directories are expanded, never
    emitted. The explorer is neither thread-safe nor meant to be shared
    between tasks; run one explorer per enumeration.

    Example:
        >>> explorer = Explorer([Path("/srv/data")])
        >>> async for path in explorer:
        ...     await queue.put(path)
        >>> for failure in explorer.failed_paths:
        ...     print(failure.describe())
    """

    def __init__(
        self,
        base_paths: Iterable[PathInput],
        exclusions: Exclusions | None = None,
        file_filter: Filter | None = None,
        *,
        strategy: ScanStrategy = ScanStrategy.DEPTH_FIRST,
    ) -> None:
        """Seed the pending stacks from the base paths.

        Each base path is probed synchronously. Roots that cannot be probed
        are reported on the logger and dropped; they do not enter the failure
        log, which is reserved for paths discovered during traversal.

        Base paths are pushed to the front of their stack and popped from the
        back, so the first base path given is the first one processed.

        Args:
            base_paths: Files and/or directories to enumerate
            exclusions: Policy consulted before any path is enqueued
                (defaults to excluding nothing)
            file_filter: Policy consulted before a file is emitted
                (defaults to accepting everything)
            strategy: Expansion order for pending directories
        """
        self.base_paths: tuple[Path, ...] = tuple(Path(p) for p in base_paths)
        self.exclusions: Exclusions = exclusions if exclusions is not None else NoExclusions()
        self.file_filter: Filter = file_filter if file_filter is not None else AcceptAllFilter()
        self.strategy: ScanStrategy = ScanStrategy(strategy)

        self.walk_dirs: deque[Path] = deque()
        self.walk_files: deque[Path] = deque()
        self.stats: ScanStats = ScanStats()
        self._failed_paths: list[FailedPath] = []

        for base_path in self.base_paths:
            if self.exclusions.is_excluded(base_path):
                self.stats.paths_excluded += 1
                logger.debug("Base path excluded, skipping: %s", base_path)
                continue

            try:
                base_is_dir = is_dir(base_path)
            except (OSError, ValueError) as exc:
                # ValueError: embedded NUL or unencodable characters
                self.stats.roots_dropped += 1
                logger.warning(
                    "Failed adding path to scan. Path: %s. Error: %s",
                    base_path,
                    exc,
                    extra={"path": str(base_path)},
                )
                continue

            if base_is_dir:
                self.walk_dirs.appendleft(base_path)
            else:
                self.walk_files.appendleft(base_path)

        logger.debug(
            "Explorer ready",
            extra={
                "base_paths": [str(p) for p in self.base_paths],
                "pending_dirs": len(self.walk_dirs),
                "pending_files": len(self.walk_files),
                "strategy": self.strategy.value,
            },
        )

    @property
    def failed_paths(self) -> tuple[FailedPath, ...]:
        """Paths that could not be processed, in the order they failed."""
        return tuple(self._failed_paths)

    @property
    def exhausted(self) -> bool:
        """True once nothing is left to emit or expand."""
        return not self.walk_files and not self.walk_dirs

    async def next(self) -> Path | None:
        """Produce the next file path, or None when enumeration is complete.

        Never raises for filesystem errors. Once it has returned None it keeps
        returning None.

        Returns:
            The next accepted file path, or None
        """
        while True:
            if self.walk_files:
                path = self.walk_files.pop()
                if self.file_filter.accepts(path):
                    self.stats.files_emitted += 1
                    return path
                self.stats.files_filtered += 1
                logger.debug("File rejected by filter: %s", path)
                continue

            if not self.walk_dirs:
                return None

            if self.strategy is ScanStrategy.BREADTH_FIRST:
                directory = self.walk_dirs.popleft()
            else:
                directory = self.walk_dirs.pop()
            await self._expand(directory)

    async def collect(self) -> list[Path]:
        """Drain the remaining stream into a list."""
        return [path async for path in self]

    def __aiter__(self) -> Self:
        return self

    async def __anext__(self) -> Path:
        path = await self.next()
        if path is None:
            raise StopAsyncIteration
        return path

    async def _expand(self, directory: Path) -> None:
        """List one directory and classify every entry into the stacks."""
        reader = _DirectoryReader(directory)
        try:
            try:
                await asyncio.to_thread(reader.open)
            except OSError as exc:
                self._record_failure(directory, exc, "Failed reading dir")
                return

            self.stats.directories_expanded += 1
            while True:
                try:
                    entry = await asyncio.to_thread(reader.read)
                except OSError as exc:
                    # Entries classified so far stay queued
                    self._record_failure(directory, exc, "Failed iterating dir")
                    return
                if entry is None:
                    return
                await self._classify(Path(entry.path))
        finally:
            if not reader.try_close():
                # Cancelled mid-read; close once the worker thread returns
                _ = asyncio.get_running_loop().run_in_executor(None, reader.close)

    async def _classify(self, path: Path) -> None:
        if self.exclusions.is_excluded(path):
            self.stats.paths_excluded += 1
            logger.debug("Path excluded, skipping: %s", path)
            return

        try:
            entry_is_dir = await async_is_dir(path)
        except OSError as exc:
            self._record_failure(path, exc, "Failed reading entry")
            return

        if entry_is_dir:
            self.walk_dirs.append(path)
        else:
            self.walk_files.append(path)

    def _record_failure(self, path: Path, error: OSError, message: str) -> None:
        self._failed_paths.append(FailedPath(path, error))
        logger.warning("%s. Path: %s. Error: %s", message, path, error, extra={"path": str(path)})

    @override
    def __repr__(self) -> str:
        return (
            f"Explorer(base_paths={len(self.base_paths)}, pending_dirs={len(self.walk_dirs)}, "
            f"pending_files={len(self.walk_files)}, failed={len(self._failed_paths)})"
        )


async def explore(
    base_paths: Iterable[PathInput],
    exclusions: Exclusions | None = None,
    file_filter: Filter | None = None,
    *,
    strategy: ScanStrategy = ScanStrategy.DEPTH_FIRST,
) -> AsyncIterator[Path]:
    """Yield every accepted file beneath the base paths.

    Convenience wrapper for callers that do not need the failure log.
    """
    explorer = Explorer(base_paths, exclusions, file_filter, strategy=strategy)
    async for path in explorer:
        yield path
