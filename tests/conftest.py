"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from pathlib import Path

import pytest

type FileFactory = Callable[[Path, int], list[Path]]


def create_files_in_dir(directory: Path, number_of_files: int) -> list[Path]:
    """Create empty files with random names in a directory."""
    created: list[Path] = []
    for _ in range(number_of_files):
        path = directory / uuid.uuid4().hex[:16]
        path.touch()
        created.append(path)
    return created


@pytest.fixture
def create_files() -> FileFactory:
    """Factory creating ``n`` randomly named empty files in a directory."""
    return create_files_in_dir


@pytest.fixture
def nested_tree(tmp_path: Path) -> tuple[Path, set[Path]]:
    """Outer directory with 3 files and an inner directory with 5 files.

    Returns:
        The outer directory and the set of all files beneath it
    """
    outer = tmp_path / "outer"
    outer.mkdir()
    inner = outer / "inner"
    inner.mkdir()
    files = set(create_files_in_dir(outer, 3)) | set(create_files_in_dir(inner, 5))
    return outer, files
