"""Command-line application built on the explorer."""

from file_explorer.app.cli import cli

__all__ = ["cli"]
