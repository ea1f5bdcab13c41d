"""Application runner for File Explorer."""

from __future__ import annotations

import asyncio
import logging

import click

from file_explorer.core.config import MainConfig
from file_explorer.core.explorer import Explorer
from file_explorer.utils.logging import (
    clear_scan_id,
    configure_logging,
    generate_scan_id,
    log_with_context,
    set_scan_id,
)

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILED_PATHS = 1


class ApplicationRunner:
    """Runs one enumeration described by a validated configuration.

    Emitted paths are written to stdout, one per line. Failed paths are
    reported on stderr after the stream is drained.
    """

    def __init__(
        self,
        config: MainConfig,
        *,
        strict: bool = False,
        configure_logs: bool = True,
    ) -> None:
        """Initialize the application runner.

        Args:
            config: Validated configuration
            strict: Exit non-zero when any path failed during traversal
            configure_logs: Install log handlers from the configuration
        """
        self.config: MainConfig = config
        self.strict: bool = strict
        self.configure_logs: bool = configure_logs

    def run(self) -> int:
        """Run the scan to completion.

        Returns:
            Process exit code
        """
        if self.configure_logs:
            configure_logging(
                log_level=self.config.application.log_level,
                log_file=self.config.application.log_file,
            )

        set_scan_id(generate_scan_id())
        try:
            explorer = asyncio.run(self.scan())
        finally:
            clear_scan_id()

        for failure in explorer.failed_paths:
            click.echo(f"failed: {failure.describe()}", err=True)

        if self.strict and explorer.failed_paths:
            return EXIT_FAILED_PATHS
        return EXIT_SUCCESS

    async def scan(self) -> Explorer:
        """Drain an explorer built from the configuration, echoing each path.

        Returns:
            The drained explorer, for inspection of its failure log and stats
        """
        explorer = Explorer(
            self.config.scan.base_paths,
            self.config.build_exclusions(),
            self.config.build_filter(),
            strategy=self.config.scan.strategy,
        )
        log_with_context(
            logger,
            logging.INFO,
            "Scan started",
            extra={"base_paths": [str(p) for p in explorer.base_paths]},
        )

        async for path in explorer:
            click.echo(str(path))

        stats = explorer.stats
        log_with_context(
            logger,
            logging.INFO,
            "Scan finished",
            extra={
                "files_emitted": stats.files_emitted,
                "files_filtered": stats.files_filtered,
                "paths_excluded": stats.paths_excluded,
                "directories_expanded": stats.directories_expanded,
                "roots_dropped": stats.roots_dropped,
                "failed_paths": len(explorer.failed_paths),
            },
        )
        return explorer
