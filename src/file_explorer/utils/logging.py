"""Logging infrastructure with per-scan identifiers.

The explorer reports root-probe failures and traversal failures through the
standard ``logging`` module; this module decides where those records go.
Every record is stamped with the identifier of the enumeration run that
produced it, tracked in a ContextVar so concurrent scans on separate tasks
keep their own identifiers.

Console output goes to stderr: stdout is reserved for emitted paths.
"""

import contextvars
import logging
import sys
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import Final, override

# Scan ID context variable; inherited by asyncio tasks and worker threads
# started through asyncio.to_thread
scan_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "scan_id",
    default=None,
)

DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - [%(scan_id)s] - %(message)s"


class ScanIDFilter(logging.Filter):
    """Logging filter that adds the current scan ID to log records.

    Records logged outside of any scan get ``"N/A"``.
    """

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        scan_id = scan_id_var.get()
        record.scan_id = scan_id if scan_id is not None else "N/A"
        return True


def configure_logging(
    *,
    log_level: str = "WARNING",
    log_file: Path | None = None,
    enable_console: bool = True,
) -> None:
    """Configure application logging.

    Replaces any handlers already installed on the root logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file that receives a copy of every record
        enable_console: Enable the stderr console handler

    Example:
        >>> configure_logging(log_level="INFO")
        >>> set_scan_id(generate_scan_id())
        >>> logging.getLogger(__name__).info("Scan started")
    """
    root_logger = logging.getLogger()

    level = getattr(logging, log_level.upper(), logging.WARNING)
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    scan_filter = ScanIDFilter()
    formatter = logging.Formatter(DEFAULT_LOG_FORMAT)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(scan_filter)
        root_logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.addFilter(scan_filter)
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the specified module.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def generate_scan_id() -> str:
    """Create a short random identifier for one enumeration run."""
    return uuid.uuid4().hex[:12]


def set_scan_id(scan_id: str) -> None:
    """Set the scan ID for the current context."""
    _ = scan_id_var.set(scan_id)


def get_scan_id() -> str | None:
    """Get the current scan ID, or None if not set."""
    return scan_id_var.get()


def clear_scan_id() -> None:
    _ = scan_id_var.set(None)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    *,
    extra: Mapping[str, object] | None = None,
) -> None:
    """Log a message with additional context fields.

    The current scan ID, when set, is added to the extra fields.

    Args:
        logger: Logger instance to use
        level: Logging level (e.g., logging.INFO)
        message: Log message
        extra: Additional context fields to include in log

    Example:
        >>> log_with_context(
        ...     get_logger(__name__),
        ...     logging.INFO,
        ...     "Scan finished",
        ...     extra={"files_emitted": 120, "failed_paths": 2},
        ... )
    """
    context = dict(extra) if extra else {}

    scan_id = get_scan_id()
    if scan_id:
        context["scan_id"] = scan_id

    logger.log(level, message, extra=context)
