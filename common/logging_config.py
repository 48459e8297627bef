"""
Centralized Logging Configuration

This module provides unified logging configuration for the importer.
It ensures consistent log formats, levels, and behavior across extraction,
matching and upload.

Log Level Conventions:
    DEBUG   - Entry-by-entry operations, resolution attempts, matching details
    INFO    - Phase transitions, counts, high-level progress
    WARNING - Recoverable issues, skipped documents, failed uploads
    ERROR   - Failures that stop the import or require user attention

Example:
    >>> import logging
    >>> from common.logging_config import setup_logging
    >>> setup_logging(verbose=True, log_file="import.log")
    >>> logger = logging.getLogger(__name__)
    >>> logger.info("Import started")
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

# =============================================================================
# Format Constants - Single source of truth for log formats
# =============================================================================

LOG_FORMAT_DETAILED = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
"""Detailed format including timestamp and module name, used for verbose/file logging."""

LOG_FORMAT_SIMPLE = "%(levelname)s: %(message)s"
"""Simple format for non-verbose console output."""

LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
"""Standard date format for all log timestamps."""

# =============================================================================
# Suppressed Loggers - Third-party libraries that are too noisy
# =============================================================================

SUPPRESSED_LOGGERS: List[str] = [
    "urllib3",
    "urllib3.connectionpool",
    "requests",
    "bs4",
]
"""List of third-party logger names to suppress to WARNING level."""


# =============================================================================
# Main Logging Setup Functions
# =============================================================================


def setup_logging(
    verbose: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """Configure logging for an import run.

    In info mode (verbose=False):
    - Console shows only ERROR messages (clean output with progress bars)

    In verbose mode (verbose=True):
    - Console shows INFO level messages

    A log file, when given, always captures DEBUG. Third-party libraries are
    suppressed to WARNING in both modes.

    Args:
        verbose: If True, enable verbose console output
        log_file: Optional path to log file for persistent logging

    Returns:
        Configured root logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO if verbose else logging.ERROR)

    if verbose:
        formatter = logging.Formatter(LOG_FORMAT_DETAILED, datefmt=LOG_DATE_FORMAT)
    else:
        formatter = logging.Formatter(LOG_FORMAT_SIMPLE)

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(LOG_FORMAT_DETAILED, datefmt=LOG_DATE_FORMAT)
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    for library in SUPPRESSED_LOGGERS:
        logging.getLogger(library).setLevel(logging.WARNING)

    return root_logger


def add_archive_log_handler(
    archive_name: str, verbose: bool = False, logs_dir: str = "logs"
) -> Optional[logging.FileHandler]:
    """Add a per-archive log file handler to the root logger.

    Each imported archive gets its own log file while still logging to the
    main handlers.

    Args:
        archive_name: Name of the archive (used in log filename)
        verbose: If True, create the log file. If False, skip per-archive logging.
        logs_dir: Directory that receives the log files

    Returns:
        The created FileHandler, or None if verbose is False

    Example:
        >>> handler = add_archive_log_handler("facebook-jane-2024", verbose=True)
        >>> # Import the archive...
        >>> if handler:
        ...     remove_archive_log_handler(handler)
    """
    if not verbose:
        return None

    logs_path = Path(logs_dir)
    logs_path.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_path / f"log-{archive_name}-{timestamp}.log"

    file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(LOG_FORMAT_DETAILED, datefmt=LOG_DATE_FORMAT)
    )

    logging.getLogger().addHandler(file_handler)
    return file_handler


def remove_archive_log_handler(handler: Optional[logging.FileHandler]) -> None:
    """Remove a per-archive log file handler from the root logger and close it."""
    if handler is None:
        return

    root_logger = logging.getLogger()
    root_logger.removeHandler(handler)
    handler.close()

