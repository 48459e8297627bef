"""
Common modules shared across the importer.

This package contains configuration, logging, error types, the job API
client and other utilities used by the processors.
"""

from .filter_banned_files import BannedFilesFilter
from .exceptions import (
    ArchiveError,
    FbImportError,
    ImportApiError,
    ImportJobError,
    InvalidEnrichmentFile,
    PairingError,
)
from .logging_config import setup_logging

__version__ = "1.0.0"
__all__ = [
    "BannedFilesFilter",
    "ArchiveError",
    "FbImportError",
    "ImportApiError",
    "ImportJobError",
    "InvalidEnrichmentFile",
    "PairingError",
    "setup_logging",
]
