"""
Custom exceptions for the Facebook export importer.
"""


class FbImportError(Exception):
    """Base exception for import errors."""
    pass


class ArchiveError(FbImportError):
    """The export archive is unreadable or holds no usable media."""

    def __init__(self, message: str, archive_path: str = None):
        super().__init__(message)
        self.archive_path = archive_path


class InvalidEnrichmentFile(FbImportError):
    """The Graph API comments file has an unrecognised schema."""
    pass


class PairingError(FbImportError):
    """A front/back pairing selection was rejected."""
    pass


class ImportApiError(FbImportError):
    """A request to the import job API failed."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class ImportJobError(ImportApiError):
    """Creating or finalising the import job failed."""
    pass
