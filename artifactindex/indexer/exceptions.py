"""Custom exceptions for the indexer module.

Contains exception classes for specific failure modes that require
explicit handling rather than generic error propagation.
"""

from pathlib import Path


class ArchiveFormatError(Exception):
    """Raised when an artifact file cannot be opened as an archive.

    Extractors treat this as a per-artifact soft failure: the error is
    logged and the affected fields stay unset.

    Attributes:
        path: The artifact file that failed to open
    """

    def __init__(self, message: str, path: Path | str | None = None):
        super().__init__(message)
        self.path = path


class DescriptorParseError(Exception):
    """Raised when a project or plugin descriptor is not well-formed XML.

    Attributes:
        source: Where the descriptor came from (file path or archive entry)
        details: Parser position information when available
    """

    def __init__(self, message: str, source: str | None = None, details: dict | None = None):
        super().__init__(message)
        self.source = source
        self.details = details or {}


class CatalogError(Exception):
    """Raised when a catalog query is invalid.

    Unlike archive and descriptor failures this is never contained by the
    extraction pipeline: it aborts the export of the affected repository.
    """
