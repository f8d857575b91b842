"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class NotFoundError(DomainError):
    """Requested batch record does not exist."""


class FileMissingError(DomainError):
    """A batch record references an XML file that is not in the upload root."""


class MalformedDocumentError(DomainError):
    """Bytes could not be read as a TISS batch document."""


class NoRowsUpdatedError(DomainError):
    """A header write matched no row (deleted or concurrently modified)."""


def batch_not_found(batch_id: int) -> str:
    """Return message for missing batch record."""
    return f"Batch {batch_id} not found"


def batch_file_missing(batch_id: int, path: str) -> str:
    """Return message for a batch whose XML file is absent."""
    return f"XML file for batch {batch_id} not found: {path}"


def batch_file_outside_root(batch_id: int, filename: str) -> str:
    """Return message for a stored filename escaping the upload root."""
    return f"XML filename for batch {batch_id} points outside the upload directory: '{filename}'"


def batch_without_file(batch_id: int) -> str:
    """Return message for a batch with no stored filename."""
    return f"Batch {batch_id} has no XML file reference"


def no_rows_updated(batch_id: int) -> str:
    """Return message when the header write affected no row."""
    return (
        f"No rows updated for batch {batch_id}: "
        "the record was deleted or modified since it was loaded"
    )
