"""Mapping of a parsed TISS document onto the stored batch header."""

from typing import Optional

from tissbatch.domain.entities import HEADER_FIELDS, BatchHeader, ParsedBatchDocument


def _coalesce(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def map_header(document: ParsedBatchDocument) -> BatchHeader:
    """Produce the ten header values to write for a parsed document.

    Every absent or empty field becomes None. Values are only taken from the
    document's header section; nothing is derived from the batch or payer
    sections. A document without a header section maps to an all-None header.

    Args:
        document: Parsed TISS document

    Returns:
        BatchHeader ready to be written to the store
    """
    if document.header is None:
        return BatchHeader()
    return BatchHeader(
        **{name: _coalesce(getattr(document.header, name)) for name in HEADER_FIELDS}
    )
