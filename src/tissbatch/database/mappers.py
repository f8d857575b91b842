"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the header layout of the domain
can stay stable when column names or types change.
"""

from typing import Any, Optional

from tissbatch.domain import entities as domain
from tissbatch.database.models import Batch as ORMBatch


def header_to_domain(orm_batch: ORMBatch) -> domain.BatchHeader:
    """Read the header columns of a SQLAlchemy Batch into a domain BatchHeader."""
    return domain.header_from_dict(
        {name: getattr(orm_batch, name) for name in domain.HEADER_FIELDS}
    )


def header_to_columns(header: domain.BatchHeader) -> dict[str, Optional[str]]:
    """Convert a domain BatchHeader into a column -> value mapping for updates."""
    return header.as_dict()


def batch_to_domain(orm_batch: ORMBatch) -> domain.BatchRecord:
    """Convert SQLAlchemy Batch model to domain BatchRecord entity."""
    return domain.BatchRecord(
        id=orm_batch.id,
        batch_number=orm_batch.batch_number,
        xml_filename=orm_batch.xml_filename,
        header=header_to_domain(orm_batch),
        header_version=orm_batch.header_version or 0,
        created_at=orm_batch.created_at,
        reconciled_at=orm_batch.reconciled_at,
    )


def backlog_item_to_domain(row: Any) -> domain.BacklogItem:
    """Convert a (id, batch_number, xml_filename) row to a domain BacklogItem."""
    return domain.BacklogItem(
        id=row.id,
        batch_number=row.batch_number,
        xml_filename=row.xml_filename,
    )
