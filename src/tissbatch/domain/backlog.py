"""Backlog selection domain service."""

import logging

from tissbatch.database.base import BatchStore
from tissbatch.domain.entities import (
    REQUIRED_HEADER_FIELDS,
    BacklogItem,
    BatchInspection,
)

logger = logging.getLogger(__name__)


class BacklogService:
    """Service for finding batches whose header has not been reconciled."""

    def __init__(self, db: BatchStore):
        """Initialize backlog service.

        Args:
            db: Batch store instance
        """
        self.db = db

    def select_backlog(self) -> list[BacklogItem]:
        """Select batches with a null or empty transaction type or integrity hash.

        Returns:
            Backlog items ordered by ID ascending (oldest first). An empty list
            means there is nothing to reconcile.

        Raises:
            SQLAlchemyError: If the store cannot be queried
        """
        items = sorted(self.db.list_incomplete_batches(), key=lambda item: item.id)
        logger.info("Selected %d batch(es) with incomplete header", len(items))
        return items

    def inspect_batches(self, incomplete_only: bool = False) -> list[BatchInspection]:
        """Describe the header completeness of every batch.

        A header is complete when transaction type, transaction sequence,
        provider tax id and integrity hash are all filled.

        Args:
            incomplete_only: If True, only return batches with an incomplete header

        Returns:
            List of inspections ordered by batch ID
        """
        inspections = []
        for record in self.db.list_batches():
            missing = record.header.missing_fields()
            is_complete = not any(name in missing for name in REQUIRED_HEADER_FIELDS)
            if incomplete_only and is_complete:
                continue
            inspections.append(
                BatchInspection(record=record, is_complete=is_complete, missing_fields=missing)
            )
        return sorted(inspections, key=lambda inspection: inspection.record.id)
