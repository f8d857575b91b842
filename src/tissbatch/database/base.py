"""Abstract batch store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    # domain/__init__.py imports the services, which import this module
    from tissbatch.domain.entities import BacklogItem, BatchHeader, BatchRecord


class BatchStore(ABC):
    """Abstract persistence interface for batch records."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def create_batch(self, batch_number: str, xml_filename: str) -> int:
        """Create a batch record with an empty header. Returns batch ID.

        Batch creation belongs to the upload flow; the store offers it so
        records can be seeded by operators and tests.
        """
        pass

    @abstractmethod
    def get_batch(self, batch_id: int) -> Optional[BatchRecord]:
        """Get batch by ID."""
        pass

    @abstractmethod
    def list_batches(self) -> list[BatchRecord]:
        """List all batches ordered by ID."""
        pass

    @abstractmethod
    def list_incomplete_batches(self) -> list[BacklogItem]:
        """List batches whose transaction type or integrity hash is null or empty.

        Results are ordered by ID ascending.
        """
        pass

    @abstractmethod
    def update_header_fields(
        self,
        batch_id: int,
        header: BatchHeader,
        expected_version: Optional[int] = None,
    ) -> int:
        """Overwrite all header fields of a batch.

        Args:
            batch_id: Batch ID
            header: Header values to write (None clears a column)
            expected_version: If given, only update when the stored
                header_version still equals it

        Returns:
            Number of affected rows (0 or 1)
        """
        pass
