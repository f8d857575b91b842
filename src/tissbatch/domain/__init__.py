"""Domain layer for tissbatch application."""

from tissbatch.domain.header_mapper import map_header
from tissbatch.domain.backlog import BacklogService
from tissbatch.domain.reconciliation import ReconciliationService

__all__ = [
    "BacklogService",
    "ReconciliationService",
    "map_header",
]
