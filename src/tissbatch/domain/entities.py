"""Domain model entities for tissbatch.

These are pure data classes representing reconciliation concepts, independent
of the database schema and of the XML layout of the TISS standard.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


# Header fields in their canonical order. The order is shared by the store
# columns, the report rendering and the inspection listing.
HEADER_FIELDS = (
    "transaction_type",
    "transaction_sequence",
    "registration_date",
    "registration_time",
    "provider_tax_id",
    "provider_name",
    "payer_registry",
    "tiss_standard",
    "integrity_hash",
    "facility_cnes",
)

# Fields a header must carry to be considered complete by `inspect`.
REQUIRED_HEADER_FIELDS = (
    "transaction_type",
    "transaction_sequence",
    "provider_tax_id",
    "integrity_hash",
)


@dataclass(frozen=True)
class BatchHeader:
    """Transaction-level header (cabecalho) of a TISS batch."""

    transaction_type: Optional[str] = None
    transaction_sequence: Optional[str] = None
    registration_date: Optional[str] = None
    registration_time: Optional[str] = None
    provider_tax_id: Optional[str] = None
    provider_name: Optional[str] = None
    payer_registry: Optional[str] = None
    tiss_standard: Optional[str] = None
    integrity_hash: Optional[str] = None
    facility_cnes: Optional[str] = None

    def as_dict(self) -> dict[str, Optional[str]]:
        """Return the header as an ordered field -> value mapping."""
        return {name: getattr(self, name) for name in HEADER_FIELDS}

    def is_empty(self) -> bool:
        """True when no header field carries a value."""
        return all(value is None for value in self.as_dict().values())

    def missing_fields(self) -> list[str]:
        """Names of header fields that are null or empty."""
        return [name for name, value in self.as_dict().items() if not value]


@dataclass(frozen=True)
class BatchInfo:
    """Batch (lote) metadata carried by the document."""

    batch_number: Optional[str]
    billing_period: Optional[str]
    submission_date: Optional[str]
    total_value: Optional[Decimal]


@dataclass(frozen=True)
class PayerInfo:
    """Payer (operadora) metadata carried by the document."""

    registry_number: Optional[str]
    name: Optional[str]


@dataclass(frozen=True)
class ParsedBatchDocument:
    """Structured view of a TISS batch document."""

    header: Optional[BatchHeader]
    batch_info: Optional[BatchInfo]
    payer_info: Optional[PayerInfo]
    content_md5: str


@dataclass(frozen=True)
class BatchRecord:
    """Persisted batch domain entity."""

    id: int
    batch_number: str
    xml_filename: str
    header: BatchHeader
    header_version: int
    created_at: datetime
    reconciled_at: Optional[datetime] = None


@dataclass(frozen=True)
class BacklogItem:
    """Minimal projection of a batch record used to drive bulk runs."""

    id: int
    batch_number: str
    xml_filename: str


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    UNCHANGED = "unchanged"
    FAILURE = "failure"


class FailureCause(str, Enum):
    NOT_FOUND = "not_found"
    FILE_MISSING = "file_missing"
    MALFORMED_DOCUMENT = "malformed_document"
    NO_ROWS_UPDATED = "no_rows_updated"
    IO_ERROR = "io_error"
    STORE_ERROR = "store_error"
    UNEXPECTED_ERROR = "unexpected_error"


class ReconciliationStage(str, Enum):
    LOAD = "load"
    RESOLVE = "resolve"
    READ = "read"
    PARSE = "parse"
    WRITE = "write"


@dataclass(frozen=True)
class ReconciliationOutcome:
    """Result of reconciling one batch. Never persisted."""

    batch_id: int
    status: OutcomeStatus
    batch_number: Optional[str] = None
    header: Optional[BatchHeader] = None
    cause: Optional[FailureCause] = None
    stage: Optional[ReconciliationStage] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status != OutcomeStatus.FAILURE

    @classmethod
    def success(
        cls, batch_id: int, header: BatchHeader, batch_number: Optional[str] = None
    ) -> "ReconciliationOutcome":
        return cls(
            batch_id=batch_id,
            status=OutcomeStatus.SUCCESS,
            batch_number=batch_number,
            header=header,
        )

    @classmethod
    def unchanged(
        cls, batch_id: int, header: BatchHeader, batch_number: Optional[str] = None
    ) -> "ReconciliationOutcome":
        return cls(
            batch_id=batch_id,
            status=OutcomeStatus.UNCHANGED,
            batch_number=batch_number,
            header=header,
        )

    @classmethod
    def failure(
        cls,
        batch_id: int,
        cause: FailureCause,
        stage: ReconciliationStage,
        message: str,
        batch_number: Optional[str] = None,
    ) -> "ReconciliationOutcome":
        return cls(
            batch_id=batch_id,
            status=OutcomeStatus.FAILURE,
            batch_number=batch_number,
            cause=cause,
            stage=stage,
            message=message,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "batch_id": self.batch_id,
            "batch_number": self.batch_number,
            "status": self.status.value,
            "header": self.header.as_dict() if self.header is not None else None,
            "cause": self.cause.value if self.cause is not None else None,
            "stage": self.stage.value if self.stage is not None else None,
            "message": self.message,
        }


@dataclass(frozen=True)
class BulkReport:
    """Aggregate result of a bulk reconciliation run. Never persisted."""

    outcomes: list[ReconciliationOutcome] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded

    @property
    def failures(self) -> list[ReconciliationOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def ok(self) -> bool:
        """True when no item failed (an empty run is ok)."""
        return self.failed == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
        }


@dataclass(frozen=True)
class BatchInspection:
    """Header completeness of one batch record, for read-only listings."""

    record: BatchRecord
    is_complete: bool
    missing_fields: list[str]


def header_from_dict(values: dict[str, Any]) -> BatchHeader:
    """Build a BatchHeader from a mapping, ignoring unknown keys."""
    return BatchHeader(**{name: values.get(name) for name in HEADER_FIELDS})
