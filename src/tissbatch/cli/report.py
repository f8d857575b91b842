"""Line-oriented rendering of reconciliation outcomes and reports."""

import json
from typing import Optional

from tissbatch.domain.entities import (
    HEADER_FIELDS,
    BatchHeader,
    BatchInspection,
    BulkReport,
    OutcomeStatus,
    ReconciliationOutcome,
)

HEADER_LABELS = {
    "transaction_type": "Transaction type",
    "transaction_sequence": "Sequence",
    "registration_date": "Registration date",
    "registration_time": "Registration time",
    "provider_tax_id": "Provider CNPJ",
    "provider_name": "Provider name",
    "payer_registry": "Registro ANS",
    "tiss_standard": "TISS standard",
    "integrity_hash": "Hash",
    "facility_cnes": "CNES",
}

HASH_DISPLAY_LENGTH = 32


def _display(name: str, value: Optional[str]) -> str:
    if not value:
        return "NULL"
    if name == "integrity_hash" and len(value) > HASH_DISPLAY_LENGTH:
        return value[:HASH_DISPLAY_LENGTH] + "..."
    return value


def _batch_label(batch_id: int, batch_number: Optional[str]) -> str:
    if batch_number:
        return f"Batch {batch_id} (lote {batch_number})"
    return f"Batch {batch_id}"


def header_lines(header: BatchHeader, indent: str = "  ") -> list[str]:
    """Render every header field on its own line."""
    width = max(len(label) for label in HEADER_LABELS.values())
    return [
        f"{indent}{HEADER_LABELS[name] + ':':<{width + 1}} {_display(name, getattr(header, name))}"
        for name in HEADER_FIELDS
    ]


def outcome_line(outcome: ReconciliationOutcome) -> str:
    """One-line summary of a single outcome."""
    label = _batch_label(outcome.batch_id, outcome.batch_number)
    if outcome.status == OutcomeStatus.SUCCESS:
        return f"OK      {label}: header reconciled"
    if outcome.status == OutcomeStatus.UNCHANGED:
        return f"SKIPPED {label}: header unchanged"
    return (
        f"FAILED  {label}: stage={outcome.stage.value} "
        f"cause={outcome.cause.value}: {outcome.message}"
    )


def outcome_lines(outcome: ReconciliationOutcome, show_header: bool = True) -> list[str]:
    """Outcome summary, followed by the written header on success."""
    lines = [outcome_line(outcome)]
    if show_header and outcome.header is not None:
        lines.extend(header_lines(outcome.header))
    return lines


def report_lines(report: BulkReport) -> list[str]:
    """Per-item lines followed by the final tally."""
    lines = [outcome_line(outcome) for outcome in report.outcomes]
    lines.append("")
    lines.append("Reconciliation complete:")
    lines.append(f"  Attempted: {report.attempted}")
    lines.append(f"  Succeeded: {report.succeeded}")
    lines.append(f"  Failed: {report.failed}")
    return lines


def report_json(report: BulkReport) -> str:
    """Machine-readable rendering of a bulk report."""
    return json.dumps(report.to_dict(), indent=2, ensure_ascii=False)


def inspection_lines(inspections: list[BatchInspection]) -> list[str]:
    """Listing of batch records with their header fields and a summary."""
    lines = []
    for inspection in inspections:
        record = inspection.record
        status = "complete" if inspection.is_complete else "incomplete"
        lines.append("=" * 60)
        lines.append(f"Batch ID: {record.id} | Number: {record.batch_number} | {status}")
        lines.append(f"  File: {record.xml_filename}")
        lines.extend(header_lines(record.header))
        if record.reconciled_at is not None:
            lines.append(f"  Reconciled at: {record.reconciled_at:%Y-%m-%d %H:%M:%S}")

    complete = sum(1 for inspection in inspections if inspection.is_complete)
    lines.append("=" * 60)
    lines.append("")
    lines.append("Summary:")
    lines.append(f"  Total batches: {len(inspections)}")
    lines.append(f"  Complete header: {complete}")
    lines.append(f"  Incomplete header: {len(inspections) - complete}")
    return lines
