"""Tests for backlog selection and inspection."""

from tissbatch.domain.entities import BacklogItem, BatchHeader


def test_empty_store_has_empty_backlog(backlog_service):
    """An empty backlog is not an error."""
    assert backlog_service.select_backlog() == []


def test_backlog_contains_unreconciled_batches(backlog_service, temp_db):
    first = temp_db.create_batch(batch_number="0001", xml_filename="1.xml")
    second = temp_db.create_batch(batch_number="0002", xml_filename="2.xml")
    temp_db.update_header_fields(
        first, BatchHeader(transaction_type="ENVIO_LOTE_GUIAS", integrity_hash="abc")
    )

    items = backlog_service.select_backlog()

    assert items == [BacklogItem(id=second, batch_number="0002", xml_filename="2.xml")]


def test_backlog_is_sorted_by_id(backlog_service, temp_db, monkeypatch):
    """Items come back in ascending ID order whatever order the store scans in."""
    unsorted = [
        BacklogItem(id=5, batch_number="0005", xml_filename="5.xml"),
        BacklogItem(id=2, batch_number="0002", xml_filename="2.xml"),
        BacklogItem(id=9, batch_number="0009", xml_filename="9.xml"),
    ]
    monkeypatch.setattr(temp_db, "list_incomplete_batches", lambda: list(unsorted))

    items = backlog_service.select_backlog()

    assert [item.id for item in items] == [2, 5, 9]


def test_backlog_has_no_side_effects(backlog_service, temp_db):
    batch_id = temp_db.create_batch(batch_number="0001", xml_filename="1.xml")

    backlog_service.select_backlog()
    backlog_service.select_backlog()

    assert temp_db.get_batch(batch_id).header_version == 0


def test_inspect_batches_reports_completeness(backlog_service, temp_db):
    """Completeness requires type, sequence, provider CNPJ and hash."""
    complete = temp_db.create_batch(batch_number="0001", xml_filename="1.xml")
    partial = temp_db.create_batch(batch_number="0002", xml_filename="2.xml")
    empty = temp_db.create_batch(batch_number="0003", xml_filename="3.xml")
    temp_db.update_header_fields(
        complete,
        BatchHeader(
            transaction_type="ENVIO_LOTE_GUIAS",
            transaction_sequence="1",
            provider_tax_id="12345678000199",
            integrity_hash="abc",
        ),
    )
    temp_db.update_header_fields(
        partial, BatchHeader(transaction_type="ENVIO_LOTE_GUIAS", integrity_hash="abc")
    )

    inspections = backlog_service.inspect_batches()

    assert [i.record.id for i in inspections] == [complete, partial, empty]
    assert [i.is_complete for i in inspections] == [True, False, False]
    assert "transaction_sequence" in inspections[1].missing_fields
    assert "facility_cnes" in inspections[0].missing_fields
    assert len(inspections[2].missing_fields) == 10


def test_inspect_incomplete_only(backlog_service, temp_db):
    temp_db.create_batch(batch_number="0001", xml_filename="1.xml")
    complete = temp_db.create_batch(batch_number="0002", xml_filename="2.xml")
    temp_db.update_header_fields(
        complete,
        BatchHeader(
            transaction_type="T", transaction_sequence="1", provider_tax_id="1", integrity_hash="h"
        ),
    )

    inspections = backlog_service.inspect_batches(incomplete_only=True)

    assert [i.record.batch_number for i in inspections] == ["0001"]
