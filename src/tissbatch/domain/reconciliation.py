"""Batch header reconciliation domain service."""

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence, Union

from sqlalchemy.exc import SQLAlchemyError

from tissbatch.database.base import BatchStore
from tissbatch.domain.backlog import BacklogService
from tissbatch.domain.entities import (
    BacklogItem,
    BatchHeader,
    BatchRecord,
    BulkReport,
    FailureCause,
    ParsedBatchDocument,
    ReconciliationOutcome,
    ReconciliationStage,
)
from tissbatch.domain.errors import (
    FileMissingError,
    MalformedDocumentError,
    NoRowsUpdatedError,
    NotFoundError,
    batch_file_missing,
    batch_file_outside_root,
    batch_not_found,
    batch_without_file,
    no_rows_updated,
)
from tissbatch.domain.header_mapper import map_header
from tissbatch.utils import tiss_parser
from tissbatch.utils.upload_paths import resolve_batch_file

logger = logging.getLogger(__name__)

DocumentParser = Callable[[bytes], ParsedBatchDocument]


def failure_cause(error: Exception) -> FailureCause:
    """Classify an error raised while reconciling one batch."""
    if isinstance(error, NotFoundError):
        return FailureCause.NOT_FOUND
    if isinstance(error, FileMissingError):
        return FailureCause.FILE_MISSING
    if isinstance(error, MalformedDocumentError):
        return FailureCause.MALFORMED_DOCUMENT
    if isinstance(error, NoRowsUpdatedError):
        return FailureCause.NO_ROWS_UPDATED
    if isinstance(error, SQLAlchemyError):
        return FailureCause.STORE_ERROR
    if isinstance(error, OSError):
        return FailureCause.IO_ERROR
    return FailureCause.UNEXPECTED_ERROR


class ReconciliationService:
    """Service for writing XML header metadata onto batch records."""

    def __init__(
        self,
        db: BatchStore,
        upload_root: Path,
        parser: Optional[DocumentParser] = None,
    ):
        """Initialize reconciliation service.

        Args:
            db: Batch store instance
            upload_root: Directory the stored XML filenames are relative to
            parser: Function turning XML bytes into a ParsedBatchDocument;
                defaults to the TISS parser
        """
        self.db = db
        self.upload_root = Path(upload_root)
        self.parser = parser or tiss_parser.parse_tiss_xml
        self.backlog_service = BacklogService(db)

    def reconcile_batch(
        self, target: Union[int, BacklogItem], skip_unchanged: bool = False
    ) -> ReconciliationOutcome:
        """Reconcile the header of one batch.

        Loads the record, reads and parses its XML file, maps the header and
        overwrites all ten header fields. The write only applies if the
        record's header_version is still the one that was loaded.

        Args:
            target: Batch ID or backlog item
            skip_unchanged: If True, do not write when the stored integrity
                hash equals the one in the file and the header is filled

        Returns:
            ReconciliationOutcome. Errors are never raised; each is reported
            as a failure outcome with the cause and the stage it happened in.
        """
        if isinstance(target, BacklogItem):
            batch_id, batch_number = target.id, target.batch_number
        else:
            batch_id, batch_number = target, None

        stage = ReconciliationStage.LOAD
        try:
            record = self.db.get_batch(batch_id)
            if record is None:
                raise NotFoundError(batch_not_found(batch_id))
            batch_number = record.batch_number

            stage = ReconciliationStage.RESOLVE
            path = self._resolve_file(record)

            stage = ReconciliationStage.READ
            content = path.read_bytes()

            stage = ReconciliationStage.PARSE
            header = map_header(self.parser(content))

            if skip_unchanged and self._is_unchanged(record, header):
                logger.info("Batch %s unchanged (hash %s), skipped", batch_id, header.integrity_hash)
                return ReconciliationOutcome.unchanged(batch_id, record.header, batch_number)

            stage = ReconciliationStage.WRITE
            affected = self.db.update_header_fields(
                batch_id, header, expected_version=record.header_version
            )
            if affected == 0:
                raise NoRowsUpdatedError(no_rows_updated(batch_id))
        except Exception as e:
            outcome = ReconciliationOutcome.failure(
                batch_id=batch_id,
                cause=failure_cause(e),
                stage=stage,
                message=str(e),
                batch_number=batch_number,
            )
            logger.warning(
                "Batch %s failed at %s: %s (%s)",
                batch_id,
                stage.value,
                outcome.cause.value,
                e,
            )
            return outcome

        if header.is_empty():
            logger.warning("Batch %s: document has no header, all header fields cleared", batch_id)
        logger.info("Batch %s (%s) reconciled", batch_id, batch_number)
        return ReconciliationOutcome.success(batch_id, header, batch_number)

    def reconcile_backlog(
        self,
        items: Optional[Sequence[BacklogItem]] = None,
        skip_unchanged: bool = False,
    ) -> BulkReport:
        """Reconcile every batch of the backlog, one after the other.

        A failing batch is recorded in the report and the run moves on to the
        next one. Successful writes stay in place even when other batches fail.

        Args:
            items: Batches to process in the given order. If None, the
                backlog is selected from the store.
            skip_unchanged: Passed on to reconcile_batch

        Returns:
            BulkReport with one outcome per item, in processing order

        Raises:
            SQLAlchemyError: If the backlog cannot be selected
        """
        if items is None:
            items = self.backlog_service.select_backlog()

        outcomes = []
        for position, item in enumerate(items, start=1):
            logger.debug("Reconciling %d/%d: batch %s", position, len(items), item.id)
            outcomes.append(self.reconcile_batch(item, skip_unchanged=skip_unchanged))

        report = BulkReport(outcomes=outcomes)
        logger.info(
            "Bulk reconciliation finished: %d attempted, %d succeeded, %d failed",
            report.attempted,
            report.succeeded,
            report.failed,
        )
        return report

    def reconcile_ids(self, batch_ids: Iterable[int], skip_unchanged: bool = False) -> BulkReport:
        """Reconcile an explicit set of batches, in ascending ID order.

        Args:
            batch_ids: Batch IDs; duplicates are processed once
            skip_unchanged: Passed on to reconcile_batch

        Returns:
            BulkReport with one outcome per distinct ID
        """
        outcomes = [
            self.reconcile_batch(batch_id, skip_unchanged=skip_unchanged)
            for batch_id in sorted(set(batch_ids))
        ]
        return BulkReport(outcomes=outcomes)

    def _resolve_file(self, record: BatchRecord) -> Path:
        if not record.xml_filename or not record.xml_filename.strip():
            raise FileMissingError(batch_without_file(record.id))
        try:
            path = resolve_batch_file(self.upload_root, record.xml_filename)
        except ValueError:
            raise FileMissingError(batch_file_outside_root(record.id, record.xml_filename))
        if not path.is_file():
            raise FileMissingError(batch_file_missing(record.id, str(path)))
        return path

    @staticmethod
    def _is_unchanged(record: BatchRecord, header: BatchHeader) -> bool:
        stored = record.header
        return bool(
            header.integrity_hash
            and stored.integrity_hash == header.integrity_hash
            and stored.transaction_type
        )
