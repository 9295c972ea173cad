"""Background assessment of uploaded CSV batches of station readings."""

from __future__ import annotations

import csv
import io
import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Dict, Optional
from uuid import uuid4

from fastapi import BackgroundTasks, UploadFile

from app.schemas import (
    BatchResult,
    ProcessingError,
    ProcessingStatus,
    StationAssessmentOut,
    SummaryOut,
)
from datastore.result_table import BatchResultTable, build_default_table
from models.records import ReadingValidationError, StationAssessment
from services.aggregator import Aggregator
from services.readings import normalize_keys, parse_reading
from services.scoring import assess
from settings import get_settings

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = frozenset({"station_id", "longitude", "latitude"})


class ProcessorService:
    """Coordinates background scoring of batches and result retrieval."""

    def __init__(
        self,
        table: BatchResultTable,
        aggregator: Aggregator,
        workers: int = 4,
    ) -> None:
        self.table = table
        self.aggregator = aggregator
        self.executor = ThreadPoolExecutor(max_workers=workers)
        self._futures: Dict[str, Future[None]] = {}
        self._futures_lock = Lock()

    def enqueue_file(self, background_tasks: BackgroundTasks, file: UploadFile) -> str:
        """Record the batch and trigger asynchronous assessment."""
        batch_id = str(uuid4())
        filename = Path(file.filename or "readings.csv").name

        file.file.seek(0)
        contents = file.file.read()
        if isinstance(contents, str):
            contents = contents.encode("utf-8")
        if not contents:
            raise ValueError("Uploaded file is empty.")

        uploaded_at = datetime.now(timezone.utc)
        self.table.save(
            BatchResult(
                batch_id=batch_id,
                status=ProcessingStatus.uploaded,
                uploaded_at=uploaded_at,
            )
        )
        logger.info(
            "Accepted batch %s",
            filename,
            extra={"batch_id": batch_id, "status": ProcessingStatus.uploaded.value},
        )

        future = self.executor.submit(
            self._process_batch, batch_id=batch_id, contents=contents, uploaded_at=uploaded_at
        )
        with self._futures_lock:
            self._futures[batch_id] = future
        future.add_done_callback(lambda done, bid=batch_id: self._on_batch_done(bid, done))

        background_tasks.add_task(file.close)
        return batch_id

    def fetch_result(self, batch_id: str) -> BatchResult:
        """Retrieve batch output from the result table."""
        result = self.table.get(batch_id)
        if result is None:
            raise KeyError(f"Result for batch {batch_id!r} not found.")
        return result

    def shutdown(self) -> None:
        """Clean up executor resources during application shutdown."""
        self.executor.shutdown(wait=False, cancel_futures=True)

    def _on_batch_done(self, batch_id: str, future: Future[None]) -> None:
        with self._futures_lock:
            self._futures.pop(batch_id, None)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is None:
            return

        # A batch must not stay in "processing" once its worker has exited.
        logger.error(
            "Batch processing crashed",
            exc_info=exc,
            extra={"batch_id": batch_id, "status": ProcessingStatus.failed.value},
        )
        try:
            self.table.mark_failed(batch_id, f"Unexpected processing error: {exc}")
        except OSError:
            logger.exception("Could not persist failed status", extra={"batch_id": batch_id})

    def _process_batch(self, batch_id: str, contents: bytes, uploaded_at: datetime) -> None:
        start_time = time.perf_counter()
        self.table.save(
            BatchResult(
                batch_id=batch_id,
                status=ProcessingStatus.processing,
                uploaded_at=uploaded_at,
            )
        )

        errors: list[ProcessingError] = []
        assessments: list[StationAssessment] = []
        summary: Optional[SummaryOut] = None

        try:
            reader = csv.DictReader(io.StringIO(contents.decode("utf-8-sig")))
            if not reader.fieldnames:
                raise ValueError("CSV file is missing a header row.")

            columns = normalize_keys({name: None for name in reader.fieldnames}).keys()
            missing = sorted(REQUIRED_COLUMNS - set(columns))
            if missing:
                raise ValueError(f"CSV missing required columns: {', '.join(missing)}")

            for row_number, row in enumerate(reader, start=2):
                try:
                    reading = parse_reading(row)
                except ReadingValidationError as exc:
                    reason = exc.reason
                    logger.warning(
                        "Skipping row %d: %s",
                        row_number,
                        reason,
                        extra={"batch_id": batch_id, "row_number": row_number, "reason": reason},
                    )
                    errors.append(ProcessingError(row_number=row_number, reason=reason))
                    continue
                assessments.append(assess(reading))

            aggregated = self.aggregator.summarize(assessments)
            summary = SummaryOut.from_summary(aggregated)

            if aggregated.station_count == 0 and errors:
                status = ProcessingStatus.failed
                summary = None
            elif errors:
                status = ProcessingStatus.partial
            else:
                status = ProcessingStatus.processed
        except (ValueError, csv.Error) as exc:
            status = ProcessingStatus.failed
            errors.append(ProcessingError(row_number=1, reason=str(exc)))
            assessments = []
            summary = None

        processing_ms = int((time.perf_counter() - start_time) * 1000)
        self.table.save(
            BatchResult(
                batch_id=batch_id,
                status=status,
                uploaded_at=uploaded_at,
                processed_at=datetime.now(timezone.utc),
                processing_ms=processing_ms,
                summary=summary,
                assessments=[StationAssessmentOut.from_assessment(item) for item in assessments],
                errors=errors,
            )
        )
        logger.info(
            "Finished batch",
            extra={
                "batch_id": batch_id,
                "status": status.value,
                "processing_ms": processing_ms,
                "error_count": len(errors),
                "station_count": len(assessments),
            },
        )


@lru_cache
def build_default_processor(
    workers: Optional[int] = None,
) -> ProcessorService:
    """Factory that wires the processor with the default result table."""
    table = build_default_table()
    worker_count = workers or get_settings().processor_workers
    return ProcessorService(table=table, aggregator=Aggregator(), workers=worker_count)
