"""Batch result store keyed by batch id.

Results are held in memory. When a path is configured every change rewrites
one JSON document through a temporary file so a crash mid-write never leaves
a truncated results file behind.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional

from pydantic import ValidationError

from app.schemas import BatchResult, ProcessingError, ProcessingStatus
from settings import get_settings

logger = logging.getLogger(__name__)


class BatchResultTable:
    def __init__(self, name: str, persistence_path: Optional[Path] = None) -> None:
        self.name = name
        self.persistence_path = persistence_path
        self._results: Dict[str, BatchResult] = {}
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._results.update(self._read_document(persistence_path))

    def save(self, result: BatchResult) -> None:
        """Store ``result``, replacing any earlier state of the same batch."""
        with self._lock:
            self._results[result.batch_id] = result.model_copy(deep=True)
            self._write_document()

    def get(self, batch_id: str) -> Optional[BatchResult]:
        with self._lock:
            result = self._results.get(batch_id)
        return result.model_copy(deep=True) if result is not None else None

    def mark_failed(self, batch_id: str, reason: str) -> BatchResult:
        """Close a batch as failed, keeping its upload time when known.

        The in-memory record is updated before the file is rewritten, so
        readers see the failure even when persisting it raises.
        """
        now = datetime.now(timezone.utc)
        with self._lock:
            previous = self._results.get(batch_id)
            failed = BatchResult(
                batch_id=batch_id,
                status=ProcessingStatus.failed,
                uploaded_at=previous.uploaded_at if previous is not None else now,
                processed_at=now,
                errors=[ProcessingError(row_number=1, reason=reason)],
            )
            self._results[batch_id] = failed
            self._write_document()
        return failed.model_copy(deep=True)

    def _write_document(self) -> None:
        if not self.persistence_path:
            return
        document = {
            batch_id: result.model_dump(mode="json") for batch_id, result in self._results.items()
        }
        staging = self.persistence_path.with_name(self.persistence_path.name + ".tmp")
        staging.write_text(json.dumps(document, indent=2, sort_keys=True))
        staging.replace(self.persistence_path)

    @staticmethod
    def _read_document(path: Path) -> Dict[str, BatchResult]:
        if not path.exists():
            return {}
        try:
            document: Any = json.loads(path.read_text() or "{}")
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable results file %s", path, extra={"reason": str(exc)})
            return {}
        if not isinstance(document, dict):
            logger.warning("Ignoring results file %s without a batch mapping", path)
            return {}

        results: Dict[str, BatchResult] = {}
        for batch_id, payload in document.items():
            try:
                results[batch_id] = BatchResult.model_validate(payload)
            except ValidationError as exc:
                logger.warning(
                    "Dropping stored batch %s",
                    batch_id,
                    extra={"batch_id": batch_id, "reason": f"{exc.error_count()} validation error(s)"},
                )
        return results


@lru_cache
def build_default_table(
    name: Optional[str] = None,
    path: Optional[str] = None,
) -> BatchResultTable:
    settings = get_settings()
    table_name = settings.table_name if name is None else name
    table_path = settings.table_persistence_path if path is None else path
    persistence = Path(table_path) if table_path else None
    return BatchResultTable(name=table_name, persistence_path=persistence)
