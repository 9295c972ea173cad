"""Monitoring-station fixture loading."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from models.records import SensorReading
from services.readings import parse_reading
from settings import get_settings

logger = logging.getLogger(__name__)


def load_stations(path: Path) -> list[SensorReading]:
    """Read a JSON array of station records.

    Invalid records raise ``ReadingValidationError``: a broken fixture is a
    deployment error, unlike a bad row in an uploaded batch.
    """
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise ValueError(f"Station fixture {path} must contain a JSON array.")
    readings = [parse_reading(record) for record in payload]
    logger.info("Loaded station fixture from %s", path, extra={"station_count": len(readings)})
    return readings


@lru_cache
def build_default_stations(path: Optional[str] = None) -> tuple[SensorReading, ...]:
    settings = get_settings()
    stations_path = Path(settings.stations_path if path is None else path)
    return tuple(load_stations(stations_path))
