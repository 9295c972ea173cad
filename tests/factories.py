from __future__ import annotations

from typing import Any

from models.records import SensorReading


def make_reading(**overrides: Any) -> SensorReading:
    """Build a reading with every factor missing unless overridden."""

    fields: dict[str, Any] = {
        "station_id": "TEST_001",
        "name": "Test station",
        "longitude": 108.45,
        "latitude": 11.94,
    }
    fields.update(overrides)
    return SensorReading(**fields)
