"""Boundary parsing from raw station records into ``SensorReading`` values."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from models.records import ReadingValidationError, SensorReading

NUMERIC_FIELDS = (
    "temperature",
    "humidity",
    "soil_moisture",
    "wind_speed",
    "wind_direction",
    "smoke",
    "co",
)

# camelCase keys used by the station JSON feed.
FIELD_ALIASES = {
    "sensorId": "station_id",
    "sensor_id": "station_id",
    "soilMoisture": "soil_moisture",
    "windSpeed": "wind_speed",
    "windDirection": "wind_direction",
    "timestamp": "observed_at",
}


def normalize_keys(payload: Mapping[str, Any]) -> dict[str, Any]:
    normalized: dict[str, Any] = {}
    for key, value in payload.items():
        if not isinstance(key, str):
            continue
        stripped = key.strip()
        canonical = FIELD_ALIASES.get(stripped, stripped.lower())
        normalized.setdefault(canonical, value)
    return normalized


def parse_number(field: str, raw: Any) -> Optional[float]:
    """Coerce a raw value to float, treating ``None`` and blanks as missing."""
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ReadingValidationError(field, f"invalid numeric value for {field}")
    if isinstance(raw, (int, float)):
        return float(raw)
    if isinstance(raw, str):
        candidate = raw.strip()
        if not candidate:
            return None
        try:
            return float(candidate)
        except ValueError as exc:
            raise ReadingValidationError(field, f"invalid numeric value for {field}") from exc
    raise ReadingValidationError(field, f"invalid numeric value for {field}")


def parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            return None
        if candidate.endswith("Z"):
            candidate = candidate[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(candidate)
        except ValueError as exc:
            raise ReadingValidationError("observed_at", "invalid timestamp") from exc
    else:
        raise ReadingValidationError("observed_at", "invalid timestamp")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def require_coordinate(field: str, raw: Any) -> float:
    value = parse_number(field, raw)
    if value is None:
        raise ReadingValidationError(field, f"missing {field}")
    if not math.isfinite(value):
        raise ReadingValidationError(field, f"invalid {field}")
    return value


def parse_reading(payload: Mapping[str, Any]) -> SensorReading:
    """Build a reading from a JSON object or CSV row.

    Raises ``ReadingValidationError`` for non-numeric values and for a missing
    station id or position. Out-of-range numbers pass through untouched; the
    scoring function clamps them.
    """
    fields = normalize_keys(payload)

    station_raw = fields.get("station_id")
    station_id = str(station_raw).strip() if station_raw is not None else ""
    if not station_id:
        raise ReadingValidationError("station_id", "missing station_id")

    name_raw = fields.get("name")
    name = str(name_raw).strip() if name_raw is not None else ""

    factors = {field: parse_number(field, fields.get(field)) for field in NUMERIC_FIELDS}

    return SensorReading(
        station_id=station_id,
        name=name or station_id,
        longitude=require_coordinate("longitude", fields.get("longitude")),
        latitude=require_coordinate("latitude", fields.get("latitude")),
        observed_at=parse_timestamp(fields.get("observed_at")),
        **factors,
    )
