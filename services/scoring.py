"""Fire Risk Index (FRI) scoring and alert classification.

Both functions are pure: they hold no state, perform no I/O and never raise
for numeric input. Out-of-range values are clamped and missing values are
scored as the lowest-risk contribution for their factor.
"""

from __future__ import annotations

import math
from typing import Optional

from models.records import (
    AlertAction,
    AlertClassification,
    RiskScore,
    SensorReading,
    Severity,
    StationAssessment,
)

# Saturation points for the unbounded factors.
TEMPERATURE_SATURATION_C = 50.0
WIND_SATURATION_KMH = 30.0
CO_SATURATION_PPM = 1.0

# Weights sum to 1.0.
TEMPERATURE_WEIGHT = 0.25
HUMIDITY_WEIGHT = 0.20
SOIL_WEIGHT = 0.15
WIND_WEIGHT = 0.15
SMOKE_WEIGHT = 0.15
CO_WEIGHT = 0.10

# Inclusive lower bounds, highest first.
ALERT_THRESHOLDS: tuple[tuple[float, Severity, AlertAction], ...] = (
    (0.80, Severity.EXTREME, AlertAction.EVACUATE),
    (0.60, Severity.HIGH, AlertAction.WARNING),
    (0.30, Severity.MEDIUM, AlertAction.MONITOR),
)
_LOWEST_ALERT = AlertClassification(severity=Severity.LOW, action=AlertAction.SAFE)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _or_default(value: Optional[float], default: float) -> float:
    if value is None or math.isnan(value):
        return default
    return value


def score(reading: SensorReading) -> RiskScore:
    """Compute the fire risk index for a single station reading."""
    temperature = _or_default(reading.temperature, 0.0)
    humidity = _clamp(_or_default(reading.humidity, 100.0), 0.0, 100.0)
    soil_moisture = _clamp(_or_default(reading.soil_moisture, 100.0), 0.0, 100.0)
    wind_speed = _or_default(reading.wind_speed, 0.0)
    smoke = _or_default(reading.smoke, 0.0)
    co = _or_default(reading.co, 0.0)

    temperature_score = _clamp(temperature / TEMPERATURE_SATURATION_C, 0.0, 1.0)
    humidity_score = 1.0 - humidity / 100.0
    soil_score = 1.0 - soil_moisture / 100.0
    wind_score = _clamp(wind_speed / WIND_SATURATION_KMH, 0.0, 1.0)
    smoke_score = _clamp(smoke, 0.0, 1.0)
    co_score = _clamp(co / CO_SATURATION_PPM, 0.0, 1.0)

    composite = math.fsum(
        (
            temperature_score * TEMPERATURE_WEIGHT,
            humidity_score * HUMIDITY_WEIGHT,
            soil_score * SOIL_WEIGHT,
            wind_score * WIND_WEIGHT,
            smoke_score * SMOKE_WEIGHT,
            co_score * CO_WEIGHT,
        )
    )

    return RiskScore(
        composite=min(composite, 1.0),
        temperature=temperature_score,
        humidity=humidity_score,
        soil=soil_score,
        wind=wind_score,
        smoke=smoke_score,
        co=co_score,
    )


def classify(risk: RiskScore) -> AlertClassification:
    """Map a risk score onto its severity and recommended action."""
    for lower_bound, severity, action in ALERT_THRESHOLDS:
        if risk.composite >= lower_bound:
            return AlertClassification(severity=severity, action=action)
    return _LOWEST_ALERT


def assess(reading: SensorReading) -> StationAssessment:
    risk = score(reading)
    return StationAssessment(reading=reading, score=risk, alert=classify(risk))
