"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Optional


class Severity(str, Enum):
    """Alert severity derived from the fire risk index."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    EXTREME = "EXTREME"


class AlertAction(str, Enum):
    """Recommended response attached to each severity."""

    SAFE = "SAFE"
    MONITOR = "MONITOR"
    WARNING = "WARNING"
    EVACUATE = "EVACUATE"


class ReadingValidationError(ValueError):
    """Raised when a raw station record cannot be turned into a reading."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(reason)


@dataclass(frozen=True, slots=True)
class SensorReading:
    """A snapshot from one environmental monitoring station.

    Factor fields are optional; ``None`` marks a value the station did not
    report and is scored as the lowest-risk contribution.
    """

    station_id: str
    name: str
    longitude: float
    latitude: float
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    soil_moisture: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_direction: Optional[float] = None
    smoke: Optional[float] = None
    co: Optional[float] = None
    observed_at: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class RiskScore:
    """Composite fire risk index and the normalized factors behind it."""

    composite: float
    temperature: float
    humidity: float
    soil: float
    wind: float
    smoke: float
    co: float

    def sub_scores(self) -> Dict[str, float]:
        return {
            "temperature": self.temperature,
            "humidity": self.humidity,
            "soil": self.soil,
            "wind": self.wind,
            "smoke": self.smoke,
            "co": self.co,
        }


@dataclass(frozen=True, slots=True)
class AlertClassification:
    severity: Severity
    action: AlertAction


@dataclass(frozen=True, slots=True)
class StationAssessment:
    """A reading together with its score and alert classification."""

    reading: SensorReading
    score: RiskScore
    alert: AlertClassification
