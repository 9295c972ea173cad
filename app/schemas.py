"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from models.records import AlertAction, SensorReading, Severity, StationAssessment
from services.aggregator import AssessmentSummary
from services.readings import NUMERIC_FIELDS, parse_number, require_coordinate


class ProcessingStatus(str, Enum):
    """Processing lifecycle states exposed via the API."""

    uploaded = "uploaded"
    processing = "processing"
    processed = "processed"
    partial = "partial"
    failed = "failed"


class BatchUploadResponse(BaseModel):
    """Immediate response payload after accepting a batch upload."""

    batch_id: str = Field(..., description="Generated identifier for the uploaded batch.")


class ReadingIn(BaseModel):
    """A single station reading submitted for scoring."""

    station_id: str = Field(..., min_length=1)
    name: Optional[str] = None
    longitude: float
    latitude: float
    temperature: Optional[float] = Field(default=None, description="Air temperature in °C.")
    humidity: Optional[float] = Field(default=None, description="Relative humidity in %.")
    soil_moisture: Optional[float] = Field(default=None, description="Soil moisture in %.")
    wind_speed: Optional[float] = Field(default=None, description="Wind speed in km/h.")
    wind_direction: Optional[float] = Field(default=None, description="Wind bearing in degrees.")
    smoke: Optional[float] = Field(default=None, description="Smoke index in [0, 1].")
    co: Optional[float] = Field(default=None, description="CO concentration in ppm.")
    observed_at: Optional[datetime] = None

    # Same coercion as the CSV and fixture paths: booleans are not numbers.
    @field_validator("longitude", "latitude", mode="before")
    @classmethod
    def coerce_coordinate(cls, value: Any, info: ValidationInfo) -> float:
        return require_coordinate(info.field_name, value)

    @field_validator(*NUMERIC_FIELDS, mode="before")
    @classmethod
    def coerce_factor(cls, value: Any, info: ValidationInfo) -> Optional[float]:
        return parse_number(info.field_name, value)

    def to_reading(self) -> SensorReading:
        return SensorReading(
            station_id=self.station_id,
            name=self.name or self.station_id,
            longitude=self.longitude,
            latitude=self.latitude,
            temperature=self.temperature,
            humidity=self.humidity,
            soil_moisture=self.soil_moisture,
            wind_speed=self.wind_speed,
            wind_direction=self.wind_direction,
            smoke=self.smoke,
            co=self.co,
            observed_at=self.observed_at,
        )


class RiskScoreOut(BaseModel):
    composite: float = Field(..., ge=0.0, le=1.0)
    temperature: float
    humidity: float
    soil: float
    wind: float
    smoke: float
    co: float


class AlertOut(BaseModel):
    severity: Severity
    action: AlertAction


class StationAssessmentOut(BaseModel):
    """Score and alert for one station."""

    station_id: str
    name: str
    longitude: float
    latitude: float
    observed_at: Optional[datetime] = None
    score: RiskScoreOut
    alert: AlertOut

    @classmethod
    def from_assessment(cls, assessment: StationAssessment) -> "StationAssessmentOut":
        reading = assessment.reading
        risk = assessment.score
        return cls(
            station_id=reading.station_id,
            name=reading.name,
            longitude=reading.longitude,
            latitude=reading.latitude,
            observed_at=reading.observed_at,
            score=RiskScoreOut(composite=risk.composite, **risk.sub_scores()),
            alert=AlertOut(severity=assessment.alert.severity, action=assessment.alert.action),
        )


class SummaryOut(BaseModel):
    """Aggregate metrics computed over a set of assessments."""

    station_count: int = Field(..., ge=0)
    min_fri: Optional[float] = None
    max_fri: Optional[float] = None
    mean_fri: Optional[float] = None
    per_severity_count: Dict[Severity, int] = Field(default_factory=dict)

    @classmethod
    def from_summary(cls, summary: AssessmentSummary) -> "SummaryOut":
        return cls(
            station_count=summary.station_count,
            min_fri=summary.min_fri,
            max_fri=summary.max_fri,
            mean_fri=summary.mean_fri,
            per_severity_count=dict(summary.per_severity_count),
        )


class StationsReport(BaseModel):
    assessments: List[StationAssessmentOut]
    summary: SummaryOut


class EntityOut(BaseModel):
    entity_id: str
    kind: str
    positions: List[List[float]]
    properties: Dict[str, Any] = Field(default_factory=dict)


class CameraOut(BaseModel):
    longitude: float
    latitude: float
    height: float
    heading: float
    pitch: float
    duration: float


class OverlayResponse(BaseModel):
    """Entities the globe should draw for the fire panel."""

    panel: str
    entities: List[EntityOut]
    camera: Optional[CameraOut] = None
    summary: SummaryOut


class ProcessingError(BaseModel):
    """Details about a row that failed validation or parsing."""

    row_number: int = Field(..., ge=1)
    reason: str


class BatchResult(BaseModel):
    """Full record representing an assessed batch of readings."""

    batch_id: str
    status: ProcessingStatus
    uploaded_at: datetime
    processed_at: Optional[datetime] = None
    processing_ms: Optional[int] = Field(
        default=None, description="Duration in milliseconds from start to finish."
    )
    summary: Optional[SummaryOut] = None
    assessments: List[StationAssessmentOut] = Field(default_factory=list)
    errors: List[ProcessingError] = Field(default_factory=list)
