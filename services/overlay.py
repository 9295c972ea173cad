"""Geometry helpers and styling shared by every globe overlay."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from models.records import Severity, StationAssessment
from services.scoring import WIND_SATURATION_KMH

Coordinate = Sequence[float]

ARROW_BASE_LENGTH_DEG = 0.005
ARROW_WIND_LENGTH_DEG = 0.01
RISK_ZONE_MIN_FRI = 0.6
RISK_ZONE_BASE_RADIUS_M = 500.0
RISK_ZONE_FRI_RADIUS_M = 500.0


@dataclass(frozen=True)
class SeverityStyle:
    color: str
    label: str
    marker_size: int
    zone_alpha: float


SEVERITY_STYLES: Dict[Severity, SeverityStyle] = {
    Severity.EXTREME: SeverityStyle(color="#F44336", label="Extreme danger", marker_size=20, zone_alpha=0.2),
    Severity.HIGH: SeverityStyle(color="#FF9800", label="High danger", marker_size=20, zone_alpha=0.2),
    Severity.MEDIUM: SeverityStyle(color="#FFEB3B", label="Moderate", marker_size=20, zone_alpha=0.2),
    Severity.LOW: SeverityStyle(color="#4CAF50", label="Low", marker_size=20, zone_alpha=0.2),
}


def polygon_center(ring: Sequence[Coordinate], drop_closing_vertex: bool = False) -> tuple[float, float]:
    """Vertex-average center of a single ``(lon, lat)`` ring.

    GeoJSON rings repeat the first vertex at the end; pass
    ``drop_closing_vertex=True`` to ignore that duplicate.
    """
    points = list(ring)
    if drop_closing_vertex and len(points) > 1 and tuple(points[0][:2]) == tuple(points[-1][:2]):
        points = points[:-1]
    if not points:
        raise ValueError("Cannot compute the center of an empty ring.")
    lon = sum(point[0] for point in points) / len(points)
    lat = sum(point[1] for point in points) / len(points)
    return lon, lat


def wind_arrow_end(
    longitude: float,
    latitude: float,
    wind_speed: Optional[float],
    wind_direction: Optional[float],
) -> tuple[float, float]:
    """End point of a wind arrow; bearing is clockwise from north."""
    speed = wind_speed if wind_speed is not None and math.isfinite(wind_speed) else 0.0
    direction = wind_direction if wind_direction is not None and math.isfinite(wind_direction) else 0.0
    length = ARROW_BASE_LENGTH_DEG + (max(speed, 0.0) / WIND_SATURATION_KMH) * ARROW_WIND_LENGTH_DEG
    radians = math.radians(direction % 360.0)
    return longitude + math.sin(radians) * length, latitude + math.cos(radians) * length


def risk_zone_radius(fri: float) -> Optional[float]:
    """Radius in metres of the warning ring drawn around risky stations."""
    if fri < RISK_ZONE_MIN_FRI:
        return None
    return RISK_ZONE_BASE_RADIUS_M + fri * RISK_ZONE_FRI_RADIUS_M


def format_fri(fri: float, decimals: int = 0) -> str:
    return f"{fri * 100:.{decimals}f}%"


def marker_label(assessment: StationAssessment) -> str:
    style = SEVERITY_STYLES[assessment.alert.severity]
    return f"{assessment.reading.name}\nFRI: {format_fri(assessment.score.composite)}\n{style.label}"
