"""Panel orchestration over an external 3D scene.

The scene itself (globe, camera, entity rendering) lives outside this
package; the controller only hands it entity descriptions computed from the
scoring core.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from threading import Lock
from typing import Any, Dict, Iterable, List, Optional, Protocol

from models.records import SensorReading, StationAssessment
from services.aggregator import Aggregator, AssessmentSummary
from services.overlay import (
    SEVERITY_STYLES,
    marker_label,
    polygon_center,
    risk_zone_radius,
    wind_arrow_end,
)
from services.scoring import assess

logger = logging.getLogger(__name__)

MARKER_HEIGHT_M = 50.0
ARROW_HEIGHT_M = 30.0
ZONE_HEIGHT_M = 5.0


class Panel(str, Enum):
    """Mutually exclusive feature panels of the globe front end."""

    polygon = "polygon"
    polyline = "polyline"
    production = "production"
    calendar = "calendar"
    terrain = "terrain"
    fire = "fire"
    flood = "flood"
    example = "example"


@dataclass(frozen=True)
class SceneEntity:
    entity_id: str
    kind: str
    positions: tuple[tuple[float, float, float], ...]
    properties: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CameraView:
    longitude: float
    latitude: float
    height: float
    heading: float = 0.0
    pitch: float = -45.0
    duration: float = 2.0


FIRE_SENSOR_CAMERA = CameraView(longitude=108.45, latitude=11.94, height=15000.0)


class Scene(Protocol):
    def clear(self) -> None: ...

    def add(self, entity: SceneEntity) -> None: ...

    def fly_to(self, camera: CameraView) -> None: ...


class RecordingScene:
    """In-memory scene that keeps whatever it is asked to draw."""

    def __init__(self) -> None:
        self._entities: Dict[str, SceneEntity] = {}
        self.camera: Optional[CameraView] = None
        self._lock = Lock()

    def clear(self) -> None:
        with self._lock:
            self._entities.clear()

    def add(self, entity: SceneEntity) -> None:
        with self._lock:
            if entity.entity_id in self._entities:
                raise ValueError(f"Entity {entity.entity_id!r} already exists in the scene.")
            self._entities[entity.entity_id] = entity

    def fly_to(self, camera: CameraView) -> None:
        self.camera = camera

    def get(self, entity_id: str) -> Optional[SceneEntity]:
        with self._lock:
            return self._entities.get(entity_id)

    def entities(self) -> List[SceneEntity]:
        with self._lock:
            return list(self._entities.values())


@dataclass
class FireSensorLayer:
    assessments: List[StationAssessment]
    summary: AssessmentSummary


class SceneController:
    """Holds the active panel and drives the scene for it."""

    def __init__(self, scene: Scene, aggregator: Optional[Aggregator] = None) -> None:
        self.scene = scene
        self.aggregator = aggregator or Aggregator()
        self.active_panel: Optional[Panel] = None

    def activate(self, panel: Panel) -> bool:
        """Switch panels, clearing the scene. Returns False if already active."""
        if panel is self.active_panel:
            return False
        logger.debug("Switching panel", extra={"panel": panel.value})
        self.scene.clear()
        self.active_panel = panel
        return True

    def load_fire_sensors(self, readings: Iterable[SensorReading]) -> FireSensorLayer:
        self.activate(Panel.fire)
        # Reloading the same panel redraws from scratch.
        self.scene.clear()

        assessments: List[StationAssessment] = []
        for reading in readings:
            assessment = assess(reading)
            assessments.append(assessment)
            for entity in self._station_entities(assessment):
                self.scene.add(entity)
            logger.debug(
                "Drew fire sensor",
                extra={
                    "station_id": reading.station_id,
                    "fri": round(assessment.score.composite, 4),
                    "severity": assessment.alert.severity.value,
                },
            )

        self.scene.fly_to(self._camera_over(assessments))
        summary = self.aggregator.summarize(assessments)
        logger.info(
            "Loaded fire sensor layer",
            extra={"panel": Panel.fire.value, "station_count": summary.station_count},
        )
        return FireSensorLayer(assessments=assessments, summary=summary)

    @staticmethod
    def _camera_over(assessments: List[StationAssessment]) -> CameraView:
        """Look down on the middle of the drawn stations, or the default view when none are."""
        if not assessments:
            return FIRE_SENSOR_CAMERA
        longitude, latitude = polygon_center(
            [(item.reading.longitude, item.reading.latitude) for item in assessments]
        )
        return replace(FIRE_SENSOR_CAMERA, longitude=longitude, latitude=latitude)

    @staticmethod
    def _station_entities(assessment: StationAssessment) -> List[SceneEntity]:
        reading = assessment.reading
        fri = assessment.score.composite
        style = SEVERITY_STYLES[assessment.alert.severity]

        entities = [
            SceneEntity(
                entity_id=f"fire-sensor-{reading.station_id}",
                kind="point",
                positions=((reading.longitude, reading.latitude, MARKER_HEIGHT_M),),
                properties={
                    "name": reading.name,
                    "color": style.color,
                    "pixel_size": style.marker_size,
                    "label": marker_label(assessment),
                    "severity": assessment.alert.severity.value,
                    "action": assessment.alert.action.value,
                    "fri": fri,
                },
            )
        ]

        end_lon, end_lat = wind_arrow_end(
            reading.longitude, reading.latitude, reading.wind_speed, reading.wind_direction
        )
        entities.append(
            SceneEntity(
                entity_id=f"wind-arrow-{reading.station_id}",
                kind="polyline",
                positions=(
                    (reading.longitude, reading.latitude, ARROW_HEIGHT_M),
                    (end_lon, end_lat, ARROW_HEIGHT_M),
                ),
                properties={"arrow": True, "color": "#00FFFF"},
            )
        )

        radius = risk_zone_radius(fri)
        if radius is not None:
            entities.append(
                SceneEntity(
                    entity_id=f"risk-zone-{reading.station_id}",
                    kind="ellipse",
                    positions=((reading.longitude, reading.latitude, ZONE_HEIGHT_M),),
                    properties={
                        "radius_m": radius,
                        "color": style.color,
                        "alpha": style.zone_alpha,
                    },
                )
            )
        return entities
