"""HTTP route definitions for the service."""

from __future__ import annotations

from dataclasses import asdict
from typing import Sequence

from fastapi import APIRouter, BackgroundTasks, Depends, File, HTTPException, UploadFile, status

from app.schemas import (
    BatchResult,
    BatchUploadResponse,
    CameraOut,
    EntityOut,
    OverlayResponse,
    ReadingIn,
    StationAssessmentOut,
    StationsReport,
    SummaryOut,
)
from models.records import SensorReading
from services.aggregator import Aggregator
from services.processor import ProcessorService, build_default_processor
from services.scene import RecordingScene, SceneController
from services.scoring import assess
from services.stations import build_default_stations

router = APIRouter()


def get_processor() -> ProcessorService:
    return build_default_processor()


def get_stations() -> Sequence[SensorReading]:
    return build_default_stations()


@router.post(
    "/fri/score",
    response_model=StationAssessmentOut,
    summary="Score a single station reading and classify its alert level.",
)
async def score_reading(reading: ReadingIn) -> StationAssessmentOut:
    return StationAssessmentOut.from_assessment(assess(reading.to_reading()))


@router.get(
    "/stations",
    response_model=StationsReport,
    summary="Assess every monitoring station in the configured fixture.",
)
async def list_stations(
    stations: Sequence[SensorReading] = Depends(get_stations),
) -> StationsReport:
    assessments = [assess(reading) for reading in stations]
    summary = Aggregator().summarize(assessments)
    return StationsReport(
        assessments=[StationAssessmentOut.from_assessment(item) for item in assessments],
        summary=SummaryOut.from_summary(summary),
    )


@router.get(
    "/stations/overlay",
    response_model=OverlayResponse,
    summary="Scene entities for the fire-risk panel.",
)
async def stations_overlay(
    stations: Sequence[SensorReading] = Depends(get_stations),
) -> OverlayResponse:
    scene = RecordingScene()
    controller = SceneController(scene)
    layer = controller.load_fire_sensors(stations)
    camera = scene.camera
    return OverlayResponse(
        panel=controller.active_panel.value,
        entities=[
            EntityOut(
                entity_id=entity.entity_id,
                kind=entity.kind,
                positions=[list(position) for position in entity.positions],
                properties=dict(entity.properties),
            )
            for entity in scene.entities()
        ],
        camera=CameraOut(**asdict(camera)) if camera is not None else None,
        summary=SummaryOut.from_summary(layer.summary),
    )


@router.post(
    "/batches",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=BatchUploadResponse,
    summary="Upload a CSV batch of readings for asynchronous assessment.",
)
async def upload_batch(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(..., description="CSV file containing station readings."),
    processor: ProcessorService = Depends(get_processor),
) -> BatchUploadResponse:
    try:
        batch_id = processor.enqueue_file(background_tasks, file)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return BatchUploadResponse(batch_id=batch_id)


@router.get(
    "/batches/{batch_id}",
    response_model=BatchResult,
    summary="Fetch processing status, assessments and summary for a batch.",
)
async def get_batch_result(
    batch_id: str,
    processor: ProcessorService = Depends(get_processor),
) -> BatchResult:
    try:
        result = processor.fetch_result(batch_id)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    return result


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
