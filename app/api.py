"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status

from app.schemas import (
    AnalysisAccepted,
    AnalysisStateResponse,
    SensorChannel,
    SensorReadingPoint,
    SensorSnapshotResponse,
    WasteEntry,
    WasteEntryCreate,
    WasteEntryCreated,
    WasteSummaryResponse,
)
from models.records import SensorSnapshot, WasteLogEntry
from services.analysis import AnalysisState
from services.controller import CompostController, build_default_controller
from services.errors import ValidationError

router = APIRouter()


def get_controller() -> CompostController:
    return build_default_controller()


def _reading_point(snapshot: SensorSnapshot) -> SensorReadingPoint:
    return SensorReadingPoint(
        temperature=snapshot.temperature,
        humidity=snapshot.humidity,
        ph_level=snapshot.ph_level,
        methane=snapshot.methane,
        captured_at=snapshot.captured_at,
    )


def _entry(entry: WasteLogEntry) -> WasteEntry:
    return WasteEntry(
        id=entry.id,
        category=entry.category,
        weight_kg=entry.weight_kg,
        logged_at=entry.logged_at,
        notes=entry.notes,
    )


def _analysis(state: AnalysisState) -> AnalysisStateResponse:
    return AnalysisStateResponse(
        result=state.result,
        in_progress=state.in_progress,
        generation=state.generation,
        updated_at=state.updated_at,
        used_fallback=state.used_fallback,
    )


@router.get(
    "/sensors",
    response_model=SensorSnapshotResponse,
    summary="Current sensor snapshot with comfort ranges.",
)
async def get_sensors(
    controller: CompostController = Depends(get_controller),
) -> SensorSnapshotResponse:
    snapshot = controller.current_snapshot()
    channels = [
        SensorChannel(
            name=reading.name,
            value=reading.value,
            unit=reading.unit,
            optimal_min=reading.optimal_min,
            optimal_max=reading.optimal_max,
            optimal=reading.optimal,
        )
        for reading in controller.channel_readings()
    ]
    point = _reading_point(snapshot)
    return SensorSnapshotResponse(**point.model_dump(), channels=channels)


@router.get(
    "/sensors/history",
    response_model=list[SensorReadingPoint],
    summary="Recent sensor snapshots, oldest first.",
)
async def get_sensor_history(
    controller: CompostController = Depends(get_controller),
) -> list[SensorReadingPoint]:
    return [_reading_point(snapshot) for snapshot in controller.snapshot_history()]


@router.get(
    "/waste-logs",
    response_model=list[WasteEntry],
    summary="Waste entries, newest first.",
)
async def list_waste_logs(
    controller: CompostController = Depends(get_controller),
) -> list[WasteEntry]:
    return [_entry(entry) for entry in controller.entries()]


@router.post(
    "/waste-logs",
    status_code=status.HTTP_201_CREATED,
    response_model=WasteEntryCreated,
    summary="Record an organic waste entry.",
)
async def create_waste_log(
    payload: WasteEntryCreate,
    controller: CompostController = Depends(get_controller),
) -> WasteEntryCreated:
    try:
        entry = controller.append_entry(payload.category, payload.weight_kg, notes=payload.notes)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return WasteEntryCreated(entry=_entry(entry), message="Waste entry recorded.")


@router.get(
    "/waste-logs/summary",
    response_model=WasteSummaryResponse,
    summary="Waste distribution by category.",
)
async def get_waste_summary(
    controller: CompostController = Depends(get_controller),
) -> WasteSummaryResponse:
    summary = controller.waste_summary()
    return WasteSummaryResponse(
        entry_count=summary.entry_count,
        total_weight_kg=summary.total_weight_kg,
        per_category_weight=dict(summary.per_category_weight),
        per_category_count=dict(summary.per_category_count),
        per_category_share={
            category: summary.share(category) for category in summary.per_category_weight
        },
    )


@router.get(
    "/analysis",
    response_model=AnalysisStateResponse,
    summary="Latest advisory result and in-progress flag.",
)
async def get_analysis(
    background_tasks: BackgroundTasks,
    controller: CompostController = Depends(get_controller),
) -> AnalysisStateResponse:
    """The first read with no result and nothing in flight schedules an analysis."""
    state = controller.analysis_state()
    if state.result is None and not state.in_progress:
        background_tasks.add_task(controller.ensure_analysis)
    return _analysis(state)


@router.post(
    "/analysis",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=AnalysisAccepted,
    summary="Request a fresh advisory analysis in the background.",
)
async def request_analysis(
    background_tasks: BackgroundTasks,
    climate_label: Optional[str] = Query(
        default=None,
        max_length=100,
        description="Outside weather description; defaults to the configured label.",
    ),
    controller: CompostController = Depends(get_controller),
) -> AnalysisAccepted:
    label = (climate_label or "").strip() or controller.climate_label
    background_tasks.add_task(controller.refresh_analysis, label)
    return AnalysisAccepted(detail="Analysis scheduled.", climate_label=label)


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
