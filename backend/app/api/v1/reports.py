"""Reporting and analytics endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models.animal import Species
from app.models.user import User
from app.reports import csv_exporter
from app.schemas.reporting import (
    FeedingReportEntry,
    GrowthEntry,
    HealthSummary,
    WeightRecordCreate,
    WeightRecordRead,
)
from app.services import reporting_service

router = APIRouter(prefix="/reports")


def _csv_response(body: str, *, filename: str, rows: int) -> Response:
    return Response(
        content=body,
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Report-Rows": str(rows),
        },
    )


@router.get(
    "/feeding", response_model=list[FeedingReportEntry], summary="Feeding totals by feed type"
)
async def feeding_report(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    period: str = Query(default=reporting_service.DEFAULT_PERIOD),
    species: Species | None = Query(default=None),
) -> list[FeedingReportEntry]:
    entries = await reporting_service.feeding_report(
        session, user_id=current_user.id, period=period, species=species
    )
    return [FeedingReportEntry.model_validate(entry) for entry in entries]


@router.get("/feeding.csv", summary="Export feeding report as CSV")
async def export_feeding_report(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    period: str = Query(default=reporting_service.DEFAULT_PERIOD),
    species: Species | None = Query(default=None),
) -> Response:
    body, rows = await csv_exporter.export_feeding_report(
        session, user_id=current_user.id, period=period, species=species
    )
    return _csv_response(
        body, filename=csv_exporter.export_filename("feeding", period), rows=rows
    )


@router.get("/growth", response_model=list[GrowthEntry], summary="Growth report")
async def growth_report(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    period: str = Query(default=reporting_service.DEFAULT_PERIOD),
    species: Species | None = Query(default=None),
) -> list[GrowthEntry]:
    entries = await reporting_service.growth_report(
        session, user_id=current_user.id, period=period, species=species
    )
    return [GrowthEntry.model_validate(entry) for entry in entries]


@router.get("/growth.csv", summary="Export growth report as CSV")
async def export_growth_report(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    period: str = Query(default=reporting_service.DEFAULT_PERIOD),
    species: Species | None = Query(default=None),
) -> Response:
    body, rows = await csv_exporter.export_growth_report(
        session, user_id=current_user.id, period=period, species=species
    )
    return _csv_response(
        body, filename=csv_exporter.export_filename("growth", period), rows=rows
    )


@router.get("/health", response_model=HealthSummary, summary="Herd health summary")
async def health_summary(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> HealthSummary:
    summary = await reporting_service.health_summary(session, user_id=current_user.id)
    return HealthSummary.model_validate(summary)


@router.post(
    "/weights",
    response_model=WeightRecordRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record an animal weight",
)
async def add_weight_record(
    payload: WeightRecordCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> WeightRecordRead:
    try:
        record = await reporting_service.add_weight_record(
            session, payload, user_id=current_user.id
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return WeightRecordRead.model_validate(record)
