"""Feeding schedule, record and reminder endpoints."""
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.integrations.date_calculation_client import DateCalculationClient
from app.models.feeding import FeedingSchedule
from app.models.user import User
from app.schemas.feeding import (
    FeedingRecordCreate,
    FeedingRecordRead,
    FeedingReminderRead,
    FeedingScheduleCreate,
    FeedingScheduleRead,
    FeedingScheduleUpdate,
    FeedingStatusResponse,
)
from app.services import feeding_service, reminder_service
from app.db.session import PersistenceFailure
from app.services.feeding_service import ScheduleMismatch
from app.services.recurrence import ConfigurationError

router = APIRouter()


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, ConfigurationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"field": exc.field, "message": str(exc)},
        )
    if isinstance(exc, PersistenceFailure):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    if isinstance(exc, ScheduleMismatch):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


async def _load_schedule(
    session: AsyncSession, *, user: User, schedule_id: uuid.UUID
) -> FeedingSchedule:
    schedule = await feeding_service.get_feeding_schedule(
        session, user_id=user.id, schedule_id=schedule_id
    )
    if schedule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Feeding schedule not found")
    return schedule


@router.get(
    "/feeding-schedules",
    response_model=list[FeedingScheduleRead],
    summary="List feeding schedules",
)
async def list_feeding_schedules(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    animal_id: uuid.UUID | None = None,
) -> list[FeedingScheduleRead]:
    schedules = await feeding_service.list_feeding_schedules(
        session, user_id=current_user.id, animal_id=animal_id
    )
    return [FeedingScheduleRead.model_validate(obj) for obj in schedules]


@router.post(
    "/feeding-schedules",
    response_model=FeedingScheduleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create feeding schedule",
)
async def create_feeding_schedule(
    payload: FeedingScheduleCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    calculator: Annotated[DateCalculationClient | None, Depends(deps.get_date_calculator)],
) -> FeedingScheduleRead:
    try:
        schedule = await feeding_service.create_feeding_schedule(
            session, payload, user=current_user, calculator=calculator
        )
    except (ValueError, PersistenceFailure) as exc:
        raise _http_error(exc) from exc
    return FeedingScheduleRead.model_validate(schedule)


@router.get(
    "/feeding-schedules/status",
    response_model=FeedingStatusResponse,
    summary="Upcoming and overdue feedings",
)
async def feeding_status(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> FeedingStatusResponse:
    return await feeding_service.list_feeding_status(session, user_id=current_user.id)


@router.get(
    "/feeding-schedules/{schedule_id}",
    response_model=FeedingScheduleRead,
    summary="Get feeding schedule",
)
async def read_feeding_schedule(
    schedule_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> FeedingScheduleRead:
    schedule = await _load_schedule(session, user=current_user, schedule_id=schedule_id)
    return FeedingScheduleRead.model_validate(schedule)


@router.patch(
    "/feeding-schedules/{schedule_id}",
    response_model=FeedingScheduleRead,
    summary="Update feeding schedule",
)
async def update_feeding_schedule(
    schedule_id: uuid.UUID,
    payload: FeedingScheduleUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    calculator: Annotated[DateCalculationClient | None, Depends(deps.get_date_calculator)],
) -> FeedingScheduleRead:
    schedule = await _load_schedule(session, user=current_user, schedule_id=schedule_id)
    try:
        updated = await feeding_service.update_feeding_schedule(
            session,
            schedule=schedule,
            user=current_user,
            payload=payload,
            calculator=calculator,
        )
    except (ValueError, PersistenceFailure) as exc:
        raise _http_error(exc) from exc
    return FeedingScheduleRead.model_validate(updated)


@router.delete(
    "/feeding-schedules/{schedule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete feeding schedule",
)
async def delete_feeding_schedule(
    schedule_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> None:
    schedule = await _load_schedule(session, user=current_user, schedule_id=schedule_id)
    try:
        await feeding_service.delete_feeding_schedule(session, schedule=schedule)
    except PersistenceFailure as exc:
        raise _http_error(exc) from exc


@router.get(
    "/feeding-records",
    response_model=list[FeedingRecordRead],
    summary="List recent feeding records",
)
async def list_feeding_records(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    animal_id: uuid.UUID | None = None,
    limit: int | None = None,
) -> list[FeedingRecordRead]:
    records = await feeding_service.list_feeding_records(
        session,
        user_id=current_user.id,
        animal_id=animal_id,
        limit=min(limit, 200) if limit else None,
    )
    return [FeedingRecordRead.model_validate(obj) for obj in records]


@router.post(
    "/feeding-records",
    response_model=FeedingRecordRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record a feeding",
)
async def record_feeding(
    payload: FeedingRecordCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    calculator: Annotated[DateCalculationClient | None, Depends(deps.get_date_calculator)],
) -> FeedingRecordRead:
    try:
        record = await feeding_service.record_feeding(
            session, payload, user=current_user, calculator=calculator
        )
    except (ValueError, PersistenceFailure) as exc:
        raise _http_error(exc) from exc
    return FeedingRecordRead.model_validate(record)


@router.post(
    "/feeding-reminders/sync",
    response_model=list[FeedingReminderRead],
    summary="Reschedule feeding reminders",
)
async def sync_feeding_reminders(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> list[FeedingReminderRead]:
    try:
        reminders = await reminder_service.sync_feeding_reminders(
            session, user=current_user
        )
    except PersistenceFailure as exc:
        raise _http_error(exc) from exc
    return [FeedingReminderRead.model_validate(obj) for obj in reminders]


@router.get(
    "/feeding-reminders",
    response_model=list[FeedingReminderRead],
    summary="List pending feeding reminders",
)
async def list_feeding_reminders(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> list[FeedingReminderRead]:
    reminders = await reminder_service.list_pending_reminders(
        session, user_id=current_user.id
    )
    return [FeedingReminderRead.model_validate(obj) for obj in reminders]
