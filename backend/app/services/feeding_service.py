"""Feeding schedule services.

``next_feeding_date`` is recomputed at exactly three points: schedule
creation, an update that changes the recurrence (frequency, feeding time or
weekdays), and a feeding recorded against the schedule. Each of these, and
any other edit, also refreshes the schedule's pending reminder in the same
transaction.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from datetime import UTC, datetime, time, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.db.session import commit_or_raise
from app.db.types import coerce_utc
from app.integrations.date_calculation_client import (
    ComputationUnavailable,
    DateCalculationClient,
)
from app.models.feeding import FeedingFrequency, FeedingRecord, FeedingSchedule
from app.models.user import User
from app.schemas.feeding import (
    FeedingRecordCreate,
    FeedingScheduleCreate,
    FeedingScheduleRead,
    FeedingScheduleUpdate,
    FeedingStatusEntry,
    FeedingStatusResponse,
)
from app.services import animal_service, reminder_service
from app.services.recurrence import (
    FeedingStatus,
    OccurrenceResult,
    classify_feeding_status,
    compute_next_occurrence,
    fallback_occurrence,
    validate_recurrence,
)

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = {"feed_type", "quantity", "is_active", "animal_id"}


class ScheduleMismatch(ValueError):
    """Raised when a feeding names a schedule for a different animal."""


def _now() -> datetime:
    return datetime.now(UTC)


def _wall_clock(value: time) -> time:
    return time(value.hour, value.minute)


def resolve_timezone(user: User) -> ZoneInfo:
    """Return the user's timezone, falling back to the configured default."""
    for name in (user.timezone, get_settings().default_timezone):
        if not name:
            continue
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %s for user %s", name, user.id)
    return ZoneInfo("UTC")


async def calculate_next_feeding_date(
    frequency: FeedingFrequency | str,
    feeding_time: time,
    days_of_week: Iterable[str] | None,
    *,
    reference: datetime,
    tz: ZoneInfo,
    anchor: datetime | None = None,
    calculator: DateCalculationClient | None = None,
) -> OccurrenceResult:
    """Return the next occurrence tagged as authoritative or fallback.

    The configuration is validated locally first, so a ConfigurationError is
    raised before any remote call. With a remote calculator configured its
    answer is authoritative and an outage falls back to ``reference`` plus
    the configured fallback offset. Without one the local rules decide.
    """
    resolved, days = validate_recurrence(frequency, days_of_week)
    reference = coerce_utc(reference)

    if calculator is None:
        local = compute_next_occurrence(
            resolved,
            feeding_time,
            days,
            reference.astimezone(tz),
            anchor=anchor,
        )
        return OccurrenceResult(value=coerce_utc(local))

    try:
        remote = await calculator.calculate_next_feeding_date(
            resolved, feeding_time, days
        )
    except ComputationUnavailable as exc:
        logger.warning(
            "Next feeding date unavailable for %s schedule, using fallback: %s",
            resolved.value,
            exc,
        )
        offset = timedelta(hours=get_settings().feeding_fallback_hours)
        return fallback_occurrence(reference, offset)
    return OccurrenceResult(value=coerce_utc(remote))


async def list_feeding_schedules(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    animal_id: uuid.UUID | None = None,
) -> list[FeedingSchedule]:
    stmt: Select[tuple[FeedingSchedule]] = (
        select(FeedingSchedule)
        .where(FeedingSchedule.user_id == user_id)
        .order_by(FeedingSchedule.created_at.desc())
    )
    if animal_id is not None:
        stmt = stmt.where(FeedingSchedule.animal_id == animal_id)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_feeding_schedule(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    schedule_id: uuid.UUID,
) -> FeedingSchedule | None:
    schedule = await session.get(FeedingSchedule, schedule_id)
    if schedule is None or schedule.user_id != user_id:
        return None
    return schedule


async def create_feeding_schedule(
    session: AsyncSession,
    payload: FeedingScheduleCreate,
    *,
    user: User,
    calculator: DateCalculationClient | None = None,
    now: datetime | None = None,
) -> FeedingSchedule:
    frequency, days = validate_recurrence(payload.frequency, payload.days_of_week)
    animal = await animal_service.ensure_animal(
        session, user_id=user.id, animal_id=payload.animal_id
    )

    created_at = coerce_utc(now) if now else _now()
    feeding_time = _wall_clock(payload.feeding_time)
    result = await calculate_next_feeding_date(
        frequency,
        feeding_time,
        days,
        reference=created_at,
        tz=resolve_timezone(user),
        anchor=created_at,
        calculator=calculator,
    )
    schedule = FeedingSchedule(
        id=uuid.uuid4(),
        user_id=user.id,
        animal_id=payload.animal_id,
        feed_type=payload.feed_type,
        quantity=payload.quantity,
        feeding_time=feeding_time,
        frequency=frequency,
        days_of_week=days,
        is_active=payload.is_active,
        notes=payload.notes,
        next_feeding_date=result.value,
        next_feeding_authoritative=result.authoritative,
        created_at=created_at,
        updated_at=created_at,
    )
    session.add(schedule)
    await reminder_service.refresh_schedule_reminder(
        session, schedule=schedule, user=user, animal_name=animal.name, now=created_at
    )
    await commit_or_raise(session, action="create feeding schedule")
    await session.refresh(schedule)
    return schedule


async def update_feeding_schedule(
    session: AsyncSession,
    *,
    schedule: FeedingSchedule,
    user: User,
    payload: FeedingScheduleUpdate,
    calculator: DateCalculationClient | None = None,
    now: datetime | None = None,
) -> FeedingSchedule:
    updates = payload.model_dump(exclude_unset=True)

    frequency = updates.get("frequency") or schedule.frequency
    feeding_time = schedule.feeding_time
    if updates.get("feeding_time") is not None:
        feeding_time = _wall_clock(updates["feeding_time"])
    days_input = (
        updates["days_of_week"] if "days_of_week" in updates else schedule.days_of_week
    )
    frequency, days = validate_recurrence(frequency, days_input)

    if updates.get("animal_id") is not None:
        await animal_service.ensure_animal(
            session, user_id=user.id, animal_id=updates["animal_id"]
        )

    for field in ("animal_id", "feed_type", "quantity", "is_active", "notes"):
        if field not in updates:
            continue
        value = updates[field]
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(schedule, field, value)

    recurrence_changed = (
        frequency != schedule.frequency
        or feeding_time != schedule.feeding_time
        or days != schedule.days_of_week
    )
    if recurrence_changed:
        updated_at = coerce_utc(now) if now else _now()
        result = await calculate_next_feeding_date(
            frequency,
            feeding_time,
            days,
            reference=updated_at,
            tz=resolve_timezone(user),
            anchor=schedule.created_at,
            calculator=calculator,
        )
        schedule.frequency = frequency
        schedule.feeding_time = feeding_time
        schedule.days_of_week = days
        schedule.next_feeding_date = result.value
        schedule.next_feeding_authoritative = result.authoritative
        logger.debug(
            "Recomputed next feeding for schedule %s: %s", schedule.id, result.value
        )

    animal = await animal_service.ensure_animal(
        session, user_id=user.id, animal_id=schedule.animal_id
    )
    await reminder_service.refresh_schedule_reminder(
        session, schedule=schedule, user=user, animal_name=animal.name, now=now
    )
    await commit_or_raise(session, action="update feeding schedule")
    await session.refresh(schedule)
    return schedule


async def delete_feeding_schedule(
    session: AsyncSession,
    *,
    schedule: FeedingSchedule,
) -> None:
    """Delete a schedule; its feeding records are kept and detached."""
    await session.delete(schedule)
    await commit_or_raise(session, action="delete feeding schedule")


async def record_feeding(
    session: AsyncSession,
    payload: FeedingRecordCreate,
    *,
    user: User,
    calculator: DateCalculationClient | None = None,
    now: datetime | None = None,
) -> FeedingRecord:
    """Store a feeding and advance the linked schedule from ``fed_at``."""
    animal = await animal_service.ensure_animal(
        session, user_id=user.id, animal_id=payload.animal_id
    )
    schedule: FeedingSchedule | None = None
    if payload.schedule_id is not None:
        schedule = await get_feeding_schedule(
            session, user_id=user.id, schedule_id=payload.schedule_id
        )
        if schedule is None:
            raise ValueError("Feeding schedule not found")
        if schedule.animal_id != payload.animal_id:
            raise ScheduleMismatch("Feeding schedule belongs to a different animal")

    if payload.fed_at is not None:
        fed_at = coerce_utc(payload.fed_at)
    else:
        fed_at = coerce_utc(now) if now else _now()

    record = FeedingRecord(
        user_id=user.id,
        animal_id=payload.animal_id,
        schedule_id=payload.schedule_id,
        feed_type=payload.feed_type,
        quantity=payload.quantity,
        fed_at=fed_at,
        notes=payload.notes,
    )
    session.add(record)

    if schedule is not None:
        result = await calculate_next_feeding_date(
            schedule.frequency,
            schedule.feeding_time,
            schedule.days_of_week,
            reference=fed_at,
            tz=resolve_timezone(user),
            anchor=schedule.created_at,
            calculator=calculator,
        )
        schedule.next_feeding_date = result.value
        schedule.next_feeding_authoritative = result.authoritative
        await reminder_service.refresh_schedule_reminder(
            session, schedule=schedule, user=user, animal_name=animal.name, now=now
        )

    await commit_or_raise(session, action="record feeding")
    await session.refresh(record)
    return record


async def list_feeding_records(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    animal_id: uuid.UUID | None = None,
    limit: int | None = None,
) -> list[FeedingRecord]:
    """Return the most recent feeding records, newest first."""
    stmt: Select[tuple[FeedingRecord]] = (
        select(FeedingRecord)
        .where(FeedingRecord.user_id == user_id)
        .order_by(FeedingRecord.fed_at.desc())
        .limit(limit or get_settings().feeding_records_limit)
    )
    if animal_id is not None:
        stmt = stmt.where(FeedingRecord.animal_id == animal_id)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_feeding_status(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    now: datetime | None = None,
    window: timedelta | None = None,
) -> FeedingStatusResponse:
    """Group active schedules into upcoming and overdue, soonest first."""
    now = coerce_utc(now) if now else _now()
    if window is None:
        window = timedelta(minutes=get_settings().feeding_upcoming_window_minutes)

    stmt = (
        select(FeedingSchedule)
        .where(
            FeedingSchedule.user_id == user_id,
            FeedingSchedule.is_active.is_(True),
            FeedingSchedule.next_feeding_date.is_not(None),
        )
        .order_by(FeedingSchedule.next_feeding_date.asc())
    )
    result = await session.execute(stmt)

    response = FeedingStatusResponse()
    for schedule in result.scalars().all():
        status = classify_feeding_status(schedule, now, window=window)
        if status is FeedingStatus.NONE:
            continue
        entry = FeedingStatusEntry(
            schedule=FeedingScheduleRead.model_validate(schedule),
            status=status,
            advisory=not schedule.next_feeding_authoritative,
        )
        if status is FeedingStatus.OVERDUE:
            response.overdue.append(entry)
        else:
            response.upcoming.append(entry)
    return response
