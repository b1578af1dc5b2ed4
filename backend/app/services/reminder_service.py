"""Feeding reminder outbox.

Reminders are rows handed to the notification channel. Each schedule owns at
most one pending reminder, keyed by its dedupe tag, so rescheduling replaces
the previous row instead of adding another.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from decimal import Decimal

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import get_settings
from app.db.session import commit_or_raise
from app.db.types import coerce_utc
from app.models.feeding import FeedingSchedule
from app.models.reminder import FeedingReminder
from app.models.user import User

logger = logging.getLogger(__name__)

REMINDER_TITLE = "Feeding Reminder"


@dataclass(frozen=True, slots=True)
class ReminderPlan:
    """Reminder content and fire time for one schedule."""

    schedule_id: uuid.UUID
    title: str
    body: str
    fire_at: datetime
    dedupe_tag: str


def dedupe_tag_for(schedule_id: uuid.UUID) -> str:
    return f"feeding-{schedule_id}"


def _format_quantity(quantity: Decimal) -> str:
    return format(Decimal(quantity).normalize(), "f")


def build_feeding_reminder(
    schedule: FeedingSchedule,
    *,
    animal_name: str,
    now: datetime,
    lead: timedelta | None = None,
) -> ReminderPlan | None:
    """Plan a reminder ``lead`` before the next feeding.

    Returns ``None`` when the schedule is inactive, has no next feeding date,
    or only carries a fallback placeholder. A fire time already in the past
    is moved to ``now``.
    """
    if not schedule.is_active or schedule.next_feeding_date is None:
        return None
    if not schedule.next_feeding_authoritative:
        return None
    if lead is None:
        lead = timedelta(minutes=get_settings().feeding_reminder_lead_minutes)

    now = coerce_utc(now)
    fire_at = max(coerce_utc(schedule.next_feeding_date) - lead, now)
    body = (
        f"Time to feed {animal_name} with "
        f"{_format_quantity(schedule.quantity)}kg of {schedule.feed_type}"
    )
    return ReminderPlan(
        schedule_id=schedule.id,
        title=REMINDER_TITLE,
        body=body,
        fire_at=fire_at,
        dedupe_tag=dedupe_tag_for(schedule.id),
    )


async def schedule_reminder(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    plan: ReminderPlan,
) -> FeedingReminder:
    """Insert or replace the reminder carrying ``plan.dedupe_tag``."""
    stmt = select(FeedingReminder).where(
        FeedingReminder.user_id == user_id,
        FeedingReminder.dedupe_tag == plan.dedupe_tag,
    )
    reminder = (await session.execute(stmt)).scalar_one_or_none()
    if reminder is None:
        reminder = FeedingReminder(user_id=user_id, dedupe_tag=plan.dedupe_tag)
        session.add(reminder)
    reminder.schedule_id = plan.schedule_id
    reminder.title = plan.title
    reminder.body = plan.body
    reminder.fire_at = plan.fire_at
    return reminder


async def refresh_schedule_reminder(
    session: AsyncSession,
    *,
    schedule: FeedingSchedule,
    user: User,
    animal_name: str,
    now: datetime | None = None,
) -> ReminderPlan | None:
    """Replace or drop one schedule's pending reminder after it changed.

    The caller commits, so the reminder is written in the same transaction
    as the schedule.
    """
    now = coerce_utc(now) if now else datetime.now(UTC)
    plan = None
    if user.notification_feeding:
        plan = build_feeding_reminder(schedule, animal_name=animal_name, now=now)
    # Pending schedule changes are flushed by the caller's commit.
    with session.no_autoflush:
        if plan is None:
            await session.execute(
                delete(FeedingReminder).where(
                    FeedingReminder.user_id == user.id,
                    FeedingReminder.dedupe_tag == dedupe_tag_for(schedule.id),
                )
            )
            return None
        await schedule_reminder(session, user_id=user.id, plan=plan)
    return plan


async def sync_feeding_reminders(
    session: AsyncSession,
    *,
    user: User,
    now: datetime | None = None,
) -> list[FeedingReminder]:
    """Bring the user's reminder outbox in line with their schedules."""
    now = coerce_utc(now) if now else datetime.now(UTC)

    if not user.notification_feeding:
        await session.execute(
            delete(FeedingReminder).where(FeedingReminder.user_id == user.id)
        )
        await commit_or_raise(session, action="clear feeding reminders")
        logger.debug("Feeding notifications disabled for user %s", user.id)
        return []

    stmt = (
        select(FeedingSchedule)
        .options(selectinload(FeedingSchedule.animal))
        .where(FeedingSchedule.user_id == user.id)
    )
    schedules = (await session.execute(stmt)).scalars().all()

    kept_tags: set[str] = set()
    for schedule in schedules:
        plan = build_feeding_reminder(
            schedule, animal_name=schedule.animal.name, now=now
        )
        if plan is None:
            continue
        await schedule_reminder(session, user_id=user.id, plan=plan)
        kept_tags.add(plan.dedupe_tag)

    stale = delete(FeedingReminder).where(FeedingReminder.user_id == user.id)
    if kept_tags:
        stale = stale.where(FeedingReminder.dedupe_tag.not_in(kept_tags))
    await session.execute(stale)
    await commit_or_raise(session, action="sync feeding reminders")

    logger.info("Synced %d feeding reminders for user %s", len(kept_tags), user.id)
    return await list_pending_reminders(session, user_id=user.id)


async def list_pending_reminders(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
) -> list[FeedingReminder]:
    stmt = (
        select(FeedingReminder)
        .where(FeedingReminder.user_id == user_id)
        .order_by(FeedingReminder.fire_at.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
