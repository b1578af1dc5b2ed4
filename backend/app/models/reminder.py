"""Scheduled reminder outbox."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.types import UTCDateTime
from app.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing only
    from app.models import FeedingSchedule


class FeedingReminder(TimestampMixin, Base):
    """A pending feeding reminder, one per schedule and user."""

    __tablename__ = "feeding_reminders"
    __table_args__ = (
        UniqueConstraint("user_id", "dedupe_tag", name="uq_feeding_reminder_tag"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    schedule_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("feeding_schedules.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    fire_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    dedupe_tag: Mapped[str] = mapped_column(String(120), nullable=False)

    schedule: Mapped["FeedingSchedule"] = relationship(
        "FeedingSchedule", back_populates="reminders"
    )
