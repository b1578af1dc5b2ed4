"""Feeding schedule and feeding record models."""
from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime, time
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Enum,
    ForeignKey,
    Numeric,
    String,
    Time,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.types import UTCDateTime
from app.models.mixins import TimestampMixin

if TYPE_CHECKING:
    from app.models import Animal, FeedingReminder, User


class FeedingFrequency(str, enum.Enum):
    """Recurrence rules supported by feeding schedules."""

    DAILY = "daily"
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"


class FeedingSchedule(TimestampMixin, Base):
    """Recurring feeding commitment for one animal."""

    __tablename__ = "feeding_schedules"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_feeding_schedule_quantity"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, unique=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    animal_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("animals.id", ondelete="CASCADE"), nullable=False
    )
    feed_type: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    feeding_time: Mapped[time] = mapped_column(Time(), nullable=False)
    frequency: Mapped[FeedingFrequency] = mapped_column(
        Enum(FeedingFrequency), nullable=False
    )
    days_of_week: Mapped[list[str] | None] = mapped_column(JSON)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    next_feeding_date: Mapped[datetime | None] = mapped_column(UTCDateTime())
    next_feeding_authoritative: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    notes: Mapped[str | None] = mapped_column(String(1024))

    user: Mapped["User"] = relationship("User")
    animal: Mapped["Animal"] = relationship("Animal", back_populates="feeding_schedules")
    records: Mapped[list["FeedingRecord"]] = relationship(
        "FeedingRecord", back_populates="schedule"
    )
    reminders: Mapped[list["FeedingReminder"]] = relationship(
        "FeedingReminder", back_populates="schedule", cascade="all, delete-orphan"
    )


class FeedingRecord(Base):
    """Immutable fact that an animal was fed."""

    __tablename__ = "feeding_records"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_feeding_record_quantity"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, unique=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    animal_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("animals.id", ondelete="CASCADE"), nullable=False
    )
    schedule_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("feeding_schedules.id", ondelete="SET NULL")
    )
    feed_type: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    fed_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=lambda: datetime.now(UTC), nullable=False
    )
    notes: Mapped[str | None] = mapped_column(String(1024))
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=lambda: datetime.now(UTC), nullable=False
    )

    animal: Mapped["Animal"] = relationship("Animal", back_populates="feeding_records")
    schedule: Mapped["FeedingSchedule | None"] = relationship(
        "FeedingSchedule", back_populates="records"
    )
