"""Feeding schedule, record and reminder schemas."""
from __future__ import annotations

import uuid
from datetime import datetime, time
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.models.feeding import FeedingFrequency
from app.services.recurrence import FeedingStatus


class FeedingScheduleBase(BaseModel):
    """Shared feeding schedule fields."""

    animal_id: uuid.UUID
    feed_type: str = Field(min_length=1, max_length=255)
    quantity: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    feeding_time: time
    frequency: FeedingFrequency
    days_of_week: list[str] | None = None
    is_active: bool = True
    notes: str | None = None


class FeedingScheduleCreate(FeedingScheduleBase):
    """Payload for creating a feeding schedule."""


class FeedingScheduleUpdate(BaseModel):
    """Mutable feeding schedule fields."""

    animal_id: uuid.UUID | None = None
    feed_type: str | None = Field(default=None, min_length=1, max_length=255)
    quantity: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    feeding_time: time | None = None
    frequency: FeedingFrequency | None = None
    days_of_week: list[str] | None = None
    is_active: bool | None = None
    notes: str | None = None


class FeedingScheduleRead(FeedingScheduleBase):
    """Serialized feeding schedule."""

    id: uuid.UUID
    user_id: uuid.UUID
    next_feeding_date: datetime | None = None
    next_feeding_authoritative: bool = True
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FeedingStatusEntry(BaseModel):
    """Schedule paired with its due state."""

    schedule: FeedingScheduleRead
    status: FeedingStatus
    advisory: bool = False


class FeedingStatusResponse(BaseModel):
    """Schedules that are due soon or already overdue."""

    upcoming: list[FeedingStatusEntry] = Field(default_factory=list)
    overdue: list[FeedingStatusEntry] = Field(default_factory=list)


class FeedingRecordCreate(BaseModel):
    """Payload for recording a feeding."""

    animal_id: uuid.UUID
    schedule_id: uuid.UUID | None = None
    feed_type: str = Field(min_length=1, max_length=255)
    quantity: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    fed_at: datetime | None = None
    notes: str | None = None


class FeedingRecordRead(BaseModel):
    """Serialized feeding record."""

    id: uuid.UUID
    user_id: uuid.UUID
    animal_id: uuid.UUID
    schedule_id: uuid.UUID | None = None
    feed_type: str
    quantity: Decimal
    fed_at: datetime
    notes: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FeedingReminderRead(BaseModel):
    """Pending reminder handed to the notification channel."""

    id: uuid.UUID
    schedule_id: uuid.UUID
    title: str
    body: str
    fire_at: datetime
    dedupe_tag: str

    model_config = ConfigDict(from_attributes=True)
