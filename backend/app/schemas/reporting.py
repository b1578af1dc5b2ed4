"""Reporting schemas."""
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class FeedingReportEntry(BaseModel):
    """Feeding totals for one feed type."""

    feed_type: str
    total_quantity: Decimal
    feeding_count: int
    animals_fed: int


class WeightPoint(BaseModel):
    weight: Decimal
    date: datetime


class GrowthEntry(BaseModel):
    """Weight series and growth figures for one animal."""

    animal_id: uuid.UUID
    animal_name: str
    weights: list[WeightPoint]
    weight_gain: Decimal
    growth_rate: float


class HealthSummary(BaseModel):
    total_animals: int
    healthy_animals: int
    animals_needing_attention: int
    completed_vaccinations: int
    pending_vaccinations: int


class WeightRecordCreate(BaseModel):
    animal_id: uuid.UUID
    weight: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    recorded_at: datetime | None = None
    notes: str | None = None


class WeightRecordRead(BaseModel):
    id: uuid.UUID
    animal_id: uuid.UUID
    weight: Decimal
    recorded_at: datetime
    notes: str | None = None

    model_config = ConfigDict(from_attributes=True)
