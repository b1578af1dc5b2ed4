"""Pydantic schemas for the animal registry."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.models.animal import HealthStatus, Species


class AnimalBase(BaseModel):
    """Shared animal fields."""

    name: str = Field(min_length=1, max_length=120)
    species: Species
    breed: str | None = None
    age: int | None = Field(default=None, ge=0)
    weight: Decimal | None = Field(default=None, gt=0)
    health_status: HealthStatus = HealthStatus.HEALTHY
    photo_url: str | None = None
    notes: str | None = None


class AnimalCreate(AnimalBase):
    """Payload for registering an animal."""


class AnimalUpdate(BaseModel):
    """Mutable animal fields."""

    name: str | None = Field(default=None, min_length=1, max_length=120)
    species: Species | None = None
    breed: str | None = None
    age: int | None = Field(default=None, ge=0)
    weight: Decimal | None = Field(default=None, gt=0)
    health_status: HealthStatus | None = None
    photo_url: str | None = None
    notes: str | None = None


class AnimalRead(AnimalBase):
    """Serialized animal."""

    id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
