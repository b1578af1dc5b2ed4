"""Vaccination schemas."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.vaccination import VaccinationStatus


class VaccinationCreate(BaseModel):
    animal_id: uuid.UUID
    vaccine_name: str = Field(min_length=1, max_length=255)
    scheduled_date: date
    notes: str | None = None


class VaccinationUpdate(BaseModel):
    vaccine_name: str | None = Field(default=None, min_length=1, max_length=255)
    scheduled_date: date | None = None
    completed_date: date | None = None
    status: VaccinationStatus | None = None
    notes: str | None = None


class VaccinationComplete(BaseModel):
    completed_date: date | None = None


class VaccinationRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    animal_id: uuid.UUID
    vaccine_name: str
    scheduled_date: date
    completed_date: date | None = None
    status: VaccinationStatus
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OverdueUpdateResponse(BaseModel):
    updated: int
