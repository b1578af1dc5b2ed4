"""User and profile schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def _validate_timezone(value: str | None) -> str | None:
    if value is None:
        return value
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {value}") from exc
    return value


class UserCreate(BaseModel):
    """Payload for creating a user."""

    email: EmailStr
    password: str = Field(min_length=8)
    username: str = Field(min_length=1, max_length=120)
    phone_number: str | None = None
    timezone: str | None = None

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str | None) -> str | None:
        return _validate_timezone(value)


class ProfileUpdate(BaseModel):
    """Mutable profile fields and notification preferences."""

    username: str | None = Field(default=None, min_length=1, max_length=120)
    phone_number: str | None = None
    timezone: str | None = None
    notification_feeding: bool | None = None
    notification_vaccination: bool | None = None
    notification_health_reports: bool | None = None

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str | None) -> str | None:
        return _validate_timezone(value)


class UserRead(BaseModel):
    """Serialized user profile."""

    id: uuid.UUID
    email: EmailStr
    username: str
    phone_number: str | None = None
    timezone: str
    notification_feeding: bool
    notification_vaccination: bool
    notification_health_reports: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
