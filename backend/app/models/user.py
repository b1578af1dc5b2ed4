"""User model holding identity and notification preferences."""
from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from app.models.animal import Animal


class User(TimestampMixin, Base):
    """Farm operator who owns animals, schedules and records."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    username: Mapped[str] = mapped_column(String(120), nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(32))
    timezone: Mapped[str] = mapped_column(String(64), default="UTC", nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    notification_feeding: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    notification_vaccination: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    notification_health_reports: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    animals: Mapped[list["Animal"]] = relationship(
        "Animal", back_populates="user", cascade="all, delete-orphan"
    )
