"""Animal registry model."""

from __future__ import annotations

import enum
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import TimestampMixin

if TYPE_CHECKING:
    from app.models import (
        FeedingRecord,
        FeedingSchedule,
        User,
        Vaccination,
        WeightRecord,
    )


class Species(str, enum.Enum):
    """Supported livestock categories."""

    CATTLE = "cattle"
    GOATS = "goats"
    CHICKENS = "chickens"
    PIGS = "pigs"


class HealthStatus(str, enum.Enum):
    """Current health condition of an animal."""

    HEALTHY = "healthy"
    SICK = "sick"
    INJURED = "injured"
    RECOVERING = "recovering"


class Animal(TimestampMixin, Base):
    """Represents a registered animal."""

    __tablename__ = "animals"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    species: Mapped[Species] = mapped_column(Enum(Species), nullable=False)
    breed: Mapped[str | None] = mapped_column(String(120))
    age: Mapped[int | None] = mapped_column(Integer)
    weight: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    health_status: Mapped[HealthStatus] = mapped_column(
        Enum(HealthStatus), default=HealthStatus.HEALTHY, nullable=False
    )
    photo_url: Mapped[str | None] = mapped_column(String(1024))
    notes: Mapped[str | None] = mapped_column(String(1024))

    user: Mapped["User"] = relationship("User", back_populates="animals")
    feeding_schedules: Mapped[list["FeedingSchedule"]] = relationship(
        "FeedingSchedule", back_populates="animal", cascade="all, delete-orphan"
    )
    feeding_records: Mapped[list["FeedingRecord"]] = relationship(
        "FeedingRecord", back_populates="animal", cascade="all, delete-orphan"
    )
    vaccinations: Mapped[list["Vaccination"]] = relationship(
        "Vaccination", back_populates="animal", cascade="all, delete-orphan"
    )
    weight_records: Mapped[list["WeightRecord"]] = relationship(
        "WeightRecord", back_populates="animal", cascade="all, delete-orphan"
    )
