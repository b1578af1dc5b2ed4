"""Vaccination tracking model."""

from __future__ import annotations

import enum
import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing only
    from app.models import Animal


class VaccinationStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class Vaccination(TimestampMixin, Base):
    """A scheduled or administered vaccine for an animal."""

    __tablename__ = "vaccinations"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    animal_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("animals.id", ondelete="CASCADE"), nullable=False
    )
    vaccine_name: Mapped[str] = mapped_column(String(255), nullable=False)
    scheduled_date: Mapped[date] = mapped_column(Date(), nullable=False)
    completed_date: Mapped[date | None] = mapped_column(Date())
    status: Mapped[VaccinationStatus] = mapped_column(
        Enum(VaccinationStatus), default=VaccinationStatus.SCHEDULED, nullable=False
    )
    notes: Mapped[str | None] = mapped_column(String(1024))

    animal: Mapped["Animal"] = relationship("Animal", back_populates="vaccinations")
