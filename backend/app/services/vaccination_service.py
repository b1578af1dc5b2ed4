"""Business logic for animal vaccinations."""

from __future__ import annotations

import uuid
from datetime import date, timedelta
from typing import Sequence

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.models.vaccination import Vaccination, VaccinationStatus
from app.schemas.vaccination import VaccinationCreate, VaccinationUpdate
from app.services import animal_service


async def list_vaccinations(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    animal_id: uuid.UUID | None = None,
    status: VaccinationStatus | None = None,
) -> Sequence[Vaccination]:
    stmt: Select[tuple[Vaccination]] = (
        select(Vaccination)
        .where(Vaccination.user_id == user_id)
        .order_by(Vaccination.scheduled_date.asc())
    )
    if animal_id is not None:
        stmt = stmt.where(Vaccination.animal_id == animal_id)
    if status is not None:
        stmt = stmt.where(Vaccination.status == status)
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_vaccination(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    vaccination_id: uuid.UUID,
) -> Vaccination | None:
    vaccination = await session.get(Vaccination, vaccination_id)
    if vaccination is None or vaccination.user_id != user_id:
        return None
    return vaccination


async def create_vaccination(
    session: AsyncSession,
    payload: VaccinationCreate,
    *,
    user_id: uuid.UUID,
) -> Vaccination:
    await animal_service.ensure_animal(
        session, user_id=user_id, animal_id=payload.animal_id
    )
    vaccination = Vaccination(
        user_id=user_id,
        animal_id=payload.animal_id,
        vaccine_name=payload.vaccine_name,
        scheduled_date=payload.scheduled_date,
        status=VaccinationStatus.SCHEDULED,
        notes=payload.notes,
    )
    session.add(vaccination)
    await session.commit()
    await session.refresh(vaccination)
    return vaccination


async def update_vaccination(
    session: AsyncSession,
    *,
    vaccination: Vaccination,
    payload: VaccinationUpdate,
) -> Vaccination:
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field in {"vaccine_name", "scheduled_date", "status"}:
            continue
        setattr(vaccination, field, value)
    await session.commit()
    await session.refresh(vaccination)
    return vaccination


async def complete_vaccination(
    session: AsyncSession,
    *,
    vaccination: Vaccination,
    completed_date: date | None = None,
) -> Vaccination:
    """Mark a vaccination as administered, today unless a date is given."""
    vaccination.status = VaccinationStatus.COMPLETED
    vaccination.completed_date = completed_date or date.today()
    await session.commit()
    await session.refresh(vaccination)
    return vaccination


async def delete_vaccination(
    session: AsyncSession,
    *,
    vaccination: Vaccination,
) -> None:
    await session.delete(vaccination)
    await session.commit()


async def mark_overdue_vaccinations(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    reference_date: date | None = None,
) -> int:
    """Flag scheduled vaccinations whose date has passed; returns the count."""
    today = reference_date or date.today()
    stmt = (
        update(Vaccination)
        .where(
            Vaccination.user_id == user_id,
            Vaccination.status == VaccinationStatus.SCHEDULED,
            Vaccination.scheduled_date < today,
        )
        .values(status=VaccinationStatus.OVERDUE)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    await session.commit()
    return result.rowcount or 0


async def list_due_soon(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    reference_date: date | None = None,
    days: int | None = None,
) -> Sequence[Vaccination]:
    """Scheduled vaccinations falling between today and the due-soon horizon."""
    today = reference_date or date.today()
    horizon = today + timedelta(days=days or get_settings().vaccination_due_soon_days)
    stmt = (
        select(Vaccination)
        .where(
            Vaccination.user_id == user_id,
            Vaccination.status == VaccinationStatus.SCHEDULED,
            Vaccination.scheduled_date >= today,
            Vaccination.scheduled_date <= horizon,
        )
        .order_by(Vaccination.scheduled_date.asc())
    )
    result = await session.execute(stmt)
    return result.scalars().all()
