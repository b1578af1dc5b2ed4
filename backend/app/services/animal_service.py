"""Animal registry services."""

from __future__ import annotations

import uuid

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.animal import Animal, Species
from app.schemas.animal import AnimalCreate, AnimalUpdate


async def list_animals(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    species: Species | None = None,
) -> list[Animal]:
    stmt: Select[tuple[Animal]] = (
        select(Animal)
        .where(Animal.user_id == user_id)
        .order_by(Animal.created_at.desc())
    )
    if species is not None:
        stmt = stmt.where(Animal.species == species)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_animal(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    animal_id: uuid.UUID,
) -> Animal | None:
    animal = await session.get(Animal, animal_id)
    if animal is None or animal.user_id != user_id:
        return None
    return animal


async def ensure_animal(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    animal_id: uuid.UUID,
) -> Animal:
    """Return the animal or raise ValueError when it is missing or foreign."""
    animal = await get_animal(session, user_id=user_id, animal_id=animal_id)
    if animal is None:
        raise ValueError("Animal not found")
    return animal


async def create_animal(
    session: AsyncSession,
    payload: AnimalCreate,
    *,
    user_id: uuid.UUID,
) -> Animal:
    animal = Animal(user_id=user_id, **payload.model_dump())
    session.add(animal)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise
    await session.refresh(animal)
    return animal


_REQUIRED_FIELDS = {"name", "species", "health_status"}


async def update_animal(
    session: AsyncSession,
    *,
    animal: Animal,
    payload: AnimalUpdate,
) -> Animal:
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(animal, field, value)
    await session.commit()
    await session.refresh(animal)
    return animal


async def delete_animal(session: AsyncSession, *, animal: Animal) -> None:
    """Delete an animal together with its schedules, records and history."""
    await session.delete(animal)
    await session.commit()
