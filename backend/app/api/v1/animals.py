"""Animal registry endpoints."""
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models.animal import Animal, Species
from app.models.user import User
from app.schemas.animal import AnimalCreate, AnimalRead, AnimalUpdate
from app.services import animal_service

router = APIRouter(prefix="/animals")


async def _load_animal(
    session: AsyncSession, *, user: User, animal_id: uuid.UUID
) -> Animal:
    animal = await animal_service.get_animal(
        session, user_id=user.id, animal_id=animal_id
    )
    if animal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Animal not found")
    return animal


@router.get("", response_model=list[AnimalRead], summary="List animals")
async def list_animals(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    species: Species | None = None,
) -> list[AnimalRead]:
    animals = await animal_service.list_animals(
        session, user_id=current_user.id, species=species
    )
    return [AnimalRead.model_validate(obj) for obj in animals]


@router.post(
    "",
    response_model=AnimalRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register animal",
)
async def create_animal(
    payload: AnimalCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> AnimalRead:
    animal = await animal_service.create_animal(session, payload, user_id=current_user.id)
    return AnimalRead.model_validate(animal)


@router.get("/{animal_id}", response_model=AnimalRead, summary="Get animal")
async def read_animal(
    animal_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> AnimalRead:
    animal = await _load_animal(session, user=current_user, animal_id=animal_id)
    return AnimalRead.model_validate(animal)


@router.patch("/{animal_id}", response_model=AnimalRead, summary="Update animal")
async def update_animal(
    animal_id: uuid.UUID,
    payload: AnimalUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> AnimalRead:
    animal = await _load_animal(session, user=current_user, animal_id=animal_id)
    updated = await animal_service.update_animal(session, animal=animal, payload=payload)
    return AnimalRead.model_validate(updated)


@router.delete(
    "/{animal_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete animal",
)
async def delete_animal(
    animal_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> None:
    animal = await _load_animal(session, user=current_user, animal_id=animal_id)
    await animal_service.delete_animal(session, animal=animal)
