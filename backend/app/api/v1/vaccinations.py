"""Vaccination tracking endpoints."""
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models.user import User
from app.models.vaccination import Vaccination, VaccinationStatus
from app.schemas.vaccination import (
    OverdueUpdateResponse,
    VaccinationComplete,
    VaccinationCreate,
    VaccinationRead,
    VaccinationUpdate,
)
from app.services import vaccination_service

router = APIRouter(prefix="/vaccinations")


async def _load_vaccination(
    session: AsyncSession, *, user: User, vaccination_id: uuid.UUID
) -> Vaccination:
    vaccination = await vaccination_service.get_vaccination(
        session, user_id=user.id, vaccination_id=vaccination_id
    )
    if vaccination is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Vaccination not found"
        )
    return vaccination


@router.get("", response_model=list[VaccinationRead], summary="List vaccinations")
async def list_vaccinations(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    animal_id: uuid.UUID | None = None,
    status_filter: VaccinationStatus | None = Query(default=None, alias="status"),
) -> list[VaccinationRead]:
    vaccinations = await vaccination_service.list_vaccinations(
        session,
        user_id=current_user.id,
        animal_id=animal_id,
        status=status_filter,
    )
    return [VaccinationRead.model_validate(obj) for obj in vaccinations]


@router.post(
    "",
    response_model=VaccinationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule vaccination",
)
async def create_vaccination(
    payload: VaccinationCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> VaccinationRead:
    try:
        vaccination = await vaccination_service.create_vaccination(
            session, payload, user_id=current_user.id
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return VaccinationRead.model_validate(vaccination)


@router.get(
    "/due-soon",
    response_model=list[VaccinationRead],
    summary="Vaccinations due within the coming week",
)
async def list_due_soon(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> list[VaccinationRead]:
    vaccinations = await vaccination_service.list_due_soon(
        session, user_id=current_user.id
    )
    return [VaccinationRead.model_validate(obj) for obj in vaccinations]


@router.post(
    "/mark-overdue",
    response_model=OverdueUpdateResponse,
    summary="Flag missed vaccinations as overdue",
)
async def mark_overdue(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> OverdueUpdateResponse:
    updated = await vaccination_service.mark_overdue_vaccinations(
        session, user_id=current_user.id
    )
    return OverdueUpdateResponse(updated=updated)


@router.patch(
    "/{vaccination_id}",
    response_model=VaccinationRead,
    summary="Update vaccination",
)
async def update_vaccination(
    vaccination_id: uuid.UUID,
    payload: VaccinationUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> VaccinationRead:
    vaccination = await _load_vaccination(
        session, user=current_user, vaccination_id=vaccination_id
    )
    updated = await vaccination_service.update_vaccination(
        session, vaccination=vaccination, payload=payload
    )
    return VaccinationRead.model_validate(updated)


@router.post(
    "/{vaccination_id}/complete",
    response_model=VaccinationRead,
    summary="Mark vaccination as administered",
)
async def complete_vaccination(
    vaccination_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    payload: VaccinationComplete | None = None,
) -> VaccinationRead:
    vaccination = await _load_vaccination(
        session, user=current_user, vaccination_id=vaccination_id
    )
    completed = await vaccination_service.complete_vaccination(
        session,
        vaccination=vaccination,
        completed_date=payload.completed_date if payload else None,
    )
    return VaccinationRead.model_validate(completed)


@router.delete(
    "/{vaccination_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete vaccination",
)
async def delete_vaccination(
    vaccination_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> None:
    vaccination = await _load_vaccination(
        session, user=current_user, vaccination_id=vaccination_id
    )
    await vaccination_service.delete_vaccination(session, vaccination=vaccination)
