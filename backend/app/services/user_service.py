"""User data access helpers."""
from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.security import get_password_hash
from app.models.user import User
from app.schemas.user import ProfileUpdate, UserCreate


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    """Return a user by email address."""
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user(session: AsyncSession, user_id: uuid.UUID) -> User | None:
    """Return a user by ID."""
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def create_user(session: AsyncSession, payload: UserCreate) -> User:
    """Persist a new user with hashed password and default preferences."""
    user = User(
        email=payload.email.lower(),
        hashed_password=get_password_hash(payload.password),
        username=payload.username,
        phone_number=payload.phone_number,
        timezone=payload.timezone or get_settings().default_timezone,
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise exc
    await session.refresh(user)
    return user


async def update_profile(
    session: AsyncSession, user: User, payload: ProfileUpdate
) -> User:
    """Update profile fields and notification preferences."""
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field != "phone_number":
            continue
        setattr(user, field, value)
    await session.commit()
    await session.refresh(user)
    return user
