"""Authentication schemas."""
from __future__ import annotations

from pydantic import BaseModel

from app.schemas.user import UserRead


class Token(BaseModel):
    """Response body for access tokens."""

    access_token: str
    token_type: str = "bearer"


class RegistrationResponse(BaseModel):
    """Response after successful registration."""

    token: Token
    user: UserRead
