"""Versioned API router."""

from fastapi import APIRouter

from . import (
    animals,
    auth,
    feeding,
    health,
    reports,
    users,
    vaccinations,
)

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(animals.router, tags=["animals"])
router.include_router(feeding.router, tags=["feeding"])
router.include_router(vaccinations.router, tags=["vaccinations"])
router.include_router(reports.router, tags=["reports"])

__all__ = ["router"]
