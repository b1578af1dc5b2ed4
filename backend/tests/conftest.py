"""Test fixtures for the livestock feeding backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from app.api import deps
from app.core.config import get_settings
from app.core.security import get_password_hash
from app.db.base import Base
from app.db.session import dispose_engine, get_sessionmaker
from app.main import app
from app.models import Animal, Species, User


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    os.environ.pop("FEEDING_CALC_URL", None)
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    app.dependency_overrides.clear()
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def app_context(
    reset_database: AsyncIterator[None], db_url: str
) -> AsyncIterator[dict[str, object]]:
    """Yield an async client, a seeded farmer and one animal."""
    sessionmaker = get_sessionmaker(db_url)
    password = "Passw0rd!"

    async with sessionmaker() as session:
        farmer = User(
            email="farmer@example.com",
            hashed_password=get_password_hash(password),
            username="farmer",
            timezone="UTC",
        )
        session.add(farmer)
        await session.flush()

        animal = Animal(user_id=farmer.id, name="Bessie", species=Species.CATTLE)
        session.add(animal)
        await session.commit()

        context: dict[str, object] = {
            "user_id": farmer.id,
            "email": farmer.email,
            "password": password,
            "animal_id": animal.id,
        }

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        context["client"] = client
        context["headers"] = await authenticate(client, farmer.email, password)
        yield context


@pytest.fixture()
def override_calculator():
    """Route next-date calculation through a stub client for one test."""

    def _install(calculator) -> None:
        app.dependency_overrides[deps.get_date_calculator] = lambda: calculator

    return _install


async def authenticate(client: AsyncClient, email: str, password: str) -> dict[str, str]:
    response = await client.post(
        "/api/v1/auth/token",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
