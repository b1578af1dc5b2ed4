"""Health endpoint smoke tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.config import get_settings
from app.main import app


async def _get_health() -> dict:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/health")
    assert response.status_code == 200
    return response.json()


@pytest.mark.asyncio
async def test_healthcheck_returns_ok(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FEEDING_CALC_URL", raising=False)
    get_settings.cache_clear()
    payload = await _get_health()
    assert payload["status"] == "ok"
    assert payload["service"] == "Livestock Feeding API"
    assert payload["feeding_calculator"] == "local"


@pytest.mark.asyncio
async def test_healthcheck_reports_remote_calculator(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("FEEDING_CALC_URL", "https://calc.example.com")
    get_settings.cache_clear()
    try:
        payload = await _get_health()
    finally:
        get_settings.cache_clear()
    assert payload["feeding_calculator"] == "remote"
