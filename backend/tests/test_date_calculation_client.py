"""Remote next-feeding-date client tests."""

from __future__ import annotations

import json
from datetime import UTC, datetime, time

import httpx
import pytest

from app.integrations.date_calculation_client import (
    RPC_PATH,
    ComputationUnavailable,
    DateCalculationClient,
)
from app.models.feeding import FeedingFrequency

pytestmark = pytest.mark.asyncio


def _client(handler) -> DateCalculationClient:
    return DateCalculationClient(
        "https://calc.example.com/",
        api_key="anon-key",
        transport=httpx.MockTransport(handler),
    )


async def test_posts_recurrence_and_parses_instant() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["apikey"] = request.headers.get("apikey")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json="2024-06-05T09:00:00Z")

    client = _client(handler)
    result = await client.calculate_next_feeding_date(
        FeedingFrequency.WEEKLY, time(9, 0), ["wednesday", "friday"]
    )

    assert result == datetime(2024, 6, 5, 9, 0, tzinfo=UTC)
    assert seen["path"] == RPC_PATH
    assert seen["apikey"] == "anon-key"
    assert seen["body"] == {
        "p_frequency": "weekly",
        "p_feeding_time": "09:00",
        "p_days_of_week": ["wednesday", "friday"],
    }


async def test_accepts_object_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"next_feeding_date": "2024-06-02T07:00:00+00:00"}
        )

    result = await _client(handler).calculate_next_feeding_date(
        FeedingFrequency.DAILY, time(7, 0), None
    )
    assert result == datetime(2024, 6, 2, 7, 0, tzinfo=UTC)


async def test_server_error_is_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"message": "boom"})

    with pytest.raises(ComputationUnavailable):
        await _client(handler).calculate_next_feeding_date(
            FeedingFrequency.DAILY, time(7, 0), None
        )


async def test_transport_error_is_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ComputationUnavailable):
        await _client(handler).calculate_next_feeding_date(
            FeedingFrequency.DAILY, time(7, 0), None
        )


async def test_unparsable_body_is_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"result": "next tuesday"})

    with pytest.raises(ComputationUnavailable):
        await _client(handler).calculate_next_feeding_date(
            FeedingFrequency.DAILY, time(7, 0), None
        )
