"""Feeding schedule and record API tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.integrations.date_calculation_client import DateCalculationClient

pytestmark = pytest.mark.asyncio


def _parse(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _schedule_payload(animal_id: Any, **overrides: Any) -> dict[str, Any]:
    payload = {
        "animal_id": str(animal_id),
        "feed_type": "Hay",
        "quantity": "2.50",
        "feeding_time": "07:00",
        "frequency": "daily",
    }
    payload.update(overrides)
    return payload


def _calculator(handler) -> DateCalculationClient:
    return DateCalculationClient(
        "https://calc.example.com", transport=httpx.MockTransport(handler)
    )


async def _create_schedule(ctx: dict[str, Any], **overrides: Any) -> dict[str, Any]:
    client = ctx["client"]
    response = await client.post(
        "/api/v1/feeding-schedules",
        json=_schedule_payload(ctx["animal_id"], **overrides),
        headers=ctx["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_daily_schedule_computes_next_feeding(app_context) -> None:
    before = datetime.now(UTC)
    schedule = await _create_schedule(app_context)

    next_at = _parse(schedule["next_feeding_date"])
    assert schedule["next_feeding_authoritative"] is True
    assert before - timedelta(minutes=1) <= next_at <= before + timedelta(days=1)
    assert (next_at.hour, next_at.minute) == (7, 0)
    assert schedule["days_of_week"] is None


async def test_weekly_schedule_requires_days(app_context) -> None:
    client = app_context["client"]
    response = await client.post(
        "/api/v1/feeding-schedules",
        json=_schedule_payload(
            app_context["animal_id"], frequency="weekly", days_of_week=[]
        ),
        headers=app_context["headers"],
    )
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "days_of_week"

    listing = await client.get(
        "/api/v1/feeding-schedules", headers=app_context["headers"]
    )
    assert listing.json() == []


async def test_weekly_schedule_lands_on_selected_day(app_context) -> None:
    schedule = await _create_schedule(
        app_context, frequency="weekly", days_of_week=["Friday", "wednesday"]
    )
    assert schedule["days_of_week"] == ["wednesday", "friday"]
    next_at = _parse(schedule["next_feeding_date"])
    assert next_at.strftime("%A").lower() in {"wednesday", "friday"}


async def test_unknown_animal_is_not_found(app_context) -> None:
    client = app_context["client"]
    response = await client.post(
        "/api/v1/feeding-schedules",
        json=_schedule_payload("00000000-0000-0000-0000-000000000000"),
        headers=app_context["headers"],
    )
    assert response.status_code == 404


async def test_editing_notes_keeps_next_feeding_date(app_context) -> None:
    client = app_context["client"]
    headers = app_context["headers"]
    schedule = await _create_schedule(app_context)

    response = await client.patch(
        f"/api/v1/feeding-schedules/{schedule['id']}",
        json={"notes": "Check the water trough", "is_active": False},
        headers=headers,
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["notes"] == "Check the water trough"
    assert updated["is_active"] is False
    assert updated["next_feeding_date"] == schedule["next_feeding_date"]


async def test_editing_feeding_time_recomputes(app_context) -> None:
    client = app_context["client"]
    headers = app_context["headers"]
    schedule = await _create_schedule(app_context)

    response = await client.patch(
        f"/api/v1/feeding-schedules/{schedule['id']}",
        json={"feeding_time": "18:30"},
        headers=headers,
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["next_feeding_date"] != schedule["next_feeding_date"]
    next_at = _parse(updated["next_feeding_date"])
    assert (next_at.hour, next_at.minute) == (18, 30)


async def test_switching_away_from_weekly_clears_days(app_context) -> None:
    client = app_context["client"]
    schedule = await _create_schedule(
        app_context, frequency="weekly", days_of_week=["monday"]
    )
    response = await client.patch(
        f"/api/v1/feeding-schedules/{schedule['id']}",
        json={"frequency": "monthly"},
        headers=app_context["headers"],
    )
    assert response.status_code == 200
    assert response.json()["frequency"] == "monthly"
    assert response.json()["days_of_week"] is None


async def test_update_to_weekly_without_days_is_rejected(app_context) -> None:
    client = app_context["client"]
    schedule = await _create_schedule(app_context)
    response = await client.patch(
        f"/api/v1/feeding-schedules/{schedule['id']}",
        json={"frequency": "weekly"},
        headers=app_context["headers"],
    )
    assert response.status_code == 422

    fetched = await client.get(
        f"/api/v1/feeding-schedules/{schedule['id']}", headers=app_context["headers"]
    )
    assert fetched.json()["frequency"] == "daily"
    assert fetched.json()["next_feeding_date"] == schedule["next_feeding_date"]


async def test_recording_feeding_recomputes_from_fed_at(app_context) -> None:
    client = app_context["client"]
    headers = app_context["headers"]
    schedule = await _create_schedule(app_context)

    response = await client.post(
        "/api/v1/feeding-records",
        json={
            "animal_id": str(app_context["animal_id"]),
            "schedule_id": schedule["id"],
            "feed_type": "Hay",
            "quantity": "2.50",
            "fed_at": "2024-06-01T08:00:00Z",
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    assert response.json()["schedule_id"] == schedule["id"]

    fetched = await client.get(
        f"/api/v1/feeding-schedules/{schedule['id']}", headers=headers
    )
    assert _parse(fetched.json()["next_feeding_date"]) == datetime(
        2024, 6, 2, 7, 0, tzinfo=UTC
    )


async def test_record_for_other_animal_schedule_is_rejected(app_context) -> None:
    client = app_context["client"]
    headers = app_context["headers"]
    schedule = await _create_schedule(app_context)
    animal = await client.post(
        "/api/v1/animals",
        json={"name": "Billy", "species": "goats"},
        headers=headers,
    )
    response = await client.post(
        "/api/v1/feeding-records",
        json={
            "animal_id": animal.json()["id"],
            "schedule_id": schedule["id"],
            "feed_type": "Hay",
            "quantity": "1",
        },
        headers=headers,
    )
    assert response.status_code == 400


async def test_records_listed_newest_first(app_context) -> None:
    client = app_context["client"]
    headers = app_context["headers"]
    for fed_at in ("2024-06-01T08:00:00Z", "2024-06-03T08:00:00Z", "2024-06-02T08:00:00Z"):
        response = await client.post(
            "/api/v1/feeding-records",
            json={
                "animal_id": str(app_context["animal_id"]),
                "feed_type": "Grain",
                "quantity": "1.25",
                "fed_at": fed_at,
            },
            headers=headers,
        )
        assert response.status_code == 201

    listing = await client.get("/api/v1/feeding-records", headers=headers)
    days = [_parse(item["fed_at"]).day for item in listing.json()]
    assert days == [3, 2, 1]


async def test_deleting_schedule_keeps_records(app_context) -> None:
    client = app_context["client"]
    headers = app_context["headers"]
    schedule = await _create_schedule(app_context)
    await client.post(
        "/api/v1/feeding-records",
        json={
            "animal_id": str(app_context["animal_id"]),
            "schedule_id": schedule["id"],
            "feed_type": "Hay",
            "quantity": "2.50",
        },
        headers=headers,
    )

    response = await client.delete(
        f"/api/v1/feeding-schedules/{schedule['id']}", headers=headers
    )
    assert response.status_code == 204

    records = (await client.get("/api/v1/feeding-records", headers=headers)).json()
    assert len(records) == 1
    assert records[0]["schedule_id"] is None


async def test_remote_calculation_is_authoritative(app_context, override_calculator) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json="2030-01-01T07:00:00Z")

    override_calculator(_calculator(handler))
    schedule = await _create_schedule(app_context)
    assert _parse(schedule["next_feeding_date"]) == datetime(2030, 1, 1, 7, 0, tzinfo=UTC)
    assert schedule["next_feeding_authoritative"] is True


async def test_remote_outage_falls_back_to_advisory_value(
    app_context, override_calculator
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    override_calculator(_calculator(handler))
    client = app_context["client"]
    headers = app_context["headers"]

    before = datetime.now(UTC)
    schedule = await _create_schedule(app_context)
    next_at = _parse(schedule["next_feeding_date"])
    assert schedule["next_feeding_authoritative"] is False
    assert before + timedelta(hours=24) <= next_at <= datetime.now(UTC) + timedelta(hours=24)

    fed_at = datetime.now(UTC) - timedelta(hours=23)
    response = await client.post(
        "/api/v1/feeding-records",
        json={
            "animal_id": str(app_context["animal_id"]),
            "schedule_id": schedule["id"],
            "feed_type": "Hay",
            "quantity": "2.50",
            "fed_at": fed_at.isoformat(),
        },
        headers=headers,
    )
    assert response.status_code == 201

    status_response = await client.get(
        "/api/v1/feeding-schedules/status", headers=headers
    )
    body = status_response.json()
    assert body["overdue"] == []
    assert len(body["upcoming"]) == 1
    assert body["upcoming"][0]["advisory"] is True
    assert body["upcoming"][0]["status"] == "upcoming"


async def test_status_lists_overdue_schedules(app_context) -> None:
    client = app_context["client"]
    headers = app_context["headers"]
    schedule = await _create_schedule(app_context)

    # A feeding far in the past leaves the next occurrence behind "now".
    await client.post(
        "/api/v1/feeding-records",
        json={
            "animal_id": str(app_context["animal_id"]),
            "schedule_id": schedule["id"],
            "feed_type": "Hay",
            "quantity": "2.50",
            "fed_at": "2024-06-01T08:00:00Z",
        },
        headers=headers,
    )

    body = (await client.get("/api/v1/feeding-schedules/status", headers=headers)).json()
    assert [entry["schedule"]["id"] for entry in body["overdue"]] == [schedule["id"]]
    assert body["overdue"][0]["advisory"] is False
    assert body["upcoming"] == []


async def test_schedules_are_scoped_to_owner(app_context) -> None:
    client = app_context["client"]
    schedule = await _create_schedule(app_context)

    register = await client.post(
        "/api/v1/auth/register",
        json={
            "email": "neighbour@example.com",
            "password": "An0therPass!",
            "username": "neighbour",
        },
    )
    assert register.status_code == 201
    other_headers = {
        "Authorization": f"Bearer {register.json()['token']['access_token']}"
    }

    response = await client.get(
        f"/api/v1/feeding-schedules/{schedule['id']}", headers=other_headers
    )
    assert response.status_code == 404
    listing = await client.get("/api/v1/feeding-schedules", headers=other_headers)
    assert listing.json() == []


async def test_failed_commit_returns_503_and_keeps_stored_value(
    app_context, monkeypatch: pytest.MonkeyPatch
) -> None:
    client = app_context["client"]
    headers = app_context["headers"]
    schedule = await _create_schedule(app_context)
    reminders_before = (await client.get("/api/v1/feeding-reminders", headers=headers)).json()

    async def _failing_commit(self: AsyncSession) -> None:
        raise OperationalError("COMMIT", None, Exception("database is locked"))

    monkeypatch.setattr(AsyncSession, "commit", _failing_commit)
    response = await client.patch(
        f"/api/v1/feeding-schedules/{schedule['id']}",
        json={"feeding_time": "18:30"},
        headers=headers,
    )
    monkeypatch.undo()

    assert response.status_code == 503
    assert response.json()["detail"] == "Failed to update feeding schedule"

    fetched = await client.get(
        f"/api/v1/feeding-schedules/{schedule['id']}", headers=headers
    )
    assert fetched.json()["next_feeding_date"] == schedule["next_feeding_date"]
    assert fetched.json()["feeding_time"] == schedule["feeding_time"]
    reminders_after = (await client.get("/api/v1/feeding-reminders", headers=headers)).json()
    assert reminders_after == reminders_before
