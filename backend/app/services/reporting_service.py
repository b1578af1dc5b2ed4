"""Reporting and analytics services."""

from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.types import coerce_utc
from app.models.animal import Animal, HealthStatus, Species
from app.models.feeding import FeedingRecord
from app.models.vaccination import Vaccination, VaccinationStatus
from app.models.weight_record import WeightRecord
from app.schemas.reporting import WeightRecordCreate
from app.services import animal_service

DEFAULT_PERIOD = "last-30-days"
PERIOD_DAYS = {
    "last-7-days": 7,
    "last-30-days": 30,
    "last-90-days": 90,
    "last-year": 365,
}


def period_days(period: str | None) -> int:
    """Return the number of days covered by a named period."""
    return PERIOD_DAYS.get(period or DEFAULT_PERIOD, PERIOD_DAYS[DEFAULT_PERIOD])


def _period_start(period: str | None, now: datetime | None) -> datetime:
    now = coerce_utc(now) if now else datetime.now(UTC)
    return now - timedelta(days=period_days(period))


async def feeding_report(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    period: str | None = None,
    species: Species | None = None,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """Aggregate feeding records per feed type over ``period``."""
    stmt = (
        select(FeedingRecord.feed_type, FeedingRecord.quantity, FeedingRecord.animal_id)
        .where(
            FeedingRecord.user_id == user_id,
            FeedingRecord.fed_at >= _period_start(period, now),
        )
    )
    if species is not None:
        stmt = stmt.join(Animal, Animal.id == FeedingRecord.animal_id).where(
            Animal.species == species
        )
    rows = (await session.execute(stmt)).all()

    totals: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    counts: dict[str, int] = defaultdict(int)
    animals: dict[str, set[uuid.UUID]] = defaultdict(set)
    for feed_type, quantity, animal_id in rows:
        totals[feed_type] += Decimal(quantity)
        counts[feed_type] += 1
        animals[feed_type].add(animal_id)

    return [
        {
            "feed_type": feed_type,
            "total_quantity": totals[feed_type],
            "feeding_count": counts[feed_type],
            "animals_fed": len(animals[feed_type]),
        }
        for feed_type in sorted(totals)
    ]


async def growth_report(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    period: str | None = None,
    species: Species | None = None,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """Weight series per animal with total gain and daily growth rate."""
    stmt = (
        select(
            WeightRecord.animal_id,
            Animal.name,
            WeightRecord.weight,
            WeightRecord.recorded_at,
        )
        .join(Animal, Animal.id == WeightRecord.animal_id)
        .where(
            WeightRecord.user_id == user_id,
            WeightRecord.recorded_at >= _period_start(period, now),
        )
        .order_by(WeightRecord.recorded_at.asc())
    )
    if species is not None:
        stmt = stmt.where(Animal.species == species)
    rows = (await session.execute(stmt)).all()

    names: dict[uuid.UUID, str] = {}
    series: dict[uuid.UUID, list[dict[str, Any]]] = defaultdict(list)
    for animal_id, name, weight, recorded_at in rows:
        names[animal_id] = name
        series[animal_id].append({"weight": Decimal(weight), "date": recorded_at})

    entries: list[dict[str, Any]] = []
    for animal_id, weights in series.items():
        first, last = weights[0], weights[-1]
        gain = last["weight"] - first["weight"]
        elapsed_days = (last["date"] - first["date"]) / timedelta(days=1)
        entries.append(
            {
                "animal_id": animal_id,
                "animal_name": names[animal_id],
                "weights": weights,
                "weight_gain": gain,
                "growth_rate": float(gain) / max(elapsed_days, 1),
            }
        )
    return entries


async def health_summary(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
) -> dict[str, int]:
    """Count animals by health and vaccinations by completion."""
    health_stmt = (
        select(Animal.health_status, func.count())
        .where(Animal.user_id == user_id)
        .group_by(Animal.health_status)
    )
    by_health = dict((await session.execute(health_stmt)).all())

    vaccination_stmt = (
        select(Vaccination.status, func.count())
        .where(Vaccination.user_id == user_id)
        .group_by(Vaccination.status)
    )
    by_status = dict((await session.execute(vaccination_stmt)).all())

    total = sum(by_health.values())
    healthy = by_health.get(HealthStatus.HEALTHY, 0)
    return {
        "total_animals": total,
        "healthy_animals": healthy,
        "animals_needing_attention": total - healthy,
        "completed_vaccinations": by_status.get(VaccinationStatus.COMPLETED, 0),
        "pending_vaccinations": by_status.get(VaccinationStatus.SCHEDULED, 0),
    }


async def add_weight_record(
    session: AsyncSession,
    payload: WeightRecordCreate,
    *,
    user_id: uuid.UUID,
) -> WeightRecord:
    """Store a weight measurement for one of the user's animals."""
    animal = await animal_service.ensure_animal(
        session, user_id=user_id, animal_id=payload.animal_id
    )
    record = WeightRecord(
        user_id=user_id,
        animal_id=animal.id,
        weight=payload.weight,
        notes=payload.notes,
    )
    if payload.recorded_at is not None:
        record.recorded_at = coerce_utc(payload.recorded_at)
    session.add(record)
    await session.commit()
    await session.refresh(record)
    return record
