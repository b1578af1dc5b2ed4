"""CSV rendering of feeding and growth reports."""

from __future__ import annotations

import csv
import io
import uuid
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.animal import Species
from app.services import reporting_service

FEEDING_HEADER = ["feed_type", "total_quantity", "feeding_count", "animals_fed"]
GROWTH_HEADER = [
    "animal_id",
    "animal_name",
    "first_weight",
    "last_weight",
    "weight_gain",
    "growth_rate",
]


def export_filename(
    report: str, period: str | None, *, today: datetime | None = None
) -> str:
    stamp = (today or datetime.now(UTC)).date().isoformat()
    return f"{report}-report-{period or reporting_service.DEFAULT_PERIOD}-{stamp}.csv"


async def export_feeding_report(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    period: str | None = None,
    species: Species | None = None,
) -> tuple[str, int]:
    """Render the feeding report as CSV text; returns the text and row count."""
    entries = await reporting_service.feeding_report(
        session, user_id=user_id, period=period, species=species
    )
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(FEEDING_HEADER)
    for entry in entries:
        writer.writerow(
            [
                entry["feed_type"],
                _format_decimal(entry["total_quantity"]),
                entry["feeding_count"],
                entry["animals_fed"],
            ]
        )
    return buffer.getvalue(), len(entries)


async def export_growth_report(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    period: str | None = None,
    species: Species | None = None,
) -> tuple[str, int]:
    entries = await reporting_service.growth_report(
        session, user_id=user_id, period=period, species=species
    )
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(GROWTH_HEADER)
    for entry in entries:
        weights = entry["weights"]
        writer.writerow(
            [
                str(entry["animal_id"]),
                entry["animal_name"],
                _format_decimal(weights[0]["weight"]),
                _format_decimal(weights[-1]["weight"]),
                _format_decimal(entry["weight_gain"]),
                f"{entry['growth_rate']:.3f}",
            ]
        )
    return buffer.getvalue(), len(entries)


def _format_decimal(value: Decimal) -> str:
    return f"{Decimal(value).quantize(Decimal('0.01'))}"
