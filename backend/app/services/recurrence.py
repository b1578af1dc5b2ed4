"""Feeding schedule recurrence and due-status rules.

Everything here is a pure function of its arguments. Callers supply the
reference instant, decide what to persist, and own any remote calculation.

Occurrences are computed in the calendar of the reference instant: a feeding
time of 07:00 with a reference in ``Europe/Dublin`` yields 07:00 Dublin time.
Naive datetimes are treated as UTC.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from typing import Protocol

from dateutil.relativedelta import relativedelta

from app.models.feeding import FeedingFrequency

WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

BI_WEEKLY_PERIOD_DAYS = 14
DEFAULT_UPCOMING_WINDOW = timedelta(hours=2)
DEFAULT_FALLBACK_OFFSET = timedelta(hours=24)


class ConfigurationError(ValueError):
    """Raised when a recurrence configuration cannot produce occurrences."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class FeedingStatus(str, enum.Enum):
    """Due state of a schedule relative to the current time."""

    NONE = "none"
    UPCOMING = "upcoming"
    OVERDUE = "overdue"


@dataclass(frozen=True, slots=True)
class OccurrenceResult:
    """Next occurrence tagged with whether it came from an authoritative path."""

    value: datetime
    authoritative: bool = True


class SupportsFeedingStatus(Protocol):
    is_active: bool
    next_feeding_date: datetime | None


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _at(day: date, feeding_time: time, tz: tzinfo | None, fold: int = 0) -> datetime:
    wall_clock = time(feeding_time.hour, feeding_time.minute, fold=fold)
    return datetime.combine(day, wall_clock, tzinfo=tz)


def _instant(value: datetime) -> datetime:
    return value.astimezone(UTC)


def _slot_on(day: date, feeding_time: time, reference: datetime) -> datetime | None:
    """Earliest instant showing ``feeding_time`` on ``day`` that is not before ``reference``.

    Aware datetimes sharing a tzinfo compare by wall clock and ignore ``fold``,
    so both sides are compared in UTC. A wall time repeated at a DST
    fall-back has two instants; the later one is tried second.
    """
    for fold in (0, 1):
        candidate = _at(day, feeding_time, reference.tzinfo, fold)
        if _instant(candidate) >= _instant(reference):
            return candidate
    return None


def coerce_frequency(value: FeedingFrequency | str) -> FeedingFrequency:
    """Return the frequency enum for ``value`` or raise ConfigurationError."""
    if isinstance(value, FeedingFrequency):
        return value
    try:
        return FeedingFrequency(str(value).strip().lower())
    except ValueError as exc:
        raise ConfigurationError(
            "frequency", f"Unsupported feeding frequency: {value!r}"
        ) from exc


def normalize_days_of_week(days: Iterable[str] | None) -> list[str]:
    """Lower-case and de-duplicate weekday names, ordered Monday first."""
    if not days:
        return []
    names: set[str] = set()
    for day in days:
        name = str(day).strip().lower()
        if name not in WEEKDAYS:
            raise ConfigurationError("days_of_week", f"Unknown weekday: {day!r}")
        names.add(name)
    return [name for name in WEEKDAYS if name in names]


def validate_recurrence(
    frequency: FeedingFrequency | str,
    days_of_week: Iterable[str] | None,
) -> tuple[FeedingFrequency, list[str] | None]:
    """Validate a recurrence configuration.

    Returns the coerced frequency and the normalised weekday list, which is
    ``None`` for every frequency other than weekly.
    """
    resolved = coerce_frequency(frequency)
    if resolved is not FeedingFrequency.WEEKLY:
        return resolved, None
    days = normalize_days_of_week(days_of_week)
    if not days:
        raise ConfigurationError(
            "days_of_week",
            "days_of_week must include at least one weekday for weekly schedules",
        )
    return resolved, days


def _next_daily(today: date, feeding_time: time, reference: datetime) -> datetime:
    slot = _slot_on(today, feeding_time, reference)
    if slot is not None:
        return slot
    return _at(today + timedelta(days=1), feeding_time, reference.tzinfo)


def _next_weekly(
    today: date, feeding_time: time, days: list[str], reference: datetime
) -> datetime:
    wanted = {WEEKDAYS.index(name) for name in days}
    # Offset 7 covers "only today's weekday, and today's slot has passed".
    for offset in range(8):
        day = today + timedelta(days=offset)
        if day.weekday() not in wanted:
            continue
        slot = _slot_on(day, feeding_time, reference)
        if slot is not None:
            return slot
    raise ConfigurationError("days_of_week", "No matching weekday found")


def _next_bi_weekly(
    today: date,
    feeding_time: time,
    reference: datetime,
    anchor: datetime | None,
) -> datetime:
    start = _as_aware(anchor).astimezone(reference.tzinfo).date() if anchor else today
    periods = (today - start).days // BI_WEEKLY_PERIOD_DAYS
    day = start + timedelta(days=max(periods, 0) * BI_WEEKLY_PERIOD_DAYS)
    slot = _slot_on(day, feeding_time, reference)
    while slot is None:
        day += timedelta(days=BI_WEEKLY_PERIOD_DAYS)
        slot = _slot_on(day, feeding_time, reference)
    return slot


def _next_monthly(today: date, feeding_time: time, reference: datetime) -> datetime:
    slot = _slot_on(today, feeding_time, reference)
    if slot is not None:
        return slot
    # relativedelta clamps to the last day of shorter months (May 31 -> Jun 30).
    return _at(today + relativedelta(months=1), feeding_time, reference.tzinfo)


def compute_next_occurrence(
    frequency: FeedingFrequency | str,
    feeding_time: time,
    days_of_week: Iterable[str] | None,
    reference: datetime,
    *,
    anchor: datetime | None = None,
) -> datetime:
    """Return the earliest occurrence at or after ``reference``.

    Args:
        frequency: Recurrence rule of the schedule.
        feeding_time: Wall-clock time of day; seconds are ignored.
        days_of_week: Weekday names, required for weekly schedules only.
        reference: Instant the occurrence must not precede. Its timezone is
            the calendar the feeding time is interpreted in.
        anchor: Start of the bi-weekly cycle. Without one the cycle starts
            on the reference date.

    Raises:
        ConfigurationError: the frequency is unknown, or a weekly schedule
            has no valid weekdays.
    """
    resolved, days = validate_recurrence(frequency, days_of_week)
    reference = _as_aware(reference)
    today = reference.date()

    if resolved is FeedingFrequency.DAILY:
        return _next_daily(today, feeding_time, reference)
    if resolved is FeedingFrequency.WEEKLY:
        return _next_weekly(today, feeding_time, days or [], reference)
    if resolved is FeedingFrequency.BI_WEEKLY:
        return _next_bi_weekly(today, feeding_time, reference, anchor)
    return _next_monthly(today, feeding_time, reference)


def fallback_occurrence(
    reference: datetime, offset: timedelta = DEFAULT_FALLBACK_OFFSET
) -> OccurrenceResult:
    """Placeholder used when the authoritative calculation is unavailable."""
    return OccurrenceResult(
        value=_instant(_as_aware(reference)) + offset, authoritative=False
    )


def classify_feeding_status(
    schedule: SupportsFeedingStatus,
    now: datetime,
    *,
    window: timedelta = DEFAULT_UPCOMING_WINDOW,
) -> FeedingStatus:
    """Classify a schedule as overdue, upcoming within ``window``, or neither."""
    if not schedule.is_active or schedule.next_feeding_date is None:
        return FeedingStatus.NONE
    next_at = _instant(_as_aware(schedule.next_feeding_date))
    now = _instant(_as_aware(now))
    if next_at <= now:
        return FeedingStatus.OVERDUE
    if next_at <= now + window:
        return FeedingStatus.UPCOMING
    return FeedingStatus.NONE
