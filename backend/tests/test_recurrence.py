"""Recurrence and due-status rule tests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, time, timedelta
from zoneinfo import ZoneInfo

import pytest

from app.models.feeding import FeedingFrequency
from app.services.recurrence import (
    ConfigurationError,
    FeedingStatus,
    classify_feeding_status,
    compute_next_occurrence,
    fallback_occurrence,
    normalize_days_of_week,
    validate_recurrence,
)


@dataclass
class _Schedule:
    is_active: bool
    next_feeding_date: datetime | None


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=UTC)


def test_daily_rolls_to_tomorrow_once_time_has_passed() -> None:
    result = compute_next_occurrence(
        FeedingFrequency.DAILY, time(7, 0), None, _utc(2024, 6, 1, 8, 0)
    )
    assert result == _utc(2024, 6, 2, 7, 0)


def test_daily_returns_today_when_time_is_ahead() -> None:
    result = compute_next_occurrence(
        FeedingFrequency.DAILY, time(7, 0), None, _utc(2024, 6, 1, 6, 0)
    )
    assert result == _utc(2024, 6, 1, 7, 0)


def test_occurrence_equal_to_reference_is_inclusive() -> None:
    reference = _utc(2024, 6, 1, 7, 0)
    result = compute_next_occurrence("daily", time(7, 0), None, reference)
    assert result == reference


def test_daily_ignores_seconds_on_feeding_time() -> None:
    result = compute_next_occurrence(
        FeedingFrequency.DAILY, time(7, 0, 45), None, _utc(2024, 6, 1, 6, 0)
    )
    assert result == _utc(2024, 6, 1, 7, 0)


def test_weekly_picks_first_matching_weekday() -> None:
    reference = _utc(2024, 6, 3, 10, 0)  # Monday
    result = compute_next_occurrence(
        FeedingFrequency.WEEKLY, time(9, 0), ["wednesday", "friday"], reference
    )
    assert result == _utc(2024, 6, 5, 9, 0)
    assert result.strftime("%A").lower() == "wednesday"


def test_weekly_uses_today_only_when_time_is_still_ahead() -> None:
    monday_morning = _utc(2024, 6, 3, 8, 0)
    assert compute_next_occurrence(
        FeedingFrequency.WEEKLY, time(9, 0), ["monday"], monday_morning
    ) == _utc(2024, 6, 3, 9, 0)

    monday_noon = _utc(2024, 6, 3, 12, 0)
    assert compute_next_occurrence(
        FeedingFrequency.WEEKLY, time(9, 0), ["monday"], monday_noon
    ) == _utc(2024, 6, 10, 9, 0)


def test_weekly_has_no_earlier_valid_slot() -> None:
    reference = _utc(2024, 6, 6, 18, 30)  # Thursday
    days = ["tuesday", "thursday", "saturday"]
    result = compute_next_occurrence(FeedingFrequency.WEEKLY, time(18, 0), days, reference)
    assert result == _utc(2024, 6, 8, 18, 0)

    probe = reference
    while probe < result:
        slot = datetime.combine(probe.date(), time(18, 0), tzinfo=UTC)
        if slot.strftime("%A").lower() in days:
            assert not reference <= slot < result
        probe += timedelta(days=1)


def test_weekly_day_names_are_case_insensitive() -> None:
    result = compute_next_occurrence(
        "weekly", time(9, 0), ["Wednesday"], _utc(2024, 6, 3, 10, 0)
    )
    assert result == _utc(2024, 6, 5, 9, 0)


@pytest.mark.parametrize("days", [[], None])
def test_weekly_without_days_raises(days: list[str] | None) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        compute_next_occurrence(
            FeedingFrequency.WEEKLY, time(9, 0), days, _utc(2024, 6, 3, 10, 0)
        )
    assert excinfo.value.field == "days_of_week"


def test_unknown_weekday_raises() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        normalize_days_of_week(["funday"])
    assert excinfo.value.field == "days_of_week"


def test_unknown_frequency_raises() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        validate_recurrence("hourly", None)
    assert excinfo.value.field == "frequency"


def test_days_are_dropped_for_non_weekly_frequencies() -> None:
    frequency, days = validate_recurrence("daily", ["monday"])
    assert frequency is FeedingFrequency.DAILY
    assert days is None


def test_monthly_clamps_to_last_day_of_shorter_month() -> None:
    result = compute_next_occurrence(
        FeedingFrequency.MONTHLY, time(9, 0), None, _utc(2024, 5, 31, 10, 0)
    )
    assert result == _utc(2024, 6, 30, 9, 0)


def test_monthly_clamps_into_leap_february() -> None:
    result = compute_next_occurrence(
        FeedingFrequency.MONTHLY, time(9, 0), None, _utc(2024, 1, 31, 10, 0)
    )
    assert result == _utc(2024, 2, 29, 9, 0)


def test_monthly_same_day_when_time_is_ahead() -> None:
    result = compute_next_occurrence(
        FeedingFrequency.MONTHLY, time(9, 0), None, _utc(2024, 5, 31, 8, 0)
    )
    assert result == _utc(2024, 5, 31, 9, 0)


def test_bi_weekly_lands_on_anchor_lattice() -> None:
    anchor = _utc(2024, 6, 3, 6, 0)
    reference = _utc(2024, 6, 20, 12, 0)
    result = compute_next_occurrence(
        FeedingFrequency.BI_WEEKLY, time(7, 0), None, reference, anchor=anchor
    )
    assert result == _utc(2024, 7, 1, 7, 0)
    assert (result.date() - anchor.date()).days % 14 == 0


def test_bi_weekly_on_anchor_day_before_time() -> None:
    anchor = _utc(2024, 6, 3, 6, 0)
    result = compute_next_occurrence(
        FeedingFrequency.BI_WEEKLY, time(7, 0), None, anchor, anchor=anchor
    )
    assert result == _utc(2024, 6, 3, 7, 0)


def test_bi_weekly_after_anchor_slot_skips_a_full_period() -> None:
    anchor = _utc(2024, 6, 3, 8, 0)
    result = compute_next_occurrence(
        FeedingFrequency.BI_WEEKLY, time(7, 0), None, anchor, anchor=anchor
    )
    assert result == _utc(2024, 6, 17, 7, 0)


def test_bi_weekly_without_anchor_starts_today() -> None:
    reference = _utc(2024, 6, 3, 6, 0)
    assert compute_next_occurrence(
        FeedingFrequency.BI_WEEKLY, time(7, 0), None, reference
    ) == _utc(2024, 6, 3, 7, 0)


def test_bi_weekly_ignores_days_of_week() -> None:
    anchor = _utc(2024, 6, 3, 6, 0)
    result = compute_next_occurrence(
        FeedingFrequency.BI_WEEKLY, time(7, 0), ["friday"], anchor, anchor=anchor
    )
    assert result == _utc(2024, 6, 3, 7, 0)


def test_feeding_time_is_read_in_reference_timezone() -> None:
    dublin = ZoneInfo("Europe/Dublin")
    reference = datetime(2024, 6, 1, 8, 0, tzinfo=dublin)
    result = compute_next_occurrence(FeedingFrequency.DAILY, time(7, 0), None, reference)
    assert result == datetime(2024, 6, 2, 7, 0, tzinfo=dublin)
    assert result.astimezone(UTC) == _utc(2024, 6, 2, 6, 0)


def test_naive_reference_is_treated_as_utc() -> None:
    result = compute_next_occurrence(
        FeedingFrequency.DAILY, time(7, 0), None, datetime(2024, 6, 1, 8, 0)
    )
    assert result == _utc(2024, 6, 2, 7, 0)


def _dublin_fall_back(hour: int, minute: int) -> datetime:
    # Clocks in Dublin go from 02:00 IST back to 01:00 GMT on 2024-10-27.
    return _utc(2024, 10, 27, hour, minute).astimezone(ZoneInfo("Europe/Dublin"))


@pytest.mark.parametrize("frequency", list(FeedingFrequency))
def test_repeated_hour_never_yields_an_earlier_instant(
    frequency: FeedingFrequency,
) -> None:
    reference = _dublin_fall_back(1, 15)
    assert (reference.hour, reference.minute, reference.fold) == (1, 15, 1)
    days = ["sunday"] if frequency is FeedingFrequency.WEEKLY else None

    result = compute_next_occurrence(frequency, time(1, 30), days, reference)

    assert result.astimezone(UTC) == _utc(2024, 10, 27, 1, 30)


def test_first_pass_of_repeated_hour_keeps_earlier_instant() -> None:
    reference = _dublin_fall_back(0, 15)
    result = compute_next_occurrence(FeedingFrequency.DAILY, time(1, 30), None, reference)
    assert result.astimezone(UTC) == _utc(2024, 10, 27, 0, 30)


def test_repeated_hour_slot_fully_passed_rolls_to_next_day() -> None:
    reference = _dublin_fall_back(1, 15)
    result = compute_next_occurrence(FeedingFrequency.DAILY, time(1, 0), None, reference)
    assert result.astimezone(UTC) == _utc(2024, 10, 28, 1, 0)


def test_fallback_spans_real_hours_across_dst() -> None:
    reference = _dublin_fall_back(0, 15)
    result = fallback_occurrence(reference)
    assert result.value - reference == timedelta(hours=24)
    assert result.value == _utc(2024, 10, 28, 0, 15)


@pytest.mark.parametrize("frequency", list(FeedingFrequency))
def test_compute_is_idempotent(frequency: FeedingFrequency) -> None:
    reference = _utc(2024, 6, 3, 10, 0)
    days = ["wednesday"] if frequency is FeedingFrequency.WEEKLY else None
    first = compute_next_occurrence(frequency, time(9, 0), days, reference)
    second = compute_next_occurrence(frequency, time(9, 0), days, reference)
    assert first == second
    assert first >= reference


def test_fallback_is_a_day_later_and_not_authoritative() -> None:
    reference = _utc(2024, 6, 1, 8, 0)
    result = fallback_occurrence(reference)
    assert result.value == _utc(2024, 6, 2, 8, 0)
    assert result.authoritative is False


def test_overdue_takes_precedence_over_upcoming() -> None:
    now = _utc(2024, 6, 1, 10, 0)
    schedule = _Schedule(is_active=True, next_feeding_date=_utc(2024, 6, 1, 9, 30))
    assert classify_feeding_status(schedule, now) is FeedingStatus.OVERDUE


def test_status_boundaries() -> None:
    now = _utc(2024, 6, 1, 10, 0)
    at_now = _Schedule(True, now)
    in_window = _Schedule(True, now + timedelta(hours=2))
    beyond = _Schedule(True, now + timedelta(hours=2, minutes=1))
    assert classify_feeding_status(at_now, now) is FeedingStatus.OVERDUE
    assert classify_feeding_status(in_window, now) is FeedingStatus.UPCOMING
    assert classify_feeding_status(beyond, now) is FeedingStatus.NONE


def test_inactive_or_unset_schedules_are_not_classified() -> None:
    now = _utc(2024, 6, 1, 10, 0)
    assert classify_feeding_status(_Schedule(False, now), now) is FeedingStatus.NONE
    assert classify_feeding_status(_Schedule(True, None), now) is FeedingStatus.NONE


def test_status_window_is_configurable() -> None:
    now = _utc(2024, 6, 1, 10, 0)
    schedule = _Schedule(True, now + timedelta(hours=3))
    assert (
        classify_feeding_status(schedule, now, window=timedelta(hours=4))
        is FeedingStatus.UPCOMING
    )
