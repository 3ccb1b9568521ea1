"""Lead-time and blackout rules applied to candidate lesson starts."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import AbstractSet, Iterable, Optional, Union

from .availability_rules import format_date_key
from .slot_grid import slot_start

DEFAULT_MIN_NOTICE_HOURS = 2

IN_PAST = "in_past"
INSUFFICIENT_NOTICE = "insufficient_notice"
BLOCKED_DATE = "blocked_date"

DateKey = Union[str, date]


def normalize_blocked_dates(blocked_dates: Iterable[DateKey]) -> AbstractSet[str]:
    """Normalize dates or yyyy-MM-dd strings to a set of yyyy-MM-dd keys."""
    return frozenset(
        format_date_key(value) if isinstance(value, date) else str(value)[:10]
        for value in blocked_dates
    )


def is_in_future(candidate: datetime, now: datetime) -> bool:
    return candidate > now


def meets_minimum_notice(
    candidate: datetime, now: datetime, min_notice_hours: int = DEFAULT_MIN_NOTICE_HOURS
) -> bool:
    """A start exactly ``min_notice_hours`` after ``now`` is accepted."""
    return candidate >= now + timedelta(hours=min_notice_hours)


def is_blocked(day: date, blocked_dates: AbstractSet[str]) -> bool:
    return format_date_key(day) in blocked_dates


def booking_window_rejection(
    day: date,
    slot_time: time,
    now: datetime,
    blocked_dates: AbstractSet[str],
    min_notice_hours: int = DEFAULT_MIN_NOTICE_HOURS,
) -> Optional[str]:
    """
    Apply, in order: strictly in the future, minimum notice, not a blocked date.

    Returns the first failed check, or None when the start passes all three.
    """
    candidate = slot_start(day, slot_time)
    if not is_in_future(candidate, now):
        return IN_PAST
    if not meets_minimum_notice(candidate, now, min_notice_hours):
        return INSUFFICIENT_NOTICE
    if is_blocked(day, blocked_dates):
        return BLOCKED_DATE
    return None


def passes_booking_window(
    day: date,
    slot_time: time,
    now: datetime,
    blocked_dates: AbstractSet[str],
    min_notice_hours: int = DEFAULT_MIN_NOTICE_HOURS,
) -> bool:
    return booking_window_rejection(day, slot_time, now, blocked_dates, min_notice_hours) is None
