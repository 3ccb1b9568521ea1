"""Fixed daily grid of candidate lesson start times."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Iterator, List

from ..core.constants import MINUTES_PER_DAY, SLOT_INTERVAL_MINUTES


def generate_slot_grid(interval_minutes: int = SLOT_INTERVAL_MINUTES) -> List[time]:
    """Return the ordered start-of-day offsets 00:00, 00:30, ..., 23:30."""
    return [
        time(minute // 60, minute % 60) for minute in range(0, MINUTES_PER_DAY, interval_minutes)
    ]


def slot_start(day: date, slot_time: time) -> datetime:
    """Combine a calendar date and a grid offset into the slot's start instant."""
    return datetime.combine(day, slot_time)


def iter_slot_starts(day: date) -> Iterator[datetime]:
    for slot_time in generate_slot_grid():
        yield slot_start(day, slot_time)


def is_grid_aligned(moment: datetime) -> bool:
    """True when ``moment`` falls exactly on a grid offset."""
    return (
        moment.second == 0
        and moment.microsecond == 0
        and (moment.hour * 60 + moment.minute) % SLOT_INTERVAL_MINUTES == 0
    )
