"""Tests for the fixed 48-slot daily grid."""

from datetime import date, datetime, time, timedelta

from lesson_booking.domain.slot_grid import (
    generate_slot_grid,
    is_grid_aligned,
    iter_slot_starts,
    slot_start,
)


class TestSlotGrid:
    def test_grid_has_48_ascending_half_hour_slots(self):
        grid = generate_slot_grid()

        assert len(grid) == 48
        assert len(set(grid)) == 48
        assert grid[0] == time(0, 0)
        assert grid[-1] == time(23, 30)

        as_datetimes = [datetime.combine(date(2024, 1, 1), slot) for slot in grid]
        gaps = {b - a for a, b in zip(as_datetimes, as_datetimes[1:])}
        assert gaps == {timedelta(minutes=30)}

    def test_grid_is_the_same_for_every_call(self):
        assert generate_slot_grid() == generate_slot_grid()

    def test_slot_starts_stay_on_the_requested_date(self):
        day = date(2024, 2, 29)
        starts = list(iter_slot_starts(day))

        assert len(starts) == 48
        assert {start.date() for start in starts} == {day}
        assert starts[1] == slot_start(day, time(0, 30))

    def test_grid_alignment(self):
        assert is_grid_aligned(datetime(2024, 1, 1, 14, 30))
        assert not is_grid_aligned(datetime(2024, 1, 1, 14, 15))
        assert not is_grid_aligned(datetime(2024, 1, 1, 14, 0, 1))
