"""Tests for half-open overlap detection between lessons."""

from datetime import datetime

import pytest

from lesson_booking.core.enums import LessonStatus
from lesson_booking.domain.conflicts import (
    BookedInterval,
    find_conflicts,
    has_conflict,
    intervals_overlap,
)

DAY = datetime(2024, 1, 2)


def _at(hour: int, minute: int = 0) -> datetime:
    return DAY.replace(hour=hour, minute=minute)


EXISTING = [BookedInterval(start=_at(14), end=_at(15), lesson_id="lesson-1")]


class TestDurationSymmetry:
    @pytest.mark.parametrize(
        "start, duration",
        [
            (_at(14, 15), 30),
            (_at(13, 45), 30),
            (_at(13, 30), 60),
            (_at(14, 30), 60),
            (_at(14), 30),
        ],
    )
    def test_overlapping_candidates_conflict(self, start, duration):
        assert has_conflict(start, duration, EXISTING)

    @pytest.mark.parametrize(
        "start, duration",
        [(_at(15), 30), (_at(15), 60), (_at(13, 30), 30), (_at(13), 60)],
    )
    def test_touching_candidates_do_not_conflict(self, start, duration):
        assert not has_conflict(start, duration, EXISTING)

    def test_short_existing_lesson_blocks_long_candidate(self):
        existing = [BookedInterval(start=_at(14, 30), end=_at(15))]
        assert has_conflict(_at(14), 60, existing)
        assert not has_conflict(_at(13, 30), 60, existing)


def test_cancelled_lessons_never_conflict():
    cancelled = [
        BookedInterval(_at(14), _at(15), status=LessonStatus.CANCELLED_BY_TEACHER.value),
        BookedInterval(_at(14), _at(15), status=LessonStatus.CANCELLED_BY_STUDENT.value),
    ]
    assert not has_conflict(_at(14), 60, cancelled)


def test_completed_and_missed_lessons_still_conflict():
    for status in (LessonStatus.COMPLETED, LessonStatus.MISSED):
        assert has_conflict(_at(14), 30, [BookedInterval(_at(14), _at(15), status=status.value)])


def test_find_conflicts_returns_each_overlapping_lesson():
    booked = [
        BookedInterval(_at(13), _at(14), lesson_id="a"),
        BookedInterval(_at(14), _at(15), lesson_id="b"),
        BookedInterval(_at(16), _at(17), lesson_id="c"),
    ]
    conflicts = find_conflicts(_at(13, 30), 60, booked)
    assert [c.lesson_id for c in conflicts] == ["a", "b"]


def test_overlap_is_symmetric():
    a = (_at(9), _at(10))
    b = (_at(9, 30), _at(10, 30))
    assert intervals_overlap(*a, *b) == intervals_overlap(*b, *a)
