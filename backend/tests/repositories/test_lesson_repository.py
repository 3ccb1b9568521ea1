"""Tests for lesson reads and the overlap-guarded insert."""

from datetime import datetime, timedelta
from decimal import Decimal

from lesson_booking.core.enums import LessonStatus
from lesson_booking.models import Lesson, TeacherProfile
from lesson_booking.repositories.lesson_repository import LessonRepository
from tests.factories.lesson_builders import TOMORROW, add_lesson

AT_14 = datetime.combine(TOMORROW, datetime.min.time()) + timedelta(hours=14)


def _insert(repo: LessonRepository, teacher_id: str, learner_id: str, start: datetime, minutes: int):
    return repo.create_if_no_overlap(
        teacher_id=teacher_id,
        learner_id=learner_id,
        scheduled_time=start,
        duration_minutes=minutes,
        price_charged=Decimal("40.00"),
        is_free_trial=False,
        teacher_rate_at_booking=Decimal("40.00"),
    )


class TestCreateIfNoOverlap:
    def test_inserts_when_the_interval_is_free(self, db, teacher, learner):
        repo = LessonRepository(db)

        lesson = _insert(repo, teacher.id, learner.id, AT_14, 60)
        db.commit()

        assert lesson is not None
        assert lesson.status == LessonStatus.BOOKED.value
        assert lesson.scheduled_end == AT_14 + timedelta(minutes=60)
        assert lesson.price_charged == Decimal("40.00")
        assert db.query(Lesson).count() == 1

    def test_refuses_any_overlap(self, db, teacher, learner, other_learner):
        repo = LessonRepository(db)
        assert _insert(repo, teacher.id, learner.id, AT_14, 60) is not None
        db.commit()

        assert _insert(repo, teacher.id, other_learner.id, AT_14 + timedelta(minutes=15), 30) is None
        assert _insert(repo, teacher.id, other_learner.id, AT_14 - timedelta(minutes=30), 60) is None
        assert db.query(Lesson).count() == 1

    def test_adjacent_lessons_are_allowed(self, db, teacher, learner, other_learner):
        repo = LessonRepository(db)
        assert _insert(repo, teacher.id, learner.id, AT_14, 60) is not None
        assert _insert(repo, teacher.id, other_learner.id, AT_14 + timedelta(hours=1), 30)
        assert _insert(repo, teacher.id, other_learner.id, AT_14 - timedelta(minutes=30), 30)
        db.commit()
        assert db.query(Lesson).count() == 3

    def test_cancelled_lesson_releases_its_interval(self, db, teacher, learner, other_learner):
        add_lesson(
            db, teacher.id, learner.id, AT_14, status=LessonStatus.CANCELLED_BY_STUDENT.value
        )
        repo = LessonRepository(db)
        assert _insert(repo, teacher.id, other_learner.id, AT_14, 60) is not None

    def test_other_teachers_do_not_block(self, db, teacher, learner, other_learner):
        second = TeacherProfile(display_name="Mr. Okafor", hourly_rate=Decimal("30.00"))
        db.add(second)
        db.commit()
        add_lesson(db, teacher.id, learner.id, AT_14)

        assert _insert(LessonRepository(db), second.id, other_learner.id, AT_14, 60) is not None


class TestReads:
    def test_active_lessons_exclude_cancelled_and_out_of_window(self, db, teacher, learner):
        kept = add_lesson(db, teacher.id, learner.id, AT_14)
        add_lesson(
            db,
            teacher.id,
            learner.id,
            AT_14 + timedelta(hours=2),
            status=LessonStatus.CANCELLED_BY_TEACHER.value,
        )
        add_lesson(db, teacher.id, learner.id, AT_14 + timedelta(days=3))

        lessons = LessonRepository(db).get_active_lessons_for_teacher(
            teacher.id, AT_14 - timedelta(hours=14), AT_14 + timedelta(hours=10)
        )
        assert [lesson.id for lesson in lessons] == [kept.id]

    def test_window_catches_lessons_that_started_before_it(self, db, teacher, learner):
        add_lesson(db, teacher.id, learner.id, AT_14 - timedelta(minutes=30), duration_minutes=60)
        lessons = LessonRepository(db).get_overlapping_lessons(teacher.id, AT_14, 30)
        assert len(lessons) == 1

    def test_free_trial_history(self, db, teacher, learner, other_learner):
        repo = LessonRepository(db)
        add_lesson(db, teacher.id, learner.id, AT_14, is_free_trial=True)

        assert repo.has_free_trial_lesson(learner.id)
        assert not repo.has_free_trial_lesson(other_learner.id)
