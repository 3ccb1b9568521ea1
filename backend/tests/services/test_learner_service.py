"""Tests for LearnerService."""

import pytest

from lesson_booking.core.exceptions import NotFoundException, ValidationException
from lesson_booking.core.ulid_helper import generate_ulid
from lesson_booking.models import Learner
from lesson_booking.services.learner_service import DEFAULT_LEARNER_NAME, LearnerService
from tests.factories.lesson_builders import NOW, add_lesson


class TestEnsureLearner:
    def test_creates_default_learner_for_new_account(self, db, clock):
        parent_id = generate_ulid()

        learners = LearnerService(db, clock).ensure_learner(parent_id)

        assert len(learners) == 1
        assert learners[0].parent_id == parent_id
        assert learners[0].name == DEFAULT_LEARNER_NAME
        assert db.query(Learner).filter_by(parent_id=parent_id).count() == 1

    def test_uses_given_name(self, db, clock):
        learners = LearnerService(db, clock).ensure_learner(generate_ulid(), "  Maya ")
        assert learners[0].name == "Maya"

    def test_existing_learners_are_returned_unchanged(self, db, clock, learner):
        service = LearnerService(db, clock)

        learners = service.ensure_learner(learner.parent_id, "Someone else")

        assert [record.id for record in learners] == [learner.id]
        assert db.query(Learner).count() == 1

    def test_is_idempotent(self, db, clock):
        service = LearnerService(db, clock)
        parent_id = generate_ulid()

        first = service.ensure_learner(parent_id)
        second = service.ensure_learner(parent_id)

        assert first[0].id == second[0].id

    def test_requires_parent(self, db, clock):
        with pytest.raises(ValidationException) as exc_info:
            LearnerService(db, clock).ensure_learner("")
        assert exc_info.value.code == "missing_parent"


class TestFreeTrialHistory:
    def test_no_lessons(self, db, clock, learner):
        assert LearnerService(db, clock).has_used_free_trial(learner.id) is False

    def test_paid_lessons_do_not_count(self, db, clock, teacher, learner):
        add_lesson(db, teacher.id, learner.id, NOW.replace(day=3, hour=14))
        assert LearnerService(db, clock).has_used_free_trial(learner.id) is False

    def test_cancelled_trial_still_counts(self, db, clock, teacher, learner):
        add_lesson(
            db,
            teacher.id,
            learner.id,
            NOW.replace(day=3, hour=14),
            status="cancelled_by_student",
            is_free_trial=True,
        )
        assert LearnerService(db, clock).has_used_free_trial(learner.id) is True

    def test_unknown_learner(self, db, clock):
        with pytest.raises(NotFoundException):
            LearnerService(db, clock).has_used_free_trial(generate_ulid())
