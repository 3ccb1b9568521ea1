"""Tests for the booking and learner endpoints."""

from datetime import datetime, time

from lesson_booking.core.ulid_helper import generate_ulid
from tests.factories.lesson_builders import TOMORROW, add_lesson

BOOKINGS = "/api/v1/bookings"


def _payload(learner, teacher, subject, start=time(14, 0), duration=60, **overrides):
    payload = {
        "learner_id": learner.id,
        "teacher_id": teacher.id,
        "subject_id": subject.id,
        "scheduled_time": datetime.combine(TOMORROW, start).isoformat(),
        "duration_minutes": duration,
        "parent_id": learner.parent_id,
    }
    payload.update(overrides)
    return payload


class TestCreateBooking:
    def test_created(self, client, teacher, subject, learner, open_tomorrow):
        response = client.post(BOOKINGS, json=_payload(learner, teacher, subject, duration=30))

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "booked"
        assert body["is_free_trial"] is True
        assert body["scheduled_time"] == f"{TOMORROW.isoformat()}T14:00:00"
        assert body["scheduled_end"] == f"{TOMORROW.isoformat()}T14:30:00"

        fetched = client.get(f"{BOOKINGS}/{body['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["id"] == body["id"]

    def test_incomplete_request(self, client, teacher, subject, learner, open_tomorrow):
        response = client.post(
            BOOKINGS, json=_payload(learner, teacher, subject, subject_id="", scheduled_time=None)
        )

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["code"] == "incomplete_request"
        assert detail["details"]["missing"] == ["subject_id", "scheduled_time"]

    def test_unknown_field_is_rejected(self, client, teacher, subject, learner):
        response = client.post(
            BOOKINGS, json=_payload(learner, teacher, subject, price_charged="0.00")
        )
        assert response.status_code == 422

    def test_taken_slot_is_a_conflict(
        self, client, db, teacher, subject, learner, other_learner, open_tomorrow
    ):
        add_lesson(db, teacher.id, other_learner.id, datetime.combine(TOMORROW, time(14, 30)))

        response = client.post(BOOKINGS, json=_payload(learner, teacher, subject))

        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["code"] == "slot_unavailable"
        assert detail["details"]["reason"] == "conflict"

    def test_closed_slot_is_a_conflict(self, client, teacher, subject, learner, open_tomorrow):
        response = client.post(
            BOOKINGS, json=_payload(learner, teacher, subject, start=time(21, 0))
        )
        assert response.status_code == 409
        assert response.json()["detail"]["details"]["reason"] == "closed"


class TestCancelBooking:
    def test_cancel_then_rebook(
        self, client, teacher, subject, learner, other_learner, open_tomorrow
    ):
        lesson_id = client.post(BOOKINGS, json=_payload(learner, teacher, subject)).json()["id"]

        response = client.post(
            f"{BOOKINGS}/{lesson_id}/cancel", json={"cancelled_by": "teacher", "reason": "Ill"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled_by_teacher"
        assert response.json()["cancellation_reason"] == "Ill"

        rebooked = client.post(BOOKINGS, json=_payload(other_learner, teacher, subject))
        assert rebooked.status_code == 201

    def test_cancel_twice(self, client, teacher, subject, learner, open_tomorrow):
        lesson_id = client.post(BOOKINGS, json=_payload(learner, teacher, subject)).json()["id"]
        client.post(f"{BOOKINGS}/{lesson_id}/cancel", json={"cancelled_by": "student"})

        response = client.post(f"{BOOKINGS}/{lesson_id}/cancel", json={"cancelled_by": "student"})

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "already_cancelled"

    def test_unknown_lesson(self, client):
        response = client.get(f"{BOOKINGS}/{generate_ulid()}")
        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "lesson_not_found"


class TestEnsureLearner:
    def test_creates_default_learner(self, client):
        parent_id = generate_ulid()

        response = client.post("/api/v1/learners/ensure", json={"parent_id": parent_id})

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 1
        assert body[0]["parent_id"] == parent_id
        assert body[0]["name"] == "Student"

    def test_returns_existing(self, client, learner):
        response = client.post(
            "/api/v1/learners/ensure", json={"parent_id": learner.parent_id, "name": "Other"}
        )
        assert [record["id"] for record in response.json()] == [learner.id]
