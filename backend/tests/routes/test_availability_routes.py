"""Tests for the teacher availability endpoints."""

from datetime import datetime, time, timedelta

from tests.factories.lesson_builders import TODAY, TOMORROW, add_blocked_date, add_lesson


def _grid(client, teacher_id, day, duration=60):
    return client.get(
        f"/api/v1/teachers/{teacher_id}/availability",
        params={"date": day.isoformat(), "duration": duration},
    )


def test_day_grid_has_48_slots(client, teacher, open_tomorrow):
    response = _grid(client, teacher.id, TOMORROW)

    assert response.status_code == 200
    body = response.json()
    assert body["teacher_id"] == teacher.id
    assert body["date"] == TOMORROW.isoformat()
    assert body["error"] is None
    assert len(body["slots"]) == 48
    assert body["slots"][0] == {"time": "00:00", "bookable": False}

    bookable = [slot["time"] for slot in body["slots"] if slot["bookable"]]
    assert bookable[0] == "09:00"
    assert bookable[-1] == "16:30"
    assert len(bookable) == 16


def test_booked_lesson_closes_overlapping_slots(client, db, teacher, learner, open_tomorrow):
    add_lesson(db, teacher.id, learner.id, datetime.combine(TOMORROW, time(10, 0)))

    body = _grid(client, teacher.id, TOMORROW, duration=60).json()
    bookable = {slot["time"]: slot["bookable"] for slot in body["slots"]}

    # 09:30 would run into the 10:00-11:00 lesson; 11:00 starts as it ends.
    assert bookable["09:00"] is True
    assert bookable["09:30"] is False
    assert bookable["10:00"] is False
    assert bookable["10:30"] is False
    assert bookable["11:00"] is True


def test_blocked_date_closes_everything(client, db, teacher, open_tomorrow):
    add_blocked_date(db, teacher.id, TOMORROW)

    body = _grid(client, teacher.id, TOMORROW).json()

    assert not any(slot["bookable"] for slot in body["slots"])


def test_unsupported_duration_is_rejected(client, teacher, open_tomorrow):
    response = _grid(client, teacher.id, TOMORROW, duration=45)

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "unsupported_duration"


def test_missing_date_is_a_validation_error(client, teacher):
    response = client.get(f"/api/v1/teachers/{teacher.id}/availability")
    assert response.status_code == 422


def test_bookable_slots_listing(client, teacher, open_tomorrow):
    response = client.get(
        f"/api/v1/teachers/{teacher.id}/bookable-slots",
        params={
            "start_date": TODAY.isoformat(),
            "end_date": TOMORROW.isoformat(),
            "duration": 60,
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["starts"][0] == f"{TOMORROW.isoformat()}T09:00:00"
    assert len(body["starts"]) == 16


def test_bookable_slots_reversed_range(client, teacher):
    response = client.get(
        f"/api/v1/teachers/{teacher.id}/bookable-slots",
        params={
            "start_date": TOMORROW.isoformat(),
            "end_date": (TOMORROW - timedelta(days=2)).isoformat(),
        },
    )

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "invalid_date_range"
