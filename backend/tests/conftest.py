"""
Shared fixtures for the lesson booking test suite.

Every test gets a fresh in-memory SQLite database and a clock pinned to
Monday 2024-01-01 10:00, so lead-time rules are deterministic.
"""

import os

# Must be set before lesson_booking is imported: settings and the module engine read it.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import time  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import List  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from lesson_booking import models  # noqa: E402,F401  registers tables on Base.metadata
from lesson_booking.core.clock import fixed_clock  # noqa: E402
from lesson_booking.core.ulid_helper import generate_ulid  # noqa: E402
from lesson_booking.database import Base, create_database_engine  # noqa: E402
from lesson_booking.models import (  # noqa: E402
    Learner,
    Subject,
    TeacherProfile,
    TeacherSubjectRate,
)
from tests.factories.lesson_builders import NOW, TOMORROW, add_recurring, half_hours  # noqa: E402

_OPEN_HOURS = (time(9, 0), time(17, 0))


@pytest.fixture
def engine():
    engine = create_database_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine) -> Session:
    """
    A single session on the in-memory engine.

    The engine has one shared connection and opens every transaction with
    BEGIN IMMEDIATE, so tests must not open a second session on it.
    """
    TestingSessionLocal = sessionmaker(
        bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def clock():
    return fixed_clock(NOW)


@pytest.fixture
def teacher(db: Session) -> TeacherProfile:
    profile = TeacherProfile(display_name="Ms. Rivera", hourly_rate=Decimal("40.00"))
    db.add(profile)
    db.commit()
    return profile


@pytest.fixture
def subject(db: Session) -> Subject:
    record = Subject(slug="piano", name="Piano", minimum_rate=Decimal("20.00"))
    db.add(record)
    db.commit()
    return record


@pytest.fixture
def subject_rate(db: Session, teacher: TeacherProfile, subject: Subject) -> TeacherSubjectRate:
    rate = TeacherSubjectRate(
        teacher_id=teacher.id, subject_id=subject.id, hourly_rate=Decimal("50.00")
    )
    db.add(rate)
    db.commit()
    return rate


@pytest.fixture
def learner(db: Session) -> Learner:
    record = Learner(parent_id=generate_ulid(), name="Sam")
    db.add(record)
    db.commit()
    return record


@pytest.fixture
def other_learner(db: Session) -> Learner:
    record = Learner(parent_id=generate_ulid(), name="Alex")
    db.add(record)
    db.commit()
    return record


@pytest.fixture
def open_tomorrow(db: Session, teacher: TeacherProfile) -> List:
    """Teacher open 09:00-17:00 on Tuesdays (TOMORROW)."""
    times = half_hours(*_OPEN_HOURS)
    add_recurring(db, teacher.id, TOMORROW, times)
    return times
