"""API client wired to the test session and the fixed clock."""

from fastapi.testclient import TestClient
import pytest
from sqlalchemy.orm import Session

from lesson_booking.api.dependencies import get_clock, get_db
from lesson_booking.main import app


@pytest.fixture
def client(db: Session, clock):
    """Create a test client with the test database."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    # Don't use context manager - the lifespan would touch the module engine
    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()
