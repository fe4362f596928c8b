from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from venue_booking.api.routes.routes import get_store
from venue_booking.infrastructure.repositories.partition_store import InMemoryPartitionStore
from venue_booking.main import app


class FakeClock:
    """Deterministic, manually advanced UTC clock."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2030, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store():
    return InMemoryPartitionStore()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
