"""Shared pytest fixtures."""
from datetime import datetime, timedelta, timezone

import pytest

from estate_checkin.events.schemas import EventCreate, EventType
from estate_checkin.events.service import EventService
from estate_checkin.memory_store import MemoryStore
from estate_checkin.participants.schemas import Participant
from estate_checkin.schemas import Coordinates
from estate_checkin.seed import seed_store
from estate_checkin.settings import Settings


class FakeClock:
    """Controllable replacement for ``utcnow``."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 6, 1, 10, 15, tzinfo=timezone.utc))


@pytest.fixture
def app_settings():
    return Settings(
        frontend_url="https://estate.example.com",
        database_url=None,
        seed_sample_data=False,
        location_timeout_seconds=0.5,
    )


@pytest.fixture
def store():
    store = MemoryStore()
    seed_store(store)
    return store


@pytest.fixture
def event_service(store, app_settings, clock):
    return EventService(store, app_settings, clock=clock)


@pytest.fixture
def event_data():
    return EventCreate(
        title="Open House",
        type=EventType.property,
        start=datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc),
        end=datetime(2024, 6, 1, 11, 0, tzinfo=timezone.utc),
        location="123 Main Street, Los Angeles, CA 90001",
        coordinates=Coordinates(lat=34.0522, lng=-118.2437),
        participants=[
            Participant(id="user-1", name="John Smith", email="john.smith@example.com", role="agent"),
            Participant(id="user-3", name="Michael Brown", email="michael.brown@example.com", role="client"),
        ],
    )


@pytest.fixture
def event(event_service, event_data):
    return event_service.create_event(event_data)
