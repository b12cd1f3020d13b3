"""Shared test fixtures for Showing Desk tests.

Every test gets its own in-memory store driven by a fake clock, and the API
is pointed at that store through a dependency override.
"""

from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from showing_desk.core.config import settings
from showing_desk.core.deps import get_store
from showing_desk.core.seed import demo_appointments
from showing_desk.main import app
from showing_desk.models.appointment import PropertySnapshot, Requester
from showing_desk.services.appointment_store import AppointmentStore


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture(autouse=True)
def wall_clock_zone(monkeypatch):
    """Pin the wall-clock zone so aware inputs convert predictably."""
    monkeypatch.setattr(settings, "TIMEZONE", "UTC")


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 3, 15, 10, 30))


@pytest.fixture
def store(clock):
    """Empty store using the fake clock."""
    return AppointmentStore(clock=clock, number_prefix="YY")


@pytest.fixture
def demo_store(store):
    """Store pre-loaded with the twelve demo appointments."""
    for appointment in demo_appointments():
        store.add(appointment)
    return store


@pytest.fixture
def requester():
    return Requester(name="Zhang San", phone="138****5678", user_id="U001")


@pytest.fixture
def property_ref():
    return PropertySnapshot(
        property_id="P001",
        name="Sunshine Garden 2BR",
        layout="2 bed, 1 living, 1 bath",
        address="88 Jianguo Rd, Chaoyang, Beijing",
    )


@pytest.fixture
def make_appointment(store, requester, property_ref):
    """Create a pending appointment in ``store``."""
    def _make(scheduled_at=datetime(2025, 3, 15, 14, 30), name=None):
        prop = property_ref if name is None else property_ref.model_copy(update={"name": name})
        return store.create(requester, prop, scheduled_at)
    return _make


@pytest_asyncio.fixture
async def client(demo_store):
    """Async HTTP test client bound to the demo store."""
    app.dependency_overrides[get_store] = lambda: demo_store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
