from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from botcall.config import RegistrySettings
from botcall.registry import AgentRecord, PresenceStore
from botcall.service import RegistryService
from botcall.transport import create_app


class FakeClock:
    """Manually advanced clock for the presence store."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture
def make_record():
    def _make(agent_id: str = "orion", endpoint: str = "192.168.1.100:9000", **kwargs) -> AgentRecord:
        return AgentRecord(agent_id=agent_id, endpoint=endpoint, **kwargs)
    return _make


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return PresenceStore(clock=clock)


@pytest.fixture
def settings():
    return RegistrySettings(
        liveness_window_seconds=300,
        heartbeat_interval_seconds=0.05,
        retention_seconds=3600,
    )


@pytest.fixture
def service(store, settings):
    return RegistryService(store=store, settings=settings)


@pytest.fixture
def app(store, settings):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    """TestClient with lifespan; one event loop for every request."""
    with TestClient(app) as test_client:
        yield test_client
