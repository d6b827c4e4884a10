"""Shared fixtures: a fixed clock, in-memory storage and wired services."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from mindscribe.bus import EventBus
from mindscribe.config import Settings
from mindscribe.managers import EventsManager, NotesManager, TasksManager
from mindscribe.services import Services, build_services
from mindscribe.storage import MemoryBackend, PersistenceAdapter

# Sample data is dated around this moment
NOW = datetime(2023, 11, 14, 12, 0, tzinfo=UTC)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now += timedelta(**delta)
        return self.now


class FlakyBackend(MemoryBackend):
    """Memory backend whose writes can be switched off."""

    def __init__(self) -> None:
        super().__init__()
        self.fail = False

    def set(self, key: str, value: str) -> None:
        if self.fail:
            raise OSError("disk full")
        super().set(key, value)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def backend() -> FlakyBackend:
    return FlakyBackend()


@pytest.fixture()
def storage(backend: FlakyBackend) -> PersistenceAdapter:
    return PersistenceAdapter(backend)


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def notes(storage: PersistenceAdapter, bus: EventBus, clock: FakeClock) -> NotesManager:
    manager = NotesManager(storage, bus=bus, clock=clock, tz=UTC)
    manager.init()
    return manager


@pytest.fixture()
def tasks(storage: PersistenceAdapter, bus: EventBus, clock: FakeClock) -> TasksManager:
    manager = TasksManager(storage, bus=bus, clock=clock, tz=UTC)
    manager.init()
    return manager


@pytest.fixture()
def events(storage: PersistenceAdapter, bus: EventBus, clock: FakeClock) -> EventsManager:
    manager = EventsManager(storage, bus=bus, clock=clock, tz=UTC)
    manager.init()
    return manager


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(storage_backend="memory", timezone="UTC", storage_quota_mb=5.0)


@pytest.fixture()
def services(test_settings: Settings, backend: FlakyBackend, clock: FakeClock) -> Services:
    return build_services(test_settings, backend=backend, clock=clock)
