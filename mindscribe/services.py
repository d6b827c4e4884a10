"""Construction of the storage adapter, bus, managers and renderer."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from mindscribe.bus import STORAGE_ERROR, EventBus
from mindscribe.calendar_grid import CalendarCursor
from mindscribe.config import Settings
from mindscribe.managers import (
    BookmarksManager,
    EntityManager,
    EventsManager,
    NotesManager,
    ProjectsManager,
    TasksManager,
)
from mindscribe.managers.base import Clock
from mindscribe.metrics import ENTITY_MUTATIONS
from mindscribe.models import utc_now
from mindscribe.storage import (
    JsonFileBackend,
    MemoryBackend,
    PersistenceAdapter,
    RedisBackend,
    StorageBackend,
)
from mindscribe.views import ViewRenderer

logger = logging.getLogger(__name__)


@dataclass
class StorageHealth:
    """Most recent persistence failure, if any."""

    last_error: Optional[str] = None
    last_error_at: Optional[datetime] = None
    failures: int = 0

    @property
    def degraded(self) -> bool:
        return self.last_error is not None

    def record(self, payload: dict[str, Any]) -> None:
        self.failures += 1
        self.last_error = f"{payload.get('collection')}: {payload.get('error')}"
        self.last_error_at = utc_now()

    def reset(self) -> None:
        self.last_error = None
        self.last_error_at = None


@dataclass
class Services:
    storage: PersistenceAdapter
    bus: EventBus
    notes: NotesManager
    tasks: TasksManager
    events: EventsManager
    bookmarks: BookmarksManager
    projects: ProjectsManager
    renderer: ViewRenderer
    cursor: CalendarCursor = field(default_factory=CalendarCursor)
    health: StorageHealth = field(default_factory=StorageHealth)
    lock: threading.RLock = field(default_factory=threading.RLock)

    @property
    def managers(self) -> list[EntityManager]:
        return [self.notes, self.tasks, self.events, self.bookmarks, self.projects]

    def init(self) -> None:
        """Load (or seed) every collection."""
        for manager in self.managers:
            manager.init()

    def reset(self) -> bool:
        """Wipe stored data and reload the samples."""
        cleared = self.storage.clear_all()
        self.health.reset()
        self.init()
        return cleared


def build_backend(settings: Settings) -> StorageBackend:
    if settings.storage_backend == "memory":
        return MemoryBackend()
    if settings.storage_backend == "redis":
        backend = RedisBackend(settings.redis_url)
        if not backend.ping():
            logger.warning(
                "Redis at %s is not answering — saves will fail until it is back",
                settings.redis_url,
            )
        return backend
    return JsonFileBackend(settings.data_path)


def build_services(
    settings: Settings,
    backend: Optional[StorageBackend] = None,
    clock: Optional[Clock] = None,
) -> Services:
    """Wire everything together and load the collections."""
    storage = PersistenceAdapter(
        backend or build_backend(settings),
        prefix=settings.storage_prefix,
        quota_bytes=settings.quota_bytes,
    )
    bus = EventBus()
    common: dict[str, Any] = {
        "bus": bus,
        "clock": clock,
        "tz": settings.tz,
        "seed_samples": settings.seed_samples,
    }
    notes = NotesManager(storage, **common)
    tasks = TasksManager(storage, **common)
    events = EventsManager(storage, **common)
    bookmarks = BookmarksManager(storage, **common)
    projects = ProjectsManager(storage, **common)

    services = Services(
        storage=storage,
        bus=bus,
        notes=notes,
        tasks=tasks,
        events=events,
        bookmarks=bookmarks,
        projects=projects,
        renderer=ViewRenderer(notes, tasks, events, bookmarks, projects, storage),
        cursor=CalendarCursor(bus=bus, today=events.today),
    )
    attach_observers(services)
    services.init()
    logger.info(
        "Services ready (backend=%s, prefix=%r)",
        type(storage.backend).__name__,
        storage.prefix,
    )
    return services


def attach_observers(services: Services) -> None:
    """Count mutations and track storage failures via the bus."""
    bus = services.bus
    bus.subscribe(STORAGE_ERROR, services.health.record)
    for manager in services.managers:
        for event in manager.event_names():
            if event.endswith("_loaded"):
                continue
            counter = ENTITY_MUTATIONS.labels(
                collection=manager.collection, operation=event.rsplit("_", 1)[1]
            )
            bus.subscribe(event, lambda _payload, counter=counter: counter.inc())
