"""Generic in-memory collection manager backed by the persistence adapter.

A manager owns one ordered collection (newest first). Every mutation is
persisted immediately and then published on the bus. Public operations
never raise: misses come back as ``None``/``False`` and storage failures
are logged and published as ``storage_error``.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from typing import Any, Callable, ClassVar, Generic, Optional, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from mindscribe.bus import STORAGE_ERROR, EventBus, Handler
from mindscribe.models import PRIORITY_RANK, CamelModel, Entity, utc_now
from mindscribe.storage import PersistenceAdapter

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Entity)
D = TypeVar("D", bound=CamelModel)
P = TypeVar("P", bound=CamelModel)

Clock = Callable[[], datetime]

MIN_QUERY_LENGTH = 2
ALL = "all"


def merge_patch(entity: E, patch: BaseModel, now: datetime) -> E:
    """Apply set, non-None patch fields over ``entity``; new value wins."""
    changes = patch.model_dump(exclude_unset=True, exclude_none=True)
    changes["updated_at"] = max(now, entity.created_at)
    return entity.model_copy(update=changes, deep=True)


class EntityManager(Generic[E, D, P]):
    """CRUD, queries and change notification for one entity type."""

    model: ClassVar[type[Entity]]
    draft_model: ClassVar[type[CamelModel]]
    entity_name: ClassVar[str]
    collection: ClassVar[str]
    title_field: ClassVar[str] = "title"
    default_title: ClassVar[str] = "Untitled"
    default_sort: ClassVar[tuple[str, bool]] = ("updated_at", False)

    def __init__(
        self,
        storage: PersistenceAdapter,
        bus: Optional[EventBus] = None,
        clock: Optional[Clock] = None,
        tz: Optional[tzinfo] = None,
        seed_samples: bool = True,
    ) -> None:
        self._storage = storage
        self._bus = bus or EventBus()
        self._clock = clock or utc_now
        self._tz = tz
        self._seed_samples = seed_samples
        self._items: list[E] = []
        self._list_adapter = TypeAdapter(list[self.model])  # type: ignore[name-defined]

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def sample_data(self) -> list[dict[str, Any]]:
        """Raw records used to seed an empty store."""
        return []

    def defaults(self, now: datetime) -> dict[str, Any]:
        """Values for fields a draft leaves out."""
        return {self.title_field: self.default_title}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def tz(self) -> Optional[tzinfo]:
        return self._tz

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return self.now().astimezone(self._tz).date()

    def init(self) -> list[E]:
        """Load the collection, seeding samples when nothing usable is stored.

        An empty stored list counts as nothing stored while seeding is on.
        """
        raw = self._storage.load(self.collection, None)
        items: Optional[list[E]] = None
        if raw is not None:
            try:
                items = self._list_adapter.validate_python(raw)
            except ValidationError as exc:
                logger.warning(
                    "Stored %s are invalid (%d errors) — using samples",
                    self.collection,
                    exc.error_count(),
                )

        if items is None or (not items and self._seed_samples):
            seed = self.sample_data() if self._seed_samples else []
            self._items = self._list_adapter.validate_python(seed)
            self._persist()
            logger.info("Seeded %d %s", len(self._items), self.collection)
        else:
            self._items = items
            logger.info("Loaded %d %s", len(self._items), self.collection)

        self.publish(f"{self.collection}_loaded", self.get_all())
        return self.get_all()

    def _persist(self) -> bool:
        payload = [item.model_dump(mode="json", by_alias=True) for item in self._items]
        ok = self._storage.save(self.collection, payload)
        if not ok:
            self.publish(
                STORAGE_ERROR,
                {"collection": self.collection, "error": self._storage.last_error},
            )
        return ok

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create(self, draft: Optional[D] = None) -> E:
        """Insert a new entity at the front of the collection."""
        now = self.now()
        fields = self.defaults(now)
        if draft is not None:
            fields.update(draft.model_dump(exclude_none=True))
        fields["created_at"] = now
        fields["updated_at"] = now
        entity: E = self.model(**fields)  # type: ignore[assignment]

        self._items.insert(0, entity)
        self._persist()
        logger.info("Created %s %s", self.entity_name, entity.id)
        self.publish(f"{self.entity_name}_created", entity.model_copy(deep=True))
        return entity.model_copy(deep=True)

    def update(self, entity_id: str, patch: P) -> Optional[E]:
        """Merge ``patch`` into the entity. None if the id is unknown."""
        index = self._index_of(entity_id)
        if index is None:
            return None

        updated = merge_patch(self._items[index], patch, self.now())
        self._items[index] = updated
        self._persist()
        logger.info("Updated %s %s", self.entity_name, entity_id)
        self.publish(f"{self.entity_name}_updated", updated.model_copy(deep=True))
        return updated.model_copy(deep=True)

    def delete(self, entity_id: str) -> bool:
        index = self._index_of(entity_id)
        if index is None:
            return False

        del self._items[index]
        self._persist()
        logger.info("Deleted %s %s", self.entity_name, entity_id)
        self.publish(f"{self.entity_name}_deleted", entity_id)
        return True

    def get_by_id(self, entity_id: str) -> Optional[E]:
        index = self._index_of(entity_id)
        return None if index is None else self._items[index].model_copy(deep=True)

    def get_all(self) -> list[E]:
        """Snapshot of the collection; callers may mutate it freely."""
        return [item.model_copy(deep=True) for item in self._items]

    @property
    def count(self) -> int:
        return len(self._items)

    def _index_of(self, entity_id: str) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.id == entity_id:
                return index
        return None

    def _select(self, predicate: Callable[[E], bool]) -> list[E]:
        return [item.model_copy(deep=True) for item in self._items if predicate(item)]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search(self, query: Optional[str]) -> list[E]:
        """Case-insensitive substring search over the entity's text fields."""
        if not query or len(query.strip()) < MIN_QUERY_LENGTH:
            return self.get_all()
        term = query.strip().casefold()
        return self._select(
            lambda item: any(term in text.casefold() for text in item.search_text())
        )

    def filter_by_category(self, category: Optional[str]) -> list[E]:
        if not category or category.casefold() == ALL:
            return self.get_all()
        wanted = category.casefold()
        return self._select(
            lambda item: str(getattr(item, "category", "")).casefold() == wanted
        )

    def filter_by_tag(self, tag: Optional[str]) -> list[E]:
        if not tag or tag.casefold() == ALL:
            return self.get_all()
        wanted = tag.casefold()
        return self._select(
            lambda item: any(t.casefold() == wanted for t in getattr(item, "tags", ()))
        )

    def all_tags(self) -> list[str]:
        tags: set[str] = set()
        for item in self._items:
            tags.update(getattr(item, "tags", ()))
        return sorted(tags, key=str.casefold)

    def category_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for item in self._items:
            category = getattr(item, "category", None)
            if category is not None:
                counts[category] = counts.get(category, 0) + 1
        return counts

    def sort(self, field: Optional[str] = None, ascending: Optional[bool] = None) -> list[E]:
        """Ordered snapshot. Ties keep their collection order either way."""
        default_field, default_ascending = self.default_sort
        name = self.resolve_field(field or default_field)
        if ascending is None:
            ascending = default_ascending
        if name is None:
            logger.warning("Cannot sort %s by unknown field %r", self.collection, field)
            return self.get_all()

        # sorted() is stable and reverse=True preserves the order of equal keys
        return sorted(
            self.get_all(),
            key=lambda item: _sort_key(name, getattr(item, name)),
            reverse=not ascending,
        )

    def resolve_field(self, field: str) -> Optional[str]:
        """Attribute name for either ``due_date`` or ``dueDate`` spelling."""
        fields = self.model.model_fields
        if field in fields:
            return field
        for name in fields:
            if to_camel(name) == field:
                return name
        return None

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, event: str, handler: Handler) -> Callable[[], bool]:
        return self._bus.subscribe(event, handler)

    def unsubscribe(self, event: str, handler: Handler) -> bool:
        return self._bus.unsubscribe(event, handler)

    def publish(self, event: str, payload: Any = None) -> int:
        return self._bus.publish(event, payload)

    def event_names(self) -> list[str]:
        """Change events this manager publishes."""
        return [
            f"{self.collection}_loaded",
            f"{self.entity_name}_created",
            f"{self.entity_name}_updated",
            f"{self.entity_name}_deleted",
        ]


def _sort_key(field: str, value: Any) -> Any:
    if field == "priority":
        return PRIORITY_RANK.get(value, 0)
    if isinstance(value, datetime):
        return value.timestamp()
    if isinstance(value, str):
        return value.casefold()
    if isinstance(value, (list, tuple)):
        return [str(v).casefold() for v in value]
    return value
