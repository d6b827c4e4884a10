"""Tests for the notes manager and the shared EntityManager behaviour."""

from __future__ import annotations

from datetime import UTC

from mindscribe.bus import STORAGE_ERROR, EventBus
from mindscribe.managers import NotesManager
from mindscribe.models import NoteDraft, NotePatch
from mindscribe.storage import PersistenceAdapter

from tests.conftest import NOW, FakeClock, FlakyBackend


def _ids(items) -> list[str]:
    return [item.id for item in items]


# ---------------------------------------------------------------------------
# Loading and seeding
# ---------------------------------------------------------------------------


class TestInit:
    def test_seeds_samples_into_empty_store(
        self, notes: NotesManager, storage: PersistenceAdapter
    ) -> None:
        assert notes.count == 4
        stored = storage.load("notes")
        assert [n["id"] for n in stored] == ["note1", "note2", "note3", "note4"]
        assert "createdAt" in stored[0]

    def test_loads_existing_data(self, storage: PersistenceAdapter, clock: FakeClock) -> None:
        storage.save(
            "notes",
            [{"id": "mine", "title": "Kept", "createdAt": "2024-01-01T00:00:00Z",
              "updatedAt": "2024-01-01T00:00:00Z"}],
        )
        manager = NotesManager(storage, clock=clock, tz=UTC)
        assert _ids(manager.init()) == ["mine"]

    def test_empty_stored_collection_is_reseeded(
        self, storage: PersistenceAdapter, clock: FakeClock
    ) -> None:
        storage.save("notes", [])
        manager = NotesManager(storage, clock=clock, tz=UTC)
        assert _ids(manager.init()) == ["note1", "note2", "note3", "note4"]
        assert len(storage.load("notes")) == 4

    def test_empty_stored_collection_kept_without_seeding(
        self, storage: PersistenceAdapter, clock: FakeClock
    ) -> None:
        storage.save("notes", [])
        manager = NotesManager(storage, clock=clock, tz=UTC, seed_samples=False)
        assert manager.init() == []

    def test_invalid_data_is_replaced_by_samples(
        self, storage: PersistenceAdapter, clock: FakeClock
    ) -> None:
        storage.save("notes", [{"bogus": True}])
        manager = NotesManager(storage, clock=clock, tz=UTC)
        assert manager.init()[0].id == "note1"

    def test_seeding_can_be_disabled(
        self, storage: PersistenceAdapter, clock: FakeClock
    ) -> None:
        manager = NotesManager(storage, clock=clock, tz=UTC, seed_samples=False)
        assert manager.init() == []
        assert storage.load("notes") == []

    def test_publishes_loaded(self, storage: PersistenceAdapter, bus: EventBus) -> None:
        seen: list = []
        bus.subscribe("notes_loaded", seen.append)
        NotesManager(storage, bus=bus).init()
        assert len(seen) == 1 and len(seen[0]) == 4


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


class TestCreate:
    def test_defaults_and_position(self, notes: NotesManager) -> None:
        note = notes.create()
        assert note.title == "Untitled Note"
        assert note.category == "Personal"
        assert note.created_at == note.updated_at == NOW
        assert notes.get_all()[0].id == note.id
        assert notes.count == 5

    def test_draft_values_win(self, notes: NotesManager) -> None:
        note = notes.create(
            NoteDraft(title="Ideas", category="Idea", content="x", tags=["a", "a", " b "])
        )
        assert (note.title, note.category, note.content) == ("Ideas", "Idea", "x")
        assert note.tags == ["a", "b"]

    def test_persists_immediately(
        self, notes: NotesManager, storage: PersistenceAdapter
    ) -> None:
        note = notes.create(NoteDraft(title="Saved"))
        assert storage.load("notes")[0]["id"] == note.id

    def test_publishes_created(self, notes: NotesManager, bus: EventBus) -> None:
        seen: list = []
        bus.subscribe("note_created", seen.append)
        note = notes.create(NoteDraft(title="Hi"))
        assert [n.id for n in seen] == [note.id]


class TestUpdate:
    def test_merges_and_bumps_updated_at(
        self, notes: NotesManager, clock: FakeClock
    ) -> None:
        later = clock.advance(minutes=5)
        before = notes.get_by_id("note2")
        updated = notes.update("note2", NotePatch(title="Renamed"))

        assert updated.title == "Renamed"
        assert updated.content == before.content
        assert updated.tags == before.tags
        assert updated.created_at == before.created_at
        assert updated.updated_at == later

    def test_changes_only_patched_field(self, notes: NotesManager, clock: FakeClock) -> None:
        before = notes.get_by_id("note4").model_dump()
        clock.advance(minutes=1)
        after = notes.update("note4", NotePatch(category="Idea")).model_dump()
        changed = {k for k in before if before[k] != after[k]}
        assert changed == {"category", "updated_at"}

    def test_none_and_blank_fields_are_ignored(self, notes: NotesManager) -> None:
        updated = notes.update("note1", NotePatch(title="   ", content=None, tags=["new"]))
        assert updated.title == "Web Development Trends 2024"
        assert updated.content.startswith("Exploration")
        assert updated.tags == ["new"]

    def test_updated_at_never_before_created_at(
        self, notes: NotesManager, clock: FakeClock
    ) -> None:
        note = notes.create(NoteDraft(title="Fresh"))
        clock.advance(hours=-3)  # clock went backwards
        assert notes.update(note.id, NotePatch(content="x")).updated_at == note.created_at

    def test_keeps_position(self, notes: NotesManager) -> None:
        notes.update("note3", NotePatch(title="Moved?"))
        assert _ids(notes.get_all()) == ["note1", "note2", "note3", "note4"]

    def test_unknown_id(self, notes: NotesManager, bus: EventBus) -> None:
        seen: list = []
        bus.subscribe("note_updated", seen.append)
        assert notes.update("missing", NotePatch(title="x")) is None
        assert seen == []


class TestDelete:
    def test_delete_twice(self, notes: NotesManager) -> None:
        assert notes.delete("note2") is True
        after_first = notes.get_all()
        assert notes.delete("note2") is False
        assert notes.get_all() == after_first

    def test_delete(self, notes: NotesManager, storage: PersistenceAdapter) -> None:
        assert notes.delete("note2") is True
        assert notes.get_by_id("note2") is None
        assert "note2" not in [n["id"] for n in storage.load("notes")]

    def test_delete_unknown(self, notes: NotesManager) -> None:
        assert notes.delete("missing") is False
        assert notes.count == 4

    def test_publishes_deleted_id(self, notes: NotesManager, bus: EventBus) -> None:
        seen: list = []
        bus.subscribe("note_deleted", seen.append)
        notes.delete("note1")
        assert seen == ["note1"]


class TestSnapshots:
    def test_get_all_returns_copies(self, notes: NotesManager) -> None:
        snapshot = notes.get_all()
        snapshot[0].title = "Mutated"
        snapshot[0].tags.append("oops")
        snapshot.clear()
        assert notes.get_by_id("note1").title == "Web Development Trends 2024"
        assert notes.get_by_id("note1").tags == ["Tech", "Trends"]

    def test_recent(self, notes: NotesManager) -> None:
        assert _ids(notes.recent(2)) == ["note1", "note2"]


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TestSearch:
    def test_title_match_case_insensitive(self, notes: NotesManager) -> None:
        assert _ids(notes.search("WEB DEVELOPMENT")) == ["note1"]

    def test_content_and_tag_match(self, notes: NotesManager) -> None:
        assert _ids(notes.search("webassembly")) == ["note1"]
        assert _ids(notes.search("marketing")) == ["note2"]

    def test_short_query_returns_everything(self, notes: NotesManager) -> None:
        assert len(notes.search("w")) == 4
        assert len(notes.search("")) == 4
        assert len(notes.search(None)) == 4

    def test_no_match(self, notes: NotesManager) -> None:
        assert notes.search("zzzz") == []


class TestFilters:
    def test_by_category(self, notes: NotesManager) -> None:
        assert _ids(notes.filter_by_category("Research")) == ["note1"]
        assert _ids(notes.filter_by_category("research")) == ["note1"]

    def test_all_category(self, notes: NotesManager) -> None:
        assert len(notes.filter_by_category("All")) == 4
        assert len(notes.filter_by_category(None)) == 4

    def test_by_tag(self, notes: NotesManager) -> None:
        assert _ids(notes.filter_by_tag("tech")) == ["note1"]
        assert notes.filter_by_tag("go") == []

    def test_all_tags(self, notes: NotesManager) -> None:
        assert notes.all_tags() == ["Design", "Marketing", "Reading", "Tech", "Trends", "UI"]

    def test_category_counts(self, notes: NotesManager) -> None:
        assert notes.category_counts() == {
            "Research": 1,
            "Meeting": 1,
            "Personal": 1,
            "Project": 1,
        }


class TestSort:
    def test_default_is_most_recently_updated(self, notes: NotesManager) -> None:
        assert _ids(notes.sort()) == ["note1", "note2", "note4", "note3"]

    def test_ascending(self, notes: NotesManager) -> None:
        assert _ids(notes.sort("updated_at", True)) == ["note3", "note4", "note2", "note1"]

    def test_camel_case_field(self, notes: NotesManager) -> None:
        assert _ids(notes.sort("updatedAt", True)) == _ids(notes.sort("updated_at", True))

    def test_by_title(self, notes: NotesManager) -> None:
        assert _ids(notes.sort("title", True)) == ["note3", "note4", "note2", "note1"]

    def test_unknown_field_keeps_order(self, notes: NotesManager) -> None:
        assert _ids(notes.sort("colour")) == ["note1", "note2", "note3", "note4"]

    def test_sort_does_not_reorder_collection(self, notes: NotesManager) -> None:
        notes.sort("title", True)
        assert _ids(notes.get_all()) == ["note1", "note2", "note3", "note4"]


# ---------------------------------------------------------------------------
# Storage failures
# ---------------------------------------------------------------------------


class TestStorageFailure:
    def test_mutation_kept_in_memory_and_reported(
        self, notes: NotesManager, backend: FlakyBackend, bus: EventBus
    ) -> None:
        errors: list = []
        bus.subscribe(STORAGE_ERROR, errors.append)
        backend.fail = True

        note = notes.create(NoteDraft(title="Unsaved"))

        assert notes.get_by_id(note.id) is not None
        assert len(errors) == 1
        assert errors[0]["collection"] == "notes"
        assert "disk full" in errors[0]["error"]

    def test_created_event_still_published(
        self, notes: NotesManager, backend: FlakyBackend, bus: EventBus
    ) -> None:
        seen: list = []
        bus.subscribe("note_created", seen.append)
        backend.fail = True
        notes.create(NoteDraft(title="Unsaved"))
        assert len(seen) == 1


class TestSubscription:
    def test_manager_subscribe_and_unsubscribe(self, notes: NotesManager) -> None:
        seen: list = []
        notes.subscribe("note_deleted", seen.append)
        notes.delete("note1")
        assert notes.unsubscribe("note_deleted", seen.append) is True
        notes.delete("note2")
        assert seen == ["note1"]

    def test_event_names(self, notes: NotesManager) -> None:
        assert notes.event_names() == [
            "notes_loaded",
            "note_created",
            "note_updated",
            "note_deleted",
        ]
