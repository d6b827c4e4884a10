"""Notes collection."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from mindscribe.managers.base import EntityManager
from mindscribe.models import NOTE_CATEGORIES, Note, NoteDraft, NotePatch
from mindscribe.samples import SAMPLE_NOTES


class NotesManager(EntityManager[Note, NoteDraft, NotePatch]):
    model = Note
    draft_model = NoteDraft
    entity_name = "note"
    collection = "notes"
    default_title = "Untitled Note"
    default_sort = ("updated_at", False)

    categories = NOTE_CATEGORIES

    def sample_data(self) -> list[dict[str, Any]]:
        return [dict(note) for note in SAMPLE_NOTES]

    def defaults(self, now: datetime) -> dict[str, Any]:
        return {"title": self.default_title, "category": "Personal"}

    def recent(self, limit: int = 4) -> list[Note]:
        """The first ``limit`` notes in collection order."""
        return self.get_all()[:limit]
