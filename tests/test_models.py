"""Unit tests for mindscribe.models and mindscribe.schemas."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from mindscribe.models import Event, Note, NoteDraft, NotePatch, Task
from mindscribe.schemas import BookmarkCreate, EventCreate, NoteCreate


class TestNoteModel:
    def test_defaults(self) -> None:
        note = Note(title="Hello")
        assert note.id
        assert note.category == "Personal"
        assert note.content == ""
        assert note.tags == []
        assert note.created_at.tzinfo is not None

    def test_ids_are_unique(self) -> None:
        assert Note(title="a").id != Note(title="b").id

    def test_title_length(self) -> None:
        with pytest.raises(ValidationError):
            Note(title="")
        with pytest.raises(ValidationError):
            Note(title="x" * 201)

    def test_unknown_category_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Note(title="T", category="Groceries")

    def test_tags_normalized(self) -> None:
        note = Note(title="T", tags=[" python ", "", "python", "web"])
        assert note.tags == ["python", "web"]

    def test_wire_format_is_camel_case(self) -> None:
        data = Note(title="T").to_json()
        assert "createdAt" in data and "updatedAt" in data
        assert "created_at" not in data

    def test_accepts_camel_case_input(self) -> None:
        note = Note.model_validate(
            {"title": "T", "createdAt": "2023-11-14T10:30:00Z"}
        )
        assert note.created_at == datetime(2023, 11, 14, 10, 30, tzinfo=UTC)

    def test_naive_timestamps_are_utc(self) -> None:
        task = Task(title="T", due_date=datetime(2024, 1, 1, 9, 0))
        assert task.due_date.tzinfo is UTC


class TestDrafts:
    def test_blank_title_is_unset(self) -> None:
        assert NoteDraft(title="   ").title is None

    def test_patch_tracks_only_given_fields(self) -> None:
        patch = NotePatch.model_validate({"content": "new"})
        assert patch.model_dump(exclude_unset=True) == {"content": "new"}


class TestCreateSchemas:
    def test_note_requires_title(self) -> None:
        with pytest.raises(ValidationError):
            NoteCreate(content="body")
        with pytest.raises(ValidationError):
            NoteCreate(title="   ")

    def test_note_title_is_stripped(self) -> None:
        assert NoteCreate(title="  Hi  ").title == "Hi"

    def test_event_end_before_start(self) -> None:
        with pytest.raises(ValidationError, match="End time cannot be before start time"):
            EventCreate(
                title="Backwards",
                start=datetime(2024, 1, 1, 10, tzinfo=UTC),
                end=datetime(2024, 1, 1, 9, tzinfo=UTC),
            )

    def test_zero_length_event_allowed(self) -> None:
        moment = datetime(2024, 1, 1, 10, tzinfo=UTC)
        event = EventCreate(title="Deadline", start=moment, end=moment)
        assert event.end == event.start

    def test_event_fields_are_plain_event(self) -> None:
        body = EventCreate(
            title="Meet",
            start="2024-01-01T10:00:00Z",
            end="2024-01-01T11:00:00Z",
        )
        event = Event(**body.model_dump(exclude_none=True))
        assert event.category == "Personal"

    @pytest.mark.parametrize("url", ["ftp://example.com", "example.com", "https://"])
    def test_bookmark_url_must_be_http(self, url: str) -> None:
        with pytest.raises(ValidationError):
            BookmarkCreate(title="Link", url=url)

    def test_bookmark_url_accepted(self) -> None:
        assert BookmarkCreate(title="Docs", url=" https://docs.python.org ").url == (
            "https://docs.python.org"
        )
