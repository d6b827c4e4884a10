"""Pydantic models for MindScribe entities.

Attributes are snake_case in Python and camelCase on the wire and in
storage (``createdAt``, ``dueDate``, ...). Timestamps are always
timezone-aware; naive input is read as UTC.

Each entity has a matching *draft* (input to ``create``, every field
optional) and *patch* (input to ``update``, only fields that are set and
not None are applied).
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any, Literal, Optional
from uuid import uuid4

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

NoteCategory = Literal["Research", "Meeting", "Personal", "Project", "Idea"]
Priority = Literal["Low", "Medium", "High"]

NOTE_CATEGORIES: tuple[str, ...] = ("Research", "Meeting", "Personal", "Project", "Idea")
EVENT_CATEGORIES: tuple[str, ...] = ("Work", "Personal", "Meeting", "Appointment", "Other")
PRIORITIES: tuple[str, ...] = ("Low", "Medium", "High")
PRIORITY_RANK: dict[str, int] = {"Low": 1, "Medium": 2, "High": 3}


def _as_aware(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


def normalize_tags(tags: list[str]) -> list[str]:
    """Strip, drop blanks and de-duplicate while keeping first-seen order."""
    seen: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def _blank_to_none(value: str) -> Optional[str]:
    if not value.strip():
        return None
    return value


Timestamp = Annotated[datetime, AfterValidator(_as_aware)]
Tags = Annotated[list[str], AfterValidator(normalize_tags)]
DraftText = Optional[
    Annotated[str, Field(max_length=200), AfterValidator(_blank_to_none)]
]


def utc_now() -> datetime:
    return datetime.now(UTC)


class CamelModel(BaseModel):
    """Base model serialising to camelCase while accepting either form."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict[str, Any]:
        """JSON-ready dict using wire (camelCase) names."""
        return self.model_dump(mode="json", by_alias=True)


class Entity(CamelModel):
    """Fields shared by every stored record."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    created_at: Timestamp = Field(default_factory=utc_now)
    updated_at: Timestamp = Field(default_factory=utc_now)

    def search_text(self) -> list[str]:
        """Strings matched by free-text search."""
        return []


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


class Note(Entity):
    """A single note with metadata."""

    title: str = Field(..., min_length=1, max_length=200)
    category: NoteCategory = "Personal"
    content: str = ""
    tags: Tags = Field(default_factory=list)

    def search_text(self) -> list[str]:
        return [self.title, self.content, self.category, *self.tags]


class NoteDraft(CamelModel):
    title: DraftText = None
    category: Optional[NoteCategory] = None
    content: Optional[str] = None
    tags: Optional[Tags] = None


class NotePatch(NoteDraft):
    pass


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


class Task(Entity):
    """A to-do item with a due date and priority."""

    title: str = Field(..., min_length=1, max_length=200)
    due_date: Timestamp = Field(default_factory=utc_now)
    priority: Priority = "Medium"
    completed: bool = False

    def search_text(self) -> list[str]:
        return [self.title, self.priority]


class TaskDraft(CamelModel):
    title: DraftText = None
    due_date: Optional[Timestamp] = None
    priority: Optional[Priority] = None
    completed: Optional[bool] = None


class TaskPatch(TaskDraft):
    pass


# ---------------------------------------------------------------------------
# Calendar events
# ---------------------------------------------------------------------------


class Event(Entity):
    """A calendar entry. ``end >= start`` is checked where input arrives."""

    title: str = Field(..., min_length=1, max_length=200)
    start: Timestamp = Field(default_factory=utc_now)
    end: Timestamp = Field(default_factory=utc_now)
    category: str = "Personal"
    description: str = ""

    def search_text(self) -> list[str]:
        return [self.title, self.description, self.category]


class EventDraft(CamelModel):
    title: DraftText = None
    start: Optional[Timestamp] = None
    end: Optional[Timestamp] = None
    category: Optional[str] = None
    description: Optional[str] = None


class EventPatch(EventDraft):
    pass


# ---------------------------------------------------------------------------
# Bookmarks & projects
# ---------------------------------------------------------------------------


class Bookmark(Entity):
    """A saved link."""

    title: str = Field(..., min_length=1, max_length=200)
    url: str
    category: str = "Other"
    tags: Tags = Field(default_factory=list)
    description: str = ""

    def search_text(self) -> list[str]:
        return [self.title, self.url, self.description, self.category, *self.tags]


class BookmarkDraft(CamelModel):
    title: DraftText = None
    url: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[Tags] = None
    description: Optional[str] = None


class BookmarkPatch(BookmarkDraft):
    pass


class Project(Entity):
    """A named grouping shown on the dashboard."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""

    def search_text(self) -> list[str]:
        return [self.name, self.description]


class ProjectDraft(CamelModel):
    name: DraftText = None
    description: Optional[str] = None


class ProjectPatch(ProjectDraft):
    pass
