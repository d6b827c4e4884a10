"""Request bodies accepted by the HTTP API.

These are stricter than the manager drafts: a title is required and an
event must not end before it starts. Rejected input never reaches a
manager, so the collections stay unchanged.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated
from urllib.parse import urlsplit

from pydantic import AfterValidator, Field, field_validator, model_validator

from mindscribe.models import (
    BookmarkDraft,
    EventDraft,
    NoteDraft,
    ProjectDraft,
    TaskDraft,
    Timestamp,
)

EVENT_WINDOW_ERROR = "End time cannot be before start time"


def _required_title(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Please enter a title")
    return value


RequiredTitle = Annotated[str, Field(max_length=200), AfterValidator(_required_title)]


def check_event_window(start: datetime, end: datetime) -> None:
    """Raise ValueError when ``end`` precedes ``start``."""
    if end < start:
        raise ValueError(EVENT_WINDOW_ERROR)


class NoteCreate(NoteDraft):
    title: RequiredTitle


class TaskCreate(TaskDraft):
    title: RequiredTitle


class EventCreate(EventDraft):
    title: RequiredTitle
    start: Timestamp
    end: Timestamp

    @model_validator(mode="after")
    def check_window(self) -> "EventCreate":
        check_event_window(self.start, self.end)
        return self


class BookmarkCreate(BookmarkDraft):
    title: RequiredTitle
    url: str

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str) -> str:
        value = value.strip()
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError("Bookmark URL must start with http:// or https://")
        return value


class ProjectCreate(ProjectDraft):
    name: RequiredTitle

