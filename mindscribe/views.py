"""View models for the dashboard, notes, tasks, calendar and bookmarks.

The renderer keeps no state of its own: every call rebuilds its output
from the managers it was given, so it can be called after any mutation.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from mindscribe.calendar_grid import month_name, next_month, previous_month
from mindscribe.dates import relative_time
from mindscribe.managers import (
    BookmarksManager,
    EventsManager,
    NotesManager,
    ProjectsManager,
    TasksManager,
)
from mindscribe.managers.bookmarks import domain_of
from mindscribe.managers.base import MIN_QUERY_LENGTH
from mindscribe.models import Bookmark, Event, Note, Task
from mindscribe.storage import PersistenceAdapter
from mindscribe.text import (
    category_color,
    format_note,
    highlight,
    priority_color,
    text_to_html,
    truncate,
)

logger = logging.getLogger(__name__)

VIEWS: tuple[str, ...] = ("dashboard", "notes", "tasks", "calendar", "bookmarks")
EXCERPT_LENGTH = 120
DASHBOARD_NOTES = 4


class ViewRenderer:
    """Builds JSON-ready view models from manager state."""

    def __init__(
        self,
        notes: NotesManager,
        tasks: TasksManager,
        events: EventsManager,
        bookmarks: BookmarksManager,
        projects: ProjectsManager,
        storage: PersistenceAdapter,
    ) -> None:
        self.notes = notes
        self.tasks = tasks
        self.events = events
        self.bookmarks = bookmarks
        self.projects = projects
        self.storage = storage
        self._views: dict[str, Callable[..., dict[str, Any]]] = {
            "dashboard": self.dashboard,
            "notes": self.notes_view,
            "tasks": self.tasks_view,
            "calendar": self.calendar_view,
            "bookmarks": self.bookmarks_view,
        }

    def render(self, view: str, **params: Any) -> dict[str, Any]:
        """Render ``view``; unknown names fall back to the dashboard."""
        builder = self._views.get(view)
        if builder is None:
            logger.info("Unknown view %r — rendering dashboard", view)
            view, builder, params = "dashboard", self.dashboard, {}
        return {"view": view, **builder(**params)}

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def dashboard(self) -> dict[str, Any]:
        return {
            "stats": {
                "notes": self.notes.count,
                "tasks": self.tasks.count,
                "bookmarks": self.bookmarks.count,
                "projects": self.projects.count,
                "pending": len(self.tasks.pending()),
                "overdue": len(self.tasks.overdue()),
            },
            "recentNotes": [self.note_card(n) for n in self.notes.recent(DASHBOARD_NOTES)],
            "tasks": [self.task_item(t) for t in self.tasks.get_all()],
            "todayEvents": [self.event_item(e) for e in self.events.events_today()],
            "upcomingEvents": [self.event_item(e) for e in self.events.upcoming()],
            "weekEvents": [self.event_item(e) for e in self.events.this_week()],
            "storage": self.storage_usage(),
        }

    def notes_view(
        self,
        category: Optional[str] = None,
        tag: Optional[str] = None,
        query: Optional[str] = None,
        sort: Optional[str] = None,
        ascending: Optional[bool] = None,
    ) -> dict[str, Any]:
        keep = _ids(self.notes.filter_by_category(category))
        keep &= _ids(self.notes.filter_by_tag(tag))
        keep &= _ids(self.notes.search(query))
        term = _search_term(query)

        counts = self.notes.category_counts()
        return {
            "notes": [
                self.note_card(n, term)
                for n in self.notes.sort(sort, ascending)
                if n.id in keep
            ],
            "categories": [
                {"name": name, "count": counts.get(name, 0), "color": category_color(name)}
                for name in self.notes.categories
            ],
            "tags": self.notes.all_tags(),
            "filters": {"category": category or "All", "tag": tag, "query": query},
        }

    def tasks_view(self, query: Optional[str] = None) -> dict[str, Any]:
        term = _search_term(query)
        matches = _ids(self.tasks.search(query))

        def items(tasks: list[Task]) -> list[dict[str, Any]]:
            return [self.task_item(t, term) for t in tasks if t.id in matches]

        return {
            "tasks": items(self.tasks.sort()),
            "pending": items(self.tasks.pending()),
            "completed": items(self.tasks.completed()),
            "overdue": items(self.tasks.overdue()),
            "dueToday": items(self.tasks.due_today()),
            "priorities": list(self.tasks.priorities),
        }

    def calendar_view(
        self, month: Optional[int] = None, year: Optional[int] = None
    ) -> dict[str, Any]:
        today = self.events.today()
        month = today.month - 1 if month is None else month
        year = today.year if year is None else year
        grid = self.events.month_grid(month, year, today=today)
        prev_month, prev_year = previous_month(month, year)
        next_m, next_year = next_month(month, year)
        return {
            "calendar": grid.to_json(),
            "title": f"{month_name(month)} {year}",
            "previous": {"month": prev_month, "year": prev_year},
            "next": {"month": next_m, "year": next_year},
            "todayEvents": [self.event_item(e) for e in self.events.events_today()],
            "categories": list(self.events.categories),
        }

    def bookmarks_view(
        self, tag: Optional[str] = None, query: Optional[str] = None
    ) -> dict[str, Any]:
        keep = _ids(self.bookmarks.filter_by_tag(tag)) & _ids(self.bookmarks.search(query))
        return {
            "bookmarks": [
                self.bookmark_item(b) for b in self.bookmarks.sort() if b.id in keep
            ],
            "tags": self.bookmarks.all_tags(),
        }

    def search(self, query: Optional[str]) -> dict[str, Any]:
        """Notes and tasks matching ``query`` across the whole app."""
        term = _search_term(query)
        if term is None:
            return {"query": query or "", "tooShort": True, "notes": [], "tasks": []}
        return {
            "query": query,
            "tooShort": False,
            "notes": [self.note_card(n, term) for n in self.notes.search(term)],
            "tasks": [self.task_item(t, term) for t in self.tasks.search(term)],
        }

    def storage_usage(self) -> dict[str, Any]:
        used = self.storage.usage()
        quota = self.storage.quota_bytes
        return {
            "usedBytes": used,
            "usedMb": round(used / 1024 / 1024, 4),
            "quotaMb": round(quota / 1024 / 1024, 2) if quota else None,
            "percent": round(used / quota * 100, 2) if quota else None,
        }

    # ------------------------------------------------------------------
    # Fragments
    # ------------------------------------------------------------------

    def note_card(self, note: Note, term: Optional[str] = None) -> dict[str, Any]:
        return {
            **note.to_json(),
            "titleHtml": highlight(note.title, term),
            "excerpt": truncate(note.content, EXCERPT_LENGTH),
            "contentHtml": format_note(note.content),
            "color": category_color(note.category),
            "relativeTime": relative_time(note.updated_at, self.notes.now()),
        }

    def task_item(self, task: Task, term: Optional[str] = None) -> dict[str, Any]:
        return {
            **task.to_json(),
            "titleHtml": highlight(task.title, term),
            "color": priority_color(task.priority),
            "overdue": not task.completed and task.due_date < self.tasks.now(),
        }

    def event_item(self, event: Event) -> dict[str, Any]:
        return {
            **event.to_json(),
            "color": category_color(event.category),
            "descriptionHtml": text_to_html(event.description),
        }

    def bookmark_item(self, bookmark: Bookmark) -> dict[str, Any]:
        return {
            **bookmark.to_json(),
            "domain": domain_of(bookmark.url),
            "descriptionHtml": text_to_html(bookmark.description),
        }


def _ids(items: list[Any]) -> set[str]:
    return {item.id for item in items}


def _search_term(query: Optional[str]) -> Optional[str]:
    if not query or len(query.strip()) < MIN_QUERY_LENGTH:
        return None
    return query.strip()
