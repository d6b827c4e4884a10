"""Calendar events collection with date-window lookups."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from mindscribe.calendar_grid import CalendarMonth, build_month_grid
from mindscribe.dates import day_window, local_date, month_window, week_range
from mindscribe.managers.base import EntityManager
from mindscribe.models import EVENT_CATEGORIES, Event, EventDraft, EventPatch
from mindscribe.samples import SAMPLE_EVENTS


class EventsManager(EntityManager[Event, EventDraft, EventPatch]):
    model = Event
    draft_model = EventDraft
    entity_name = "event"
    collection = "events"
    default_title = "Untitled Event"
    default_sort = ("start", True)

    categories = EVENT_CATEGORIES

    def sample_data(self) -> list[dict[str, Any]]:
        return [dict(event) for event in SAMPLE_EVENTS]

    def defaults(self, now: datetime) -> dict[str, Any]:
        return {
            "title": self.default_title,
            "start": now,
            "end": now,
            "category": "Personal",
            "description": "",
        }

    def events_on_date(self, day: date | datetime) -> list[Event]:
        """Events starting within the local calendar day of ``day``."""
        if isinstance(day, datetime):
            day = local_date(day, self.tz)
        start, end = day_window(day, self.tz)
        return self._select(lambda e: start <= e.start < end)

    def events_in_month(self, month: int, year: int) -> list[Event]:
        """Events starting in ``month`` (0-based) of ``year``."""
        start, end = month_window(month, year, self.tz)
        return self._select(lambda e: start <= e.start < end)

    def events_today(self) -> list[Event]:
        return self.events_on_date(self.today())

    def this_week(self) -> list[Event]:
        """Events starting Monday..Sunday of the current local week, soonest first."""
        monday, sunday = week_range(self.today())
        start = day_window(monday, self.tz)[0]
        end = day_window(sunday, self.tz)[1]
        week = self._select(lambda e: start <= e.start < end)
        week.sort(key=lambda e: e.start)
        return week

    def by_category(self, category: Optional[str]) -> list[Event]:
        return self.filter_by_category(category)

    def upcoming(self, limit: int = 5) -> list[Event]:
        """Events that have not ended yet, soonest first."""
        now = self.now()
        pending = self._select(lambda e: e.end >= now)
        pending.sort(key=lambda e: e.start)
        return pending[:limit]

    def month_grid(
        self, month: int, year: int, today: Optional[date] = None
    ) -> CalendarMonth:
        return build_month_grid(
            month, year, self.events_on_date, today=today or self.today()
        )
