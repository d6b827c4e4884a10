"""Month grid for the calendar view.

Months are 0-based (0 = January, 11 = December) and weeks start on Sunday.
A grid is always 42 cells (six weeks of seven days): the tail of the
previous month, every day of the requested month, then the head of the
next month.
"""

from __future__ import annotations

import calendar
import datetime as dt
from typing import Callable, Optional

from pydantic import Field

from mindscribe.bus import MONTH_CHANGED, EventBus
from mindscribe.dates import is_today
from mindscribe.models import CamelModel, Event

GRID_CELLS = 42
DAYS_PER_WEEK = 7
# Padding cells reach into the neighbouring years, which must stay within
# what datetime.date can represent.
MIN_YEAR = dt.MINYEAR + 1
MAX_YEAR = dt.MAXYEAR - 1

EventLookup = Callable[[dt.date], list[Event]]


class CalendarDay(CamelModel):
    """One cell of the month grid."""

    date: dt.date
    day: int
    is_current_month: bool
    is_today: bool = False
    events: list[Event] = Field(default_factory=list)


class CalendarMonth(CamelModel):
    month: int
    year: int
    month_name: str
    weeks: list[list[CalendarDay]]

    @property
    def days(self) -> list[CalendarDay]:
        return [day for week in self.weeks for day in week]


def month_name(month: int) -> str:
    return calendar.month_name[month + 1]


def previous_month(month: int, year: int) -> tuple[int, int]:
    return (11, year - 1) if month == 0 else (month - 1, year)


def next_month(month: int, year: int) -> tuple[int, int]:
    return (0, year + 1) if month == 11 else (month + 1, year)


def check_month(month: int, year: int) -> None:
    if not 0 <= month <= 11:
        raise ValueError(f"month must be between 0 and 11, got {month}")
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ValueError(f"year must be between {MIN_YEAR} and {MAX_YEAR}, got {year}")


def build_month_grid(
    month: int,
    year: int,
    events_for: Optional[EventLookup] = None,
    today: Optional[dt.date] = None,
) -> CalendarMonth:
    """Lay out ``month`` of ``year`` as six Sunday-first weeks.

    Only cells of the requested month carry events and can be today.
    """
    check_month(month, year)
    today = today or dt.date.today()

    first = dt.date(year, month + 1, 1)
    leading = (first.weekday() + 1) % DAYS_PER_WEEK  # Sunday = 0
    days_in_month = calendar.monthrange(year, month + 1)[1]

    cells: list[CalendarDay] = []
    for offset in range(leading, 0, -1):
        day = first - dt.timedelta(days=offset)
        cells.append(CalendarDay(date=day, day=day.day, is_current_month=False))

    for number in range(1, days_in_month + 1):
        day = first.replace(day=number)
        cells.append(
            CalendarDay(
                date=day,
                day=number,
                is_current_month=True,
                is_today=is_today(day, today),
                events=events_for(day) if events_for else [],
            )
        )

    day = first + dt.timedelta(days=days_in_month)
    while len(cells) < GRID_CELLS:
        cells.append(CalendarDay(date=day, day=day.day, is_current_month=False))
        day += dt.timedelta(days=1)

    weeks = [cells[i : i + DAYS_PER_WEEK] for i in range(0, GRID_CELLS, DAYS_PER_WEEK)]
    return CalendarMonth(
        month=month, year=year, month_name=month_name(month), weeks=weeks
    )


class CalendarCursor:
    """The (month, year) currently on display, with navigation."""

    def __init__(
        self,
        month: Optional[int] = None,
        year: Optional[int] = None,
        bus: Optional[EventBus] = None,
        today: Callable[[], dt.date] = dt.date.today,
    ) -> None:
        self._today = today
        current = today()
        self.month = current.month - 1 if month is None else month
        self.year = current.year if year is None else year
        self._bus = bus

    def previous(self) -> tuple[int, int]:
        return self.set(*previous_month(self.month, self.year))

    def next(self) -> tuple[int, int]:
        return self.set(*next_month(self.month, self.year))

    def today(self) -> tuple[int, int]:
        now = self._today()
        return self.set(now.month - 1, now.year)

    def set(self, month: int, year: int) -> tuple[int, int]:
        check_month(month, year)
        self.month, self.year = month, year
        if self._bus is not None:
            self._bus.publish(MONTH_CHANGED, {"month": month, "year": year})
        return month, year
