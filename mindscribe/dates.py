"""Date helpers: local day windows, display formatting, relative times.

``tz=None`` everywhere means the host's local timezone.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta, tzinfo
from typing import Optional


def local_midnight(day: date, tz: Optional[tzinfo] = None) -> datetime:
    """Aware datetime for 00:00 of ``day`` in ``tz``."""
    naive = datetime.combine(day, time.min)
    return naive.replace(tzinfo=tz) if tz else naive.astimezone()


def local_date(moment: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar date of ``moment`` as seen in ``tz``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(tz).date()


def day_window(day: date, tz: Optional[tzinfo] = None) -> tuple[datetime, datetime]:
    """[start, end) of a calendar day. Not always 24h across DST changes."""
    return local_midnight(day, tz), local_midnight(day + timedelta(days=1), tz)


def month_window(
    month: int, year: int, tz: Optional[tzinfo] = None
) -> tuple[datetime, datetime]:
    """[start, end) of a month; ``month`` is 0-based (0 = January)."""
    first = date(year, month + 1, 1)
    following = date(year + 1, 1, 1) if month == 11 else date(year, month + 2, 1)
    return local_midnight(first, tz), local_midnight(following, tz)


def week_range(day: Optional[date] = None) -> tuple[date, date]:
    """Monday..Sunday of the week containing ``day``."""
    day = day or date.today()
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


def is_today(day: date, today: Optional[date] = None) -> bool:
    if isinstance(day, datetime):
        day = day.date()
    return day == (today or date.today())


def format_date(
    value: datetime, style: str = "medium", tz: Optional[tzinfo] = None
) -> str:
    """Render a timestamp as short / medium / long / time."""
    moment = value.astimezone(tz) if value.tzinfo else value
    if style == "short":
        return moment.strftime("%Y-%m-%d")
    if style == "long":
        return moment.strftime("%A, %B %d, %Y %H:%M:%S")
    if style == "time":
        return moment.strftime("%H:%M:%S")
    return moment.strftime("%Y-%m-%d %H:%M")


def relative_time(value: datetime, now: Optional[datetime] = None) -> str:
    """Human phrase such as "5 minutes ago" or "yesterday".

    Anything older than 30 days falls back to the short date.
    """
    now = now or datetime.now(UTC)
    seconds = int((now - value).total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if days > 30:
        return format_date(value, "short")
    if days > 0:
        return "yesterday" if days == 1 else f"{days} days ago"
    if hours > 0:
        return "1 hour ago" if hours == 1 else f"{hours} hours ago"
    if minutes > 0:
        return "1 minute ago" if minutes == 1 else f"{minutes} minutes ago"
    return "just now"
