"""Utility functions for working with dates and times."""

from __future__ import annotations

from datetime import date, datetime, timezone

__all__ = [
    "get_current_timestamp",
    "parse_calendar_date",
    "same_calendar_day",
    "file_timestamp",
]


def get_current_timestamp() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(tz=timezone.utc)


def parse_calendar_date(value: str | date | None) -> date | None:
    """Reduce an API date value to its calendar date.

    Accepts RFC 3339 timestamps (``2009-01-03T18:15:05Z``), plain
    ``YYYY-MM-DD`` strings and ``date``/``datetime`` objects. Returns ``None``
    when nothing usable can be extracted.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def same_calendar_day(event_date: date, today: date) -> bool:
    """True when both dates fall on the same month and day (any year)."""
    return (event_date.month, event_date.day) == (today.month, today.day)


def file_timestamp(moment: datetime | None = None) -> str:
    """Timestamp used in exported file names, e.g. ``2024-01-03_18-15-05``."""
    return (moment or datetime.now()).strftime("%Y-%m-%d_%H-%M-%S")
