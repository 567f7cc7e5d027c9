"""
Calendar helpers shared by the projection math and both planners.

Everything here works on naive datetimes and plain dates so that adding a
day always lands on the next calendar date.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, timedelta
from typing import Any, Optional

logger = logging.getLogger(__name__)

# 0 = Sunday ... 6 = Saturday
DAYS_OF_WEEK = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def _naive(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO timestamp (or pass a datetime through). None when invalid."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return _naive(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return _naive(datetime.fromisoformat(value.strip()))
    except ValueError:
        logger.debug(f"Unparseable timestamp: {value!r}")
        return None


def parse_calendar_date(value: Any) -> Optional[date]:
    """Parse a calendar date from a date, datetime or ISO string."""
    if isinstance(value, datetime):
        return _naive(value).date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        try:
            return date.fromisoformat(raw)
        except ValueError:
            parsed = parse_timestamp(raw)
            return parsed.date() if parsed is not None else None
    return None


def parse_positive_number(value: Any) -> Optional[float]:
    """Parse a finite, strictly positive number. None otherwise."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def weekday_index(d: date) -> int:
    """Weekday with Sunday as 0."""
    return d.isoweekday() % 7


def day_name(weekday: Any) -> str:
    try:
        idx = int(weekday)
    except (TypeError, ValueError):
        return "Unknown"
    if 0 <= idx < len(DAYS_OF_WEEK):
        return DAYS_OF_WEEK[idx]
    return "Unknown"


def plant_weekday(harvest_weekday: int, total_growing_days: int) -> int:
    """Weekday to plant on so a weekly cycle harvests on ``harvest_weekday``.

    The cycle repeats every 7 days regardless of its length, so only the
    remainder of the growing days matters.
    """
    return (int(harvest_weekday) - (int(total_growing_days) % 7) + 7) % 7


def shift_weekday(weekday: int, days: int) -> int:
    return (int(weekday) + int(days)) % 7


def next_weekday_on_or_after(start: date, weekday: int) -> date:
    return add_days(start, (weekday - weekday_index(start) + 7) % 7)
