"""Calendar helpers for the week view."""

from __future__ import annotations

from datetime import date, datetime, time, timezone

from dateutil.relativedelta import MO, relativedelta


def week_bounds(day: date) -> tuple[datetime, datetime]:
    """Return the UTC ``[monday 00:00, next monday 00:00)`` range containing *day*."""
    monday = day + relativedelta(weekday=MO(-1))
    start = datetime.combine(monday, time.min, tzinfo=timezone.utc)
    return start, start + relativedelta(weeks=1)
