"""
UTC datetime utilities.

All datetime values written by repositories are timezone-aware UTC.
"today" in aggregate views means the current UTC calendar day.
"""

from datetime import UTC, date, datetime, time, timedelta


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    Naive values are assumed to be UTC (SQLite drops the offset on storage);
    aware values are converted.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def utc_day(dt: datetime | None = None) -> date:
    """Return the UTC calendar day of dt (default: now)."""
    return (ensure_utc(dt) or utc_now()).date()


def day_bounds_utc(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return [start, end) of the UTC day containing now."""
    current = ensure_utc(now) or utc_now()
    start = datetime.combine(current.date(), time.min, tzinfo=UTC)
    return start, start + timedelta(days=1)
