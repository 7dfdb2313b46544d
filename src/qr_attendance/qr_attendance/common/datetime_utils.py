from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_utc() -> datetime:
    """Current time as an aware UTC datetime.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


def to_millis(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def from_millis(millis: int) -> datetime:
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive values, convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_date(value: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar day of `value` in the display timezone."""
    if tz is None:
        return value.date()
    return as_utc(value).astimezone(tz).date()


def day_bounds_utc(start: Optional[date], end: Optional[date], tz: Optional[tzinfo] = None):
    """Inclusive local date range -> [from, before) UTC datetimes (either may be None)."""
    zone = tz or timezone.utc
    marked_from = datetime.combine(start, time.min, tzinfo=zone).astimezone(timezone.utc) if start else None
    marked_before = (
        datetime.combine(end + timedelta(days=1), time.min, tzinfo=zone).astimezone(timezone.utc) if end else None
    )
    return marked_from, marked_before
