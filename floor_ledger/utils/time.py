"""Clock helpers shared by the ledger and reports."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current timezone-aware UTC time."""
    return datetime.now(timezone.utc)


def today_window_utc(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return today's UTC window boundaries.

    Payments are stamped with UTC timestamps, so all "today" filtering must use
    UTC boundaries as well.
    """
    current = now or utc_now()
    start = current.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    end = start + timedelta(days=1)
    return start, end


def ensure_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC so they compare with the ledger clock."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
