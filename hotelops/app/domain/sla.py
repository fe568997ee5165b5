"""SLA arithmetic for ticket closure."""

from __future__ import annotations

import math
from datetime import datetime, timezone

def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    SQLite hands back naive timestamps; they are stored in UTC.
    """

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from ``start`` to ``end``, rounded half up, never negative."""

    seconds = (as_utc(end) - as_utc(start)).total_seconds()
    return max(0, math.floor(seconds / 60 + 0.5))


def is_on_time(minutes: int, sla_minutes: int) -> bool:
    """Return ``True`` when ``minutes`` is within ``sla_minutes``.

    Callers resolve the target first; see ``services.catalog.resolve_sla``.
    """

    return minutes <= sla_minutes
