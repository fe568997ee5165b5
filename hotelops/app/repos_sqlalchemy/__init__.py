"""SQLAlchemy-backed repository implementations.

Repositories take an ``AsyncSession`` as their first argument, perform plain
reads and writes and return dictionaries ready for JSON responses. They hold
no business rules; callers in :mod:`hotelops.app.services` decide what to
read and write.
"""

from __future__ import annotations

from datetime import datetime

from ..domain.sla import as_utc


def iso(value: datetime | None) -> str | None:
    """Render a stored timestamp as an ISO-8601 UTC string."""

    return as_utc(value).isoformat() if value is not None else None


__all__ = ["iso"]
