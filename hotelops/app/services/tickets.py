"""Ticket lifecycle: guest requests and their one-time closure.

A ticket is closed exactly once. Closing computes the minutes since creation
(rounded half up, floored at zero so clock skew never yields a negative
latency) and compares them with the service's SLA target, falling back to
the default target when the hotel has no active service for the key.
Closing an already closed ticket returns the stored outcome untouched.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from config import get_settings

from ..auth import User, require_hotel
from ..domain import TicketStatus, is_on_time, minutes_between
from ..errors import BadRequest, NotFound
from ..repos_sqlalchemy import catalog_repo_sql, tickets_repo_sql
from ..routes_metrics import tickets_closed_total
from .catalog import resolve_sla

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Closure:
    minutes_to_close: int | None
    on_time: bool | None

    def as_dict(self) -> dict:
        return asdict(self)


async def close_ticket(
    session: AsyncSession,
    ticket_id: str,
    now: datetime | None = None,
    actor: User | None = None,
) -> Closure:
    """Close ``ticket_id`` and return its SLA outcome.

    When ``actor`` is given it must belong to the ticket's hotel.
    """

    if not ticket_id:
        raise BadRequest("id required")
    ticket = await tickets_repo_sql.get_ticket(session, ticket_id)
    if ticket is None:
        raise NotFound("ticket not found")
    if actor is not None:
        require_hotel(actor, ticket.hotel_id)
    if ticket.status == TicketStatus.CLOSED.value:
        return Closure(ticket.minutes_to_close, ticket.on_time)

    closed_at = now or _now()
    sla = await resolve_sla(session, ticket.hotel_id, ticket.service_key)
    minutes = minutes_between(ticket.created_at, closed_at)
    on_time = is_on_time(minutes, sla)

    won = await tickets_repo_sql.close_if_open(
        session, ticket_id, closed_at, minutes, on_time
    )
    if not won:
        # Another closer got there first; report what it stored.
        await session.refresh(ticket)
        return Closure(ticket.minutes_to_close, ticket.on_time)

    tickets_closed_total.labels(on_time=str(on_time).lower()).inc()
    logger.info(
        "ticket %s closed after %s min (sla %s, on_time=%s)",
        ticket_id,
        minutes,
        sla,
        on_time,
        extra={"hotel": ticket.hotel_id},
    )
    return Closure(minutes, on_time)


async def create_ticket(
    session: AsyncSession,
    slug: str,
    service_key: str,
    room: str | None = None,
    booking_code: str | None = None,
    now: datetime | None = None,
) -> dict:
    """Open a ticket for an active service, reusing a very recent duplicate.

    Returns ``{"id": ..., "deduped": bool}``.
    """

    slug = (slug or "").strip()
    service_key = (service_key or "").strip()
    if not slug or not service_key:
        raise BadRequest("slug and service_key required")
    room = room.strip() if room is not None else None
    booking_code = booking_code.strip() if booking_code is not None else None

    hotel = await catalog_repo_sql.hotel_by_slug(session, slug)
    if hotel is None:
        raise BadRequest("unknown hotel", code="UNKNOWN_HOTEL")
    svc = await catalog_repo_sql.get_active_service(session, hotel.id, service_key)
    if svc is None:
        raise BadRequest("service not available", code="SERVICE_UNAVAILABLE")

    now = now or _now()
    since = now - timedelta(minutes=get_settings().ticket_dedupe_minutes)
    dup = await tickets_repo_sql.find_recent_open(
        session, hotel.id, service_key, room, booking_code, since
    )
    if dup is not None:
        return {"id": dup.id, "deduped": True}

    ticket = await tickets_repo_sql.create_ticket(
        session, hotel.id, service_key, room, booking_code, created_at=now
    )
    logger.info("ticket %s opened for %s", ticket.id, service_key, extra={"hotel": hotel.id})
    return {"id": ticket.id, "deduped": False}


async def get_ticket(session: AsyncSession, ticket_id: str) -> dict:
    ticket = await tickets_repo_sql.get_ticket(session, ticket_id)
    if ticket is None:
        raise NotFound("ticket not found")
    return tickets_repo_sql.ticket_dict(ticket)
