"""SQLAlchemy-backed repository helpers for tickets.

Closing is a conditional update on ``status = 'open'``: the first writer wins
and later writers observe zero affected rows.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain import TicketStatus
from ..models import Ticket
from . import iso


def ticket_dict(t: Ticket) -> dict:
    return {
        "id": t.id,
        "hotel_id": t.hotel_id,
        "service_key": t.service_key,
        "room": t.room,
        "booking_code": t.booking_code,
        "status": t.status,
        "created_at": iso(t.created_at),
        "closed_at": iso(t.closed_at),
        "minutes_to_close": t.minutes_to_close,
        "on_time": t.on_time,
    }


async def get_ticket(session: AsyncSession, ticket_id: str) -> Ticket | None:
    return await session.get(Ticket, ticket_id)


async def find_recent_open(
    session: AsyncSession,
    hotel_id: str,
    service_key: str,
    room: str | None,
    booking_code: str | None,
    since: datetime,
) -> Ticket | None:
    """Return the newest open ticket matching the request created after ``since``."""
    stmt = select(Ticket).where(
        Ticket.hotel_id == hotel_id,
        Ticket.service_key == service_key,
        Ticket.status == TicketStatus.OPEN.value,
        Ticket.created_at >= since,
    )
    stmt = stmt.where(Ticket.room.is_(None) if room is None else Ticket.room == room)
    stmt = stmt.where(
        Ticket.booking_code.is_(None)
        if booking_code is None
        else Ticket.booking_code == booking_code
    )
    stmt = stmt.order_by(Ticket.created_at.desc()).limit(1)
    return await session.scalar(stmt)


async def create_ticket(
    session: AsyncSession,
    hotel_id: str,
    service_key: str,
    room: str | None,
    booking_code: str | None,
    created_at: datetime,
) -> Ticket:
    ticket = Ticket(
        hotel_id=hotel_id,
        service_key=service_key,
        room=room,
        booking_code=booking_code,
        status=TicketStatus.OPEN.value,
        created_at=created_at,
    )
    session.add(ticket)
    await session.commit()
    return ticket


async def close_if_open(
    session: AsyncSession,
    ticket_id: str,
    closed_at: datetime,
    minutes_to_close: int,
    on_time: bool,
) -> bool:
    """Stamp closure fields on an open ticket; ``False`` if it was already closed."""
    result = await session.execute(
        update(Ticket)
        .where(Ticket.id == ticket_id, Ticket.status == TicketStatus.OPEN.value)
        .values(
            status=TicketStatus.CLOSED.value,
            closed_at=closed_at,
            minutes_to_close=minutes_to_close,
            on_time=on_time,
        )
    )
    await session.commit()
    return result.rowcount == 1


async def list_recent(session: AsyncSession, hotel_id: str, limit: int) -> list[dict]:
    result = await session.execute(
        select(Ticket)
        .where(Ticket.hotel_id == hotel_id)
        .order_by(Ticket.created_at.desc())
        .limit(limit)
    )
    return [ticket_dict(t) for t in result.scalars().all()]


async def closures_since(
    session: AsyncSession, since: datetime
) -> list[tuple[str, bool | None]]:
    """Return ``(hotel_id, on_time)`` for tickets closed at or after ``since``."""
    result = await session.execute(
        select(Ticket.hotel_id, Ticket.on_time).where(
            Ticket.closed_at.is_not(None), Ticket.closed_at >= since
        )
    )
    return [(row.hotel_id, row.on_time) for row in result]
