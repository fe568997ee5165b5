"""Guest service requests and their closure by staff."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import User, role_required
from .db import get_session
from .security import ratelimit
from .services import tickets
from .utils import ratelimits
from .utils.responses import ok

router = APIRouter(prefix="/tickets", tags=["Tickets"])

STAFF_ROLES = ("staff", "owner", "admin")


class TicketIn(BaseModel):
    slug: str | None = None
    service_key: str | None = None
    room: str | None = None
    booking_code: str | None = None


@router.post("", summary="Raise a service request")
async def create_ticket(
    payload: TicketIn,
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> dict:
    await ratelimit.enforce(
        request.app.state.redis,
        ratelimit.client_ip(request),
        "ticket_create",
        ratelimits.ticket_create(),
    )
    data = await tickets.create_ticket(
        session,
        payload.slug,
        payload.service_key,
        room=payload.room,
        booking_code=payload.booking_code,
    )
    return ok(data)


@router.get("/{ticket_id}", summary="Get a ticket")
async def get_ticket(
    ticket_id: str, session: AsyncSession = Depends(get_session)
) -> dict:
    return ok(await tickets.get_ticket(session, ticket_id))


@router.post("/{ticket_id}/close", summary="Close a ticket")
async def close_ticket(
    ticket_id: str,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(role_required(*STAFF_ROLES)),
) -> dict:
    closure = await tickets.close_ticket(session, ticket_id, actor=user)
    return ok(closure.as_dict())
