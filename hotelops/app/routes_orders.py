"""F&B orders: guest placement and staff status updates."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import User, role_required
from .db import get_session
from .routes_tickets import STAFF_ROLES
from .security import ratelimit
from .services import orders
from .utils import ratelimits
from .utils.responses import ok

router = APIRouter(prefix="/orders", tags=["Orders"])


class OrderIn(BaseModel):
    slug: str | None = None
    item_key: str | None = None
    qty: int | None = 1
    room: str | None = None
    booking_code: str | None = None


class StatusIn(BaseModel):
    status: str | None = None


@router.post("", summary="Place an order")
async def create_order(
    payload: OrderIn,
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> dict:
    await ratelimit.enforce(
        request.app.state.redis,
        ratelimit.client_ip(request),
        "order_create",
        ratelimits.order_create(),
    )
    data = await orders.create_order(
        session,
        payload.slug,
        payload.item_key,
        qty=payload.qty,
        room=payload.room,
        booking_code=payload.booking_code,
    )
    return ok(data)


@router.get("/{order_id}", summary="Get an order")
async def get_order(order_id: str, session: AsyncSession = Depends(get_session)) -> dict:
    return ok(await orders.get_order(session, order_id))


@router.post("/{order_id}/status", summary="Set order status")
async def set_status(
    order_id: str,
    payload: StatusIn,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(role_required(*STAFF_ROLES)),
) -> dict:
    return ok(
        await orders.set_order_status(session, order_id, payload.status, actor=user)
    )
