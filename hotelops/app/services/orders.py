"""F&B order lifecycle."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from ..auth import User, require_hotel
from ..domain import TERMINAL, OrderStatus, can_transition
from ..errors import BadRequest, NotFound
from ..repos_sqlalchemy import catalog_repo_sql, orders_repo_sql
from ..routes_metrics import order_status_changes_total

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def parse_status(raw: str | None) -> OrderStatus:
    try:
        return OrderStatus(raw)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise BadRequest(f"status must be one of: {allowed}") from None


def _rejected(current: OrderStatus, target: OrderStatus) -> BadRequest:
    return BadRequest(
        f"order is {current.value}; cannot move to {target.value}",
        code="ORDER_CLOSED" if current in TERMINAL else "INVALID_TRANSITION",
    )


async def set_order_status(
    session: AsyncSession,
    order_id: str | None,
    status: str | None,
    now: datetime | None = None,
    actor: User | None = None,
) -> dict:
    """Move an order to ``status``.

    Entering a terminal state stamps ``closed_at``. Repeating the current
    status is an acknowledged no-op; leaving a terminal state is rejected, so
    ``closed_at`` is never cleared. When ``actor`` is given it must belong to
    the order's hotel.
    """

    if not order_id or not status:
        raise BadRequest("id and status required")
    target = parse_status(status)

    order = await orders_repo_sql.get_order(session, order_id)
    if order is None:
        raise NotFound("order not found")
    if actor is not None:
        require_hotel(actor, order.hotel_id)
    current = OrderStatus(order.status)

    if current == target:
        return {"id": order.id, "status": current.value, "changed": False}
    if not can_transition(current, target):
        raise _rejected(current, target)

    closed_at = (now or _now()) if target in TERMINAL else None
    won = await orders_repo_sql.update_status(
        session, order_id, current.value, target.value, closed_at
    )
    if not won:
        # The status moved underneath us; judge the request against the stored one.
        await session.refresh(order)
        stored = OrderStatus(order.status)
        if stored == target:
            return {"id": order.id, "status": stored.value, "changed": False}
        raise _rejected(stored, target)

    order_status_changes_total.labels(status=target.value).inc()
    logger.info(
        "order %s %s -> %s", order_id, current.value, target.value,
        extra={"hotel": order.hotel_id},
    )
    return {"id": order.id, "status": target.value, "changed": True}


async def create_order(
    session: AsyncSession,
    slug: str,
    item_key: str,
    qty: int | None = 1,
    room: str | None = None,
    booking_code: str | None = None,
    now: datetime | None = None,
) -> dict:
    """Place a ``preparing`` order for an active, priced menu item."""

    slug = (slug or "").strip()
    item_key = (item_key or "").strip()
    if not slug or not item_key:
        raise BadRequest("slug and item_key required")

    hotel = await catalog_repo_sql.hotel_by_slug(session, slug)
    if hotel is None:
        raise BadRequest("unknown hotel", code="UNKNOWN_HOTEL")
    item = await orders_repo_sql.active_menu_item(session, hotel.id, item_key)
    if item is None:
        raise BadRequest("item not available", code="ITEM_UNAVAILABLE")
    if item.price is None:
        raise BadRequest("item price unavailable", code="ITEM_UNPRICED")

    order = await orders_repo_sql.create_order(
        session,
        hotel.id,
        item_key,
        qty=max(1, qty or 1),
        price=item.price,
        room=room.strip() if room is not None else None,
        booking_code=booking_code.strip() if booking_code is not None else None,
        created_at=now or _now(),
    )
    logger.info("order %s placed for %s", order.id, item_key, extra={"hotel": hotel.id})
    return {"id": order.id}


async def get_order(session: AsyncSession, order_id: str) -> dict:
    order = await orders_repo_sql.get_order(session, order_id)
    if order is None:
        raise NotFound("order not found")
    return orders_repo_sql.order_dict(order)
