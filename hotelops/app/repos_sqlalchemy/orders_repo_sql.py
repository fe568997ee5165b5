"""SQLAlchemy-backed repository helpers for F&B orders.

These helpers implement basic order workflows without any side effects
beyond database mutations. The unit price is snapshotted into the order so
historical totals survive menu changes.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain import OrderStatus
from ..models import MenuItem, Order
from . import iso


def order_dict(o: Order) -> dict:
    return {
        "id": o.id,
        "hotel_id": o.hotel_id,
        "room": o.room,
        "booking_code": o.booking_code,
        "item_key": o.item_key,
        "qty": o.qty,
        "price": float(o.price),
        "status": o.status,
        "created_at": iso(o.created_at),
        "closed_at": iso(o.closed_at),
    }


async def active_menu_item(
    session: AsyncSession, hotel_id: str, item_key: str
) -> MenuItem | None:
    return await session.scalar(
        select(MenuItem).where(
            MenuItem.hotel_id == hotel_id,
            MenuItem.item_key == item_key,
            MenuItem.active.is_(True),
        )
    )


async def create_order(
    session: AsyncSession,
    hotel_id: str,
    item_key: str,
    qty: int,
    price: Decimal,
    room: str | None,
    booking_code: str | None,
    created_at: datetime,
) -> Order:
    """Insert a new ``preparing`` order and commit."""
    order = Order(
        hotel_id=hotel_id,
        item_key=item_key,
        qty=qty,
        price=price,
        room=room,
        booking_code=booking_code,
        status=OrderStatus.PREPARING.value,
        created_at=created_at,
    )
    session.add(order)
    await session.commit()
    return order


async def get_order(session: AsyncSession, order_id: str) -> Order | None:
    return await session.get(Order, order_id)


async def update_status(
    session: AsyncSession,
    order_id: str,
    current_status: str,
    new_status: str,
    closed_at: datetime | None = None,
) -> bool:
    """Move the order from ``current_status`` to ``new_status``.

    Returns ``False`` when the stored status is no longer ``current_status``.
    ``closed_at`` is written only when given.
    """
    values: dict = {"status": new_status}
    if closed_at is not None:
        values["closed_at"] = closed_at
    result = await session.execute(
        update(Order)
        .where(Order.id == order_id, Order.status == current_status)
        .values(**values)
    )
    await session.commit()
    return result.rowcount == 1


async def list_recent(session: AsyncSession, hotel_id: str, limit: int) -> list[dict]:
    result = await session.execute(
        select(Order)
        .where(Order.hotel_id == hotel_id)
        .order_by(Order.created_at.desc())
        .limit(limit)
    )
    return [order_dict(o) for o in result.scalars().all()]
