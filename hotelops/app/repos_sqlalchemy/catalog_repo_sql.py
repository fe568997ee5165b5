"""SQLAlchemy helpers for hotels and their service catalog."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Hotel, Service


def service_dict(svc: Service) -> dict:
    return {
        "key": svc.key,
        "label": svc.label,
        "sla_minutes": svc.sla_minutes,
        "active": svc.active,
    }


async def hotel_by_slug(session: AsyncSession, slug: str) -> Hotel | None:
    return await session.scalar(select(Hotel).where(Hotel.slug == slug))


async def get_hotel(session: AsyncSession, hotel_id: str) -> Hotel | None:
    return await session.get(Hotel, hotel_id)


async def list_active_services(session: AsyncSession, hotel_id: str) -> list[dict]:
    """Return active services of ``hotel_id`` ordered by label."""
    result = await session.execute(
        select(Service)
        .where(Service.hotel_id == hotel_id, Service.active.is_(True))
        .order_by(Service.label)
    )
    return [service_dict(s) for s in result.scalars().all()]


async def get_active_service(
    session: AsyncSession, hotel_id: str, key: str
) -> Service | None:
    return await session.scalar(
        select(Service).where(
            Service.hotel_id == hotel_id,
            Service.key == key,
            Service.active.is_(True),
        )
    )


async def upsert_service(
    session: AsyncSession,
    hotel_id: str,
    key: str,
    label: str,
    sla_minutes: int,
    active: bool,
) -> dict:
    """Insert or update the ``(hotel_id, key)`` service and commit."""
    svc = await session.scalar(
        select(Service).where(Service.hotel_id == hotel_id, Service.key == key)
    )
    if svc is None:
        svc = Service(hotel_id=hotel_id, key=key)
        session.add(svc)
    svc.label = label
    svc.sla_minutes = sla_minutes
    svc.active = active
    await session.commit()
    return service_dict(svc)
