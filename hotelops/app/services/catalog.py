"""Service catalog lookups."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from config import get_settings

from ..errors import BadRequest, NotFound
from ..repos_sqlalchemy import catalog_repo_sql


async def resolve_sla(session: AsyncSession, hotel_id: str, service_key: str) -> int:
    """Return the SLA minutes of the active service, or the default target."""

    svc = await catalog_repo_sql.get_active_service(session, hotel_id, service_key)
    if svc is None or svc.sla_minutes is None:
        return get_settings().default_sla_minutes
    return svc.sla_minutes


async def list_services(session: AsyncSession, slug: str) -> list[dict]:
    """Active services for the hotel ``slug``; unknown hotels have none."""

    hotel = await catalog_repo_sql.hotel_by_slug(session, slug)
    if hotel is None:
        return []
    return await catalog_repo_sql.list_active_services(session, hotel.id)


async def upsert_service(
    session: AsyncSession,
    hotel_id: str,
    key: str,
    label: str,
    sla_minutes: int,
    active: bool = True,
) -> dict:
    key = key.strip()
    label = label.strip()
    if not key or not label:
        raise BadRequest("key and label required")
    if sla_minutes < 0:
        raise BadRequest("sla_minutes must be a non-negative integer")
    if await catalog_repo_sql.get_hotel(session, hotel_id) is None:
        raise NotFound("hotel not found")
    return await catalog_repo_sql.upsert_service(
        session, hotel_id, key, label, sla_minutes, active
    )
