"""Service catalog: public listing and owner maintenance."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import User, require_hotel, role_required
from .db import get_session
from .services import catalog
from .utils.responses import ok

router = APIRouter(tags=["Catalog"])


class ServiceIn(BaseModel):
    label: str
    sla_minutes: int = Field(30, ge=0)
    active: bool = True


@router.get("/catalog/{slug}/services")
async def list_services(slug: str, session: AsyncSession = Depends(get_session)) -> dict:
    return ok(await catalog.list_services(session, slug))


@router.put("/owner/hotels/{hotel_id}/services/{key}")
async def upsert_service(
    hotel_id: str,
    key: str,
    payload: ServiceIn,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(role_required("owner", "admin")),
) -> dict:
    require_hotel(user, hotel_id)
    data = await catalog.upsert_service(
        session, hotel_id, key, payload.label, payload.sla_minutes, payload.active
    )
    return ok(data)
