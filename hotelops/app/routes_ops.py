"""Staff ops board, the legacy action endpoint and the monitor trigger."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from config import get_settings

from .auth import User, require_hotel, role_required
from .db import get_session
from .errors import BadRequest
from .repos_sqlalchemy import catalog_repo_sql, orders_repo_sql, tickets_repo_sql
from .routes_tickets import STAFF_ROLES
from .services import ops_monitor, orders, tickets
from .utils.responses import ok

router = APIRouter(prefix="/ops", tags=["Ops"])
logger = logging.getLogger(__name__)


class OpsAction(BaseModel):
    action: str | None = None
    id: str | None = None
    status: str | None = None


@router.post("/update")
async def ops_update(
    payload: OpsAction,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(role_required(*STAFF_ROLES)),
) -> dict:
    """Dispatch ``closeTicket`` and ``setOrderStatus`` actions."""

    if payload.action == "closeTicket":
        closure = await tickets.close_ticket(session, payload.id, actor=user)
        return ok(closure.as_dict())
    if payload.action == "setOrderStatus":
        return ok(
            await orders.set_order_status(
                session, payload.id, payload.status, actor=user
            )
        )
    raise BadRequest("unknown action")


@router.get("/list")
async def ops_list(
    slug: str,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(role_required(*STAFF_ROLES)),
) -> dict:
    hotel = await catalog_repo_sql.hotel_by_slug(session, slug)
    if hotel is None:
        raise BadRequest("unknown hotel", code="UNKNOWN_HOTEL")
    require_hotel(user, hotel.id)
    limit = get_settings().ops_list_limit
    return ok(
        {
            "tickets": await tickets_repo_sql.list_recent(session, hotel.id, limit),
            "orders": await orders_repo_sql.list_recent(session, hotel.id, limit),
        }
    )


@router.post("/monitor")
async def ops_monitor_run(
    session: AsyncSession = Depends(get_session),
    user: User = Depends(role_required("admin")),
) -> dict:
    alerts = await ops_monitor.run_sweep(session)
    logger.info("ops sweep triggered over http", extra={"user": user.id})
    return ok({"alerts": alerts})
