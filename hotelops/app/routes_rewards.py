"""Guest rewards wallet and voucher claims."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import User, get_current_user
from .db import get_session
from .security import ratelimit
from .services import rewards
from .utils import ratelimits
from .utils.responses import ok

router = APIRouter(prefix="/rewards", tags=["Rewards"])


class ClaimIn(BaseModel):
    hotel_id: str | None = None
    amount_paise: int | None = None


@router.get("/wallet")
async def get_wallet(
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
) -> dict:
    return ok(await rewards.wallet(session, user.id))


@router.post("/claim")
async def claim(
    payload: ClaimIn,
    request: Request,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
) -> dict:
    """Issue a voucher; clients reload ``/rewards/wallet`` afterwards."""

    await ratelimit.enforce(
        request.app.state.redis, user.id, "rewards_claim", ratelimits.rewards_claim()
    )
    voucher = await rewards.claim_rewards(
        session, user.id, payload.hotel_id, payload.amount_paise
    )
    return ok(voucher)
