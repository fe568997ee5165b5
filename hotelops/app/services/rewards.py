"""Reward credit: wallet view and voucher claims."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from config import get_settings

from ..domain import claim_rejection
from ..errors import BadRequest
from ..repos_sqlalchemy import rewards_repo_sql
from ..routes_metrics import vouchers_issued_total

logger = logging.getLogger(__name__)

# Excludes 0, O, 1 and I.
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def generate_code(groups: int = 3, size: int = 4) -> str:
    """Return a voucher code such as ``RW-7KQ2-XM4P-9HDT``."""

    parts = (
        "".join(secrets.choice(CODE_ALPHABET) for _ in range(size))
        for _ in range(groups)
    )
    return "RW-" + "-".join(parts)


def validate_claim(hotel_id: str | None, amount_paise: int | None) -> None:
    rejection = claim_rejection(hotel_id, amount_paise)
    if rejection is not None:
        code, message = rejection
        raise BadRequest(message, code=code)


async def claim_rewards(
    session: AsyncSession,
    user_id: str,
    hotel_id: str | None,
    amount_paise: int | None,
    now: datetime | None = None,
) -> dict:
    """Convert ``amount_paise`` of credit at ``hotel_id`` into a voucher.

    Validation runs before the store is touched. The debit and the voucher
    insert are a single transaction in the repository; a shortfall surfaces
    as :class:`~hotelops.app.errors.StoreFailure`. Callers reload the wallet
    afterwards for authoritative balances.
    """

    validate_claim(hotel_id, amount_paise)
    now = now or _now()
    expires_at = now + timedelta(days=get_settings().voucher_validity_days)
    voucher = await rewards_repo_sql.claim(
        session,
        user_id,
        hotel_id,
        amount_paise,
        code=generate_code(),
        expires_at=expires_at,
        created_at=now,
    )
    vouchers_issued_total.inc()
    logger.info(
        "voucher %s issued for %d paise", voucher.code, amount_paise,
        extra={"hotel": hotel_id, "user": user_id},
    )
    return rewards_repo_sql.voucher_dict(voucher)


async def wallet(session: AsyncSession, user_id: str) -> dict:
    return {
        "balances": await rewards_repo_sql.list_balances(session, user_id),
        "vouchers": await rewards_repo_sql.list_vouchers(session, user_id),
    }
