"""Reward balances and voucher issuance.

:func:`claim` is the one write in the system that must never interleave: the
balance debit and the voucher insert are committed as a single transaction,
and the debit is conditional on the balance still covering the amount. Two
concurrent claims against the same balance therefore cannot both succeed.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain import VoucherStatus
from ..errors import StoreFailure
from ..models import Hotel, RewardBalance, RewardVoucher
from . import iso


def voucher_dict(v: RewardVoucher, hotel_name: str | None = None) -> dict:
    data = {
        "id": v.id,
        "code": v.code,
        "user_id": v.user_id,
        "hotel_id": v.hotel_id,
        "amount_paise": v.amount_paise,
        "status": v.status,
        "expires_at": iso(v.expires_at),
        "created_at": iso(v.created_at),
    }
    if hotel_name is not None:
        data["hotel_name"] = hotel_name
    return data


async def list_balances(session: AsyncSession, user_id: str) -> list[dict]:
    result = await session.execute(
        select(
            RewardBalance.hotel_id,
            Hotel.name,
            RewardBalance.available_paise,
            RewardBalance.pending_paise,
        )
        .join(Hotel, Hotel.id == RewardBalance.hotel_id)
        .where(RewardBalance.user_id == user_id)
        .order_by(Hotel.name)
    )
    return [
        {
            "hotel_id": row.hotel_id,
            "hotel_name": row.name,
            "available_paise": row.available_paise or 0,
            "pending_paise": row.pending_paise or 0,
        }
        for row in result
    ]


async def list_vouchers(session: AsyncSession, user_id: str) -> list[dict]:
    result = await session.execute(
        select(RewardVoucher, Hotel.name)
        .join(Hotel, Hotel.id == RewardVoucher.hotel_id)
        .where(RewardVoucher.user_id == user_id)
        .order_by(RewardVoucher.created_at.desc())
    )
    return [voucher_dict(v, name) for v, name in result.all()]


async def claim(
    session: AsyncSession,
    user_id: str,
    hotel_id: str,
    amount_paise: int,
    code: str,
    expires_at: datetime,
    created_at: datetime,
) -> RewardVoucher:
    """Debit ``amount_paise`` and insert a voucher in one transaction.

    Raises :class:`StoreFailure` when the balance does not cover the amount
    or the voucher cannot be inserted; nothing is written in either case.
    """

    try:
        result = await session.execute(
            update(RewardBalance)
            .where(
                RewardBalance.user_id == user_id,
                RewardBalance.hotel_id == hotel_id,
                RewardBalance.available_paise >= amount_paise,
            )
            .values(available_paise=RewardBalance.available_paise - amount_paise)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await session.rollback()
            raise StoreFailure("Insufficient balance.", code="INSUFFICIENT_BALANCE")

        voucher = RewardVoucher(
            code=code,
            user_id=user_id,
            hotel_id=hotel_id,
            amount_paise=amount_paise,
            status=VoucherStatus.ACTIVE.value,
            expires_at=expires_at,
            created_at=created_at,
        )
        session.add(voucher)
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise StoreFailure("Could not create voucher.", code="VOUCHER_INSERT_FAILED") from exc
    return voucher
