"""Voucher states and claim amount rules."""

from __future__ import annotations

from enum import Enum

PAISE_PER_RUPEE = 100
MIN_CLAIM_PAISE = 100 * PAISE_PER_RUPEE


class VoucherStatus(str, Enum):
    ACTIVE = "active"
    REDEEMED = "redeemed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


def claim_rejection(hotel_id: str | None, amount_paise: int | None) -> tuple[str, str] | None:
    """Return ``(code, message)`` for the first failed claim rule, else ``None``.

    Rules are checked in order: hotel present, amount positive, whole rupees,
    at least the minimum claim.
    """

    if not hotel_id:
        return "HOTEL_REQUIRED", "Choose a hotel."
    if amount_paise is None or amount_paise <= 0:
        return "AMOUNT_NOT_POSITIVE", "Enter a positive amount."
    if amount_paise % PAISE_PER_RUPEE != 0:
        return "AMOUNT_NOT_WHOLE_RUPEES", "Amount must be in whole rupees (no paise)."
    if amount_paise < MIN_CLAIM_PAISE:
        return "AMOUNT_BELOW_MINIMUM", "Minimum claim is ₹100."
    return None
