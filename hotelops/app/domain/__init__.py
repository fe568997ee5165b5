"""Domain models and helpers."""

from .order_status import TERMINAL, TRANSITIONS, OrderStatus, can_transition
from .rewards import MIN_CLAIM_PAISE, VoucherStatus, claim_rejection
from .sla import is_on_time, minutes_between
from .ticket_status import TicketStatus

__all__ = [
    "OrderStatus",
    "TERMINAL",
    "TRANSITIONS",
    "can_transition",
    "TicketStatus",
    "minutes_between",
    "is_on_time",
    "MIN_CLAIM_PAISE",
    "VoucherStatus",
    "claim_rejection",
]
