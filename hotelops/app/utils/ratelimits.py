"""Central rate limit policies."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Policy:
    """Rate limit configuration: ``limit`` requests per ``window_secs``."""

    limit: int
    window_secs: int


def _policy(name: str, limit: int, window_secs: int) -> Policy:
    prefix = f"RL_{name.upper()}"
    lim = int(os.getenv(f"{prefix}_LIMIT", limit))
    win = int(os.getenv(f"{prefix}_WINDOW", window_secs))
    return Policy(limit=lim, window_secs=win)


def ticket_create() -> Policy:
    """Limit guest service requests."""
    return _policy("ticket_create", 60, 60)


def order_create() -> Policy:
    """Limit guest F&B orders."""
    return _policy("order_create", 60, 60)


def rewards_claim() -> Policy:
    """Throttle voucher claims per user."""
    return _policy("rewards_claim", 5, 60)


__all__ = ["Policy", "ticket_create", "order_create", "rewards_claim"]
