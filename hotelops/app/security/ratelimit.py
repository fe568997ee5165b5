"""Fixed-window request counters backed by Redis.

Each caller gets one counter per policy and time bucket::

    ratelimit:{policy}:{caller}:{bucket}

where ``bucket = floor(now / window)``. :func:`hit` increments the counter
with ``INCR`` and sets ``EXPIRE`` to the window on the first hit, so stale
buckets vanish on their own. A request is allowed while the counter stays at
or below the policy limit. Only ``INCR`` and ``EXPIRE`` are needed; no Lua
scripts or sorted sets.
"""

from __future__ import annotations

import time

from redis.asyncio import Redis

from ..errors import RateLimited
from ..utils.ratelimits import Policy


def bucket_key(policy: str, caller: str, bucket: int) -> str:
    return f"ratelimit:{policy}:{caller}:{bucket}"


async def hit(
    redis: Redis,
    caller: str,
    policy: str,
    limit: int,
    window_secs: int,
    now: float | None = None,
) -> tuple[bool, int]:
    """Count one request for ``caller`` and report whether it is allowed.

    Returns ``(allowed, retry_after)`` where ``retry_after`` is the number of
    seconds until the current bucket rolls over.
    """

    now = time.time() if now is None else now
    bucket = int(now // window_secs)
    key = bucket_key(policy, caller, bucket)
    count = await redis.incr(key)
    if count == 1:
        await redis.expire(key, window_secs)
    retry_after = max(1, int((bucket + 1) * window_secs - now))
    return count <= limit, retry_after


async def enforce(redis: Redis, caller: str, name: str, policy: Policy) -> None:
    """Raise :class:`RateLimited` when ``caller`` exceeded ``policy``."""

    allowed, retry_after = await hit(
        redis, caller, name, policy.limit, policy.window_secs
    )
    if not allowed:
        raise RateLimited("Rate limit exceeded. Try again later.", retry_after=retry_after)


def client_ip(request) -> str:
    """Best-effort client address, honouring the first ``X-Forwarded-For`` hop."""

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "0.0.0.0"
