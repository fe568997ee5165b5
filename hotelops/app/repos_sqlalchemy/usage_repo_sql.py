"""AI token usage counters."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import AiUsage


@dataclass
class UsageRow:
    hotel_id: str
    month_utc: str
    used_tokens: int
    budget_tokens: int | None


async def list_usage(session: AsyncSession) -> list[UsageRow]:
    result = await session.execute(
        select(
            AiUsage.hotel_id,
            AiUsage.month_utc,
            AiUsage.used_tokens,
            AiUsage.budget_tokens,
        )
    )
    return [
        UsageRow(
            hotel_id=row.hotel_id,
            month_utc=row.month_utc,
            used_tokens=row.used_tokens or 0,
            budget_tokens=row.budget_tokens,
        )
        for row in result
    ]
