"""Periodic ops sweep over AI budget usage and late ticket closures.

The sweep is read-only and keeps no state between runs, so it can be run
repeatedly and concurrently; a hotel that stays in breach is reported on
every run. All alerts of one run go out as a single notification.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from config import get_settings

from ..repos_sqlalchemy import tickets_repo_sql, usage_repo_sql
from ..repos_sqlalchemy.usage_repo_sql import UsageRow
from ..routes_metrics import ops_alerts_total
from .notifications import BestEffortNotifier, get_notifier

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def half_up(value: float, step: str = "1") -> Decimal:
    """Round ``value`` to ``step`` with ties away from zero."""
    return Decimal(str(value)).quantize(Decimal(step), rounding=ROUND_HALF_UP)


def usage_pct(used_tokens: int, budget_tokens: int | None) -> float:
    if not budget_tokens:
        return 0.0
    return 100 * used_tokens / budget_tokens


def budget_alerts(rows: Iterable[UsageRow], threshold_pct: float) -> list[str]:
    alerts = []
    for row in rows:
        pct = usage_pct(row.used_tokens, row.budget_tokens)
        if pct >= threshold_pct:
            alerts.append(
                f"AI usage {half_up(pct, '0.1')}% of budget "
                f"(hotel {row.hotel_id}, month {row.month_utc})."
            )
    return alerts


def late_closure_alerts(
    closures: Iterable[tuple[str, bool | None]],
    min_volume: int,
    threshold_pct: float,
    window_hours: int = 24,
) -> list[str]:
    """Alert for hotels with enough closures and a high share of late ones.

    ``closures`` holds ``(hotel_id, on_time)`` pairs; only an explicit
    ``False`` counts as late.
    """

    counts: dict[str, list[int]] = defaultdict(lambda: [0, 0])
    for hotel_id, on_time in closures:
        tally = counts[str(hotel_id)]
        tally[0] += 1
        if on_time is False:
            tally[1] += 1

    alerts = []
    for hotel_id, (total, late) in counts.items():
        if total < min_volume:
            continue
        pct = 100 * late / total
        if pct >= threshold_pct:
            alerts.append(
                f"Late closures {half_up(pct)}% in last {window_hours}h (hotel {hotel_id})."
            )
    return alerts


async def run_sweep(
    session: AsyncSession,
    notifier: BestEffortNotifier | None = None,
    now: datetime | None = None,
) -> list[str]:
    """Run both checks, notify once when anything breached, return the alerts."""

    settings = get_settings()
    now = now or _now()

    usage = await usage_repo_sql.list_usage(session)
    alerts = budget_alerts(usage, settings.ai_budget_alert_pct)
    ops_alerts_total.labels(signal="ai_budget").inc(len(alerts))

    since = now - timedelta(hours=settings.late_closure_window_hours)
    closures = await tickets_repo_sql.closures_since(session, since)
    late = late_closure_alerts(
        closures,
        settings.late_closure_min_volume,
        settings.late_closure_alert_pct,
        settings.late_closure_window_hours,
    )
    ops_alerts_total.labels(signal="late_closures").inc(len(late))
    alerts.extend(late)

    if alerts:
        notifier = notifier or get_notifier()
        delivered = await notifier.notify(
            settings.alert_title, "\n".join(alerts), {"count": len(alerts)}
        )
        logger.info("ops sweep raised %d alert(s), delivered=%s", len(alerts), delivered)
    else:
        logger.debug("ops sweep clean")
    return alerts
