#!/usr/bin/env python3
"""Run one ops monitor sweep and print the alerts.

Meant for cron, e.g. every 15 minutes::

    */15 * * * * python scripts/ops_monitor.py

Environment variables:
- DATABASE_URL: SQLAlchemy async URL of the operations database.
- WEBHOOK_ALERT_URL: where alerts are posted; unset disables delivery.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]
sys.path.append(str(BASE_DIR))

from hotelops.app.db import get_engine, session_scope  # noqa: E402
from hotelops.app.obs.logging import configure_logging  # noqa: E402
from hotelops.app.services.ops_monitor import run_sweep  # noqa: E402


async def sweep(database_url: str | None = None) -> list[str]:
    """Run the sweep against ``database_url`` or the configured database."""

    engine = get_engine(database_url)
    try:
        async with session_scope(engine) as session:
            return await run_sweep(session)
    finally:
        await engine.dispose()


def _cli(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the hotel ops monitor sweep")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)
    configure_logging(getattr(logging, args.log_level.upper(), logging.INFO))
    alerts = asyncio.run(sweep(args.database_url))
    for line in alerts:
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(_cli())
