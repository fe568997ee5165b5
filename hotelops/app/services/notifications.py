"""Best-effort outbound notifications.

A notifier's ``notify`` never raises: delivery problems are logged, counted
and reported through the boolean return value only. Callers must not depend
on delivery for correctness.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from config import get_settings

from ..routes_metrics import ops_notify_failures_total

logger = logging.getLogger(__name__)


class BestEffortNotifier(Protocol):
    async def notify(self, title: str, text: str, meta: dict[str, Any] | None = None) -> bool:
        ...


class NullNotifier:
    """Used when no destination is configured; drops every message."""

    async def notify(self, title: str, text: str, meta: dict[str, Any] | None = None) -> bool:
        logger.debug("notification dropped, no webhook configured: %s", title)
        return False


class WebhookNotifier:
    """POST ``{title, text, meta}`` as JSON to a webhook URL."""

    def __init__(self, url: str, timeout: float = 5.0) -> None:
        self.url = url
        self.timeout = timeout

    async def notify(self, title: str, text: str, meta: dict[str, Any] | None = None) -> bool:
        payload = {"title": title, "text": text, "meta": meta}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self.url, json=payload)
                resp.raise_for_status()
        except Exception as exc:
            ops_notify_failures_total.inc()
            logger.warning("webhook delivery failed: %s", exc)
            return False
        return True


def get_notifier() -> BestEffortNotifier:
    """Return the notifier for the configured ``webhook_alert_url``."""

    settings = get_settings()
    if not settings.webhook_alert_url:
        return NullNotifier()
    return WebhookNotifier(settings.webhook_alert_url, settings.webhook_timeout_secs)


__all__ = ["BestEffortNotifier", "NullNotifier", "WebhookNotifier", "get_notifier"]
