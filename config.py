# config.py

"""Application configuration utilities.

Values are primarily loaded from ``config.json`` and may be overridden by
environment variables. The :func:`get_settings` helper merges the two sources
and caches the result.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings merged from JSON and environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./hotelops.db"
    redis_url: str = "redis://localhost:6379/0"
    secret_key: str = "change-me"
    default_sla_minutes: int = 30
    webhook_alert_url: str | None = None
    webhook_timeout_secs: float = 5.0
    alert_title: str = "Ops Monitor"
    ai_budget_alert_pct: float = 80.0
    late_closure_alert_pct: float = 25.0
    late_closure_min_volume: int = 10
    late_closure_window_hours: int = 24
    ticket_dedupe_minutes: int = 5
    voucher_validity_days: int = 365
    ops_list_limit: int = 50


# Cached singleton to avoid repeated file reads
@lru_cache
def get_settings() -> Settings:
    """Return merged settings with environment variable precedence.

    The configuration is read from ``config.json`` located alongside this file
    and fed into :class:`Settings`. Environment variables override any values
    from the JSON file. The result is cached to prevent repeated disk reads.
    """

    config_path = Path(__file__).with_name("config.json")
    data = json.loads(config_path.read_text()) if config_path.exists() else {}
    env_override = {
        k.lower(): v
        for k, v in os.environ.items()
        if k.lower() in Settings.model_fields
    }
    merged = {**data, **env_override}
    return Settings(**merged)
