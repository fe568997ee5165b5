# test_config.py
import json
import pathlib
import sys
from pathlib import Path

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from config import get_settings

CONFIG_JSON = pathlib.Path(__file__).resolve().parents[1] / "config.json"


def _settings():
    get_settings.cache_clear()
    return get_settings()


def test_defaults_from_config(monkeypatch):
    monkeypatch.delenv("ALERT_TITLE", raising=False)
    settings = _settings()
    expected = json.loads(CONFIG_JSON.read_text())
    assert settings.alert_title == expected["alert_title"]
    assert settings.default_sla_minutes == 30
    assert settings.late_closure_min_volume == 10


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("DEFAULT_SLA_MINUTES", "45")
    monkeypatch.setenv("WEBHOOK_ALERT_URL", "https://hooks.example/ops")
    settings = _settings()
    assert settings.default_sla_minutes == 45
    assert settings.webhook_alert_url == "https://hooks.example/ops"
    monkeypatch.delenv("DEFAULT_SLA_MINUTES")
    monkeypatch.delenv("WEBHOOK_ALERT_URL")
    get_settings.cache_clear()


def test_missing_key_uses_default(monkeypatch):
    original = CONFIG_JSON.read_text()
    monkeypatch.setattr(
        Path,
        "read_text",
        lambda self: json.dumps(
            {k: v for k, v in json.loads(original).items() if k != "ops_list_limit"}
        ),
    )
    monkeypatch.delenv("OPS_LIST_LIMIT", raising=False)
    settings = _settings()
    assert settings.ops_list_limit == 50
    get_settings.cache_clear()
