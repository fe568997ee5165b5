import asyncio
import importlib.util
import pathlib
import sys

from sqlalchemy.ext.asyncio import create_async_engine

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from hotelops.app.db import create_all, get_sessionmaker  # noqa: E402
from hotelops.app.models import AiUsage, Hotel  # noqa: E402


def _load_script():
    path = ROOT / "scripts" / "ops_monitor.py"
    spec = importlib.util.spec_from_file_location("ops_monitor_script", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


async def _create(url: str, seed: bool = True) -> None:
    engine = create_async_engine(url)
    await create_all(engine)
    if not seed:
        await engine.dispose()
        return
    async with get_sessionmaker(engine)() as session:
        session.add(Hotel(id="h-1", slug="harbour", name="Harbour Inn"))
        session.add(AiUsage(hotel_id="h-1", month_utc="2025-06", used_tokens=930, budget_tokens=1000))
        await session.commit()
    await engine.dispose()


def test_cli_prints_alerts(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("WEBHOOK_ALERT_URL", raising=False)
    url = f"sqlite+aiosqlite:///{tmp_path}/cron.db"
    asyncio.run(_create(url))
    script = _load_script()
    monkeypatch.setattr(script, "configure_logging", lambda level: None)

    assert script._cli(["--database-url", url, "--log-level", "warning"]) == 0

    out = capsys.readouterr().out.strip().splitlines()
    assert out == ["AI usage 93.0% of budget (hotel h-1, month 2025-06)."]


def test_cli_clean_database(tmp_path, capsys, monkeypatch):
    url = f"sqlite+aiosqlite:///{tmp_path}/empty.db"
    asyncio.run(_create(url, seed=False))
    script = _load_script()
    monkeypatch.setattr(script, "configure_logging", lambda level: None)

    assert script._cli(["--database-url", url]) == 0
    assert capsys.readouterr().out == ""
