"""Shared fixtures: a throwaway SQLite database per test and an ASGI client."""

import os
import pathlib
import sys
from datetime import timedelta
from decimal import Decimal

sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))

os.environ.setdefault("SECRET_KEY", "x" * 32)
os.environ.setdefault("REDIS_URL", "redis://localhost")

import fakeredis  # noqa: E402
import fakeredis.aioredis  # noqa: E402
import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from hotelops.app.auth import create_access_token  # noqa: E402
from hotelops.app.db import create_all, get_session, get_sessionmaker  # noqa: E402
from hotelops.app.main import app  # noqa: E402
from hotelops.app.models import Hotel, MenuItem, RewardBalance, Service  # noqa: E402

HOTEL_ID = "11111111-1111-1111-1111-111111111111"
HOTEL_SLUG = "sunrise"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/ops.db", poolclass=NullPool)
    await create_all(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
async def session(engine):
    async with get_sessionmaker(engine)() as s:
        yield s


@pytest.fixture
async def hotel(session):
    """One hotel with two active services, one inactive and a small menu."""

    session.add(Hotel(id=HOTEL_ID, slug=HOTEL_SLUG, name="Sunrise Residency"))
    session.add_all(
        [
            Service(hotel_id=HOTEL_ID, key="towels", label="Fresh towels", sla_minutes=30),
            Service(hotel_id=HOTEL_ID, key="laundry", label="Laundry", sla_minutes=120),
            Service(
                hotel_id=HOTEL_ID, key="spa", label="Spa", sla_minutes=60, active=False
            ),
            MenuItem(hotel_id=HOTEL_ID, item_key="tea", name="Masala tea", price=Decimal("60")),
            MenuItem(hotel_id=HOTEL_ID, item_key="soup", name="Tomato soup", price=None),
            MenuItem(
                hotel_id=HOTEL_ID,
                item_key="sushi",
                name="Sushi",
                price=Decimal("900"),
                active=False,
            ),
        ]
    )
    await session.commit()
    return HOTEL_ID


@pytest.fixture
async def balance(session, hotel):
    session.add(RewardBalance(user_id="guest-1", hotel_id=hotel, available_paise=50000))
    await session.commit()
    return 50000


@pytest.fixture
async def client(engine):
    Session = get_sessionmaker(engine)

    async def _session_override():
        async with Session() as s:
            yield s

    app.dependency_overrides[get_session] = _session_override
    app.state.redis = fakeredis.aioredis.FakeRedis(
        server=fakeredis.FakeServer(), decode_responses=True
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth():
    def _headers(
        role: str = "staff", sub: str = "user-1", hotels: tuple = (HOTEL_ID,)
    ) -> dict:
        claims = {"sub": sub, "role": role, "hotels": list(hotels)}
        token = create_access_token(claims, timedelta(minutes=5))
        return {"Authorization": f"Bearer {token}"}

    return _headers
