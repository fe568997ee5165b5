"""Database engine and session helpers.

The connection URL comes from ``Settings.database_url`` and may point at
PostgreSQL (``postgresql+asyncpg://...``) or SQLite (``sqlite+aiosqlite://``)::

    DATABASE_URL=postgresql+asyncpg://u:p@host:5432/hotelops

Routes depend on :func:`get_session`; scripts use :func:`session_scope`.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config import get_settings

from ..models import Base


@lru_cache
def get_engine(url: str | None = None) -> AsyncEngine:
    """Return a shared :class:`AsyncEngine` for ``url`` or the configured URL."""

    return create_async_engine(url or get_settings().database_url)


def get_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding an ``AsyncSession``."""

    Session = get_sessionmaker(get_engine())
    async with Session() as session:
        yield session


@asynccontextmanager
async def session_scope(
    engine: AsyncEngine | None = None,
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session outside of a request, e.g. from a cron script."""

    Session = get_sessionmaker(engine or get_engine())
    async with Session() as session:
        yield session


async def create_all(engine: AsyncEngine) -> None:
    """Create every table; development and tests only, Alembic owns production."""

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


__all__ = [
    "get_engine",
    "get_sessionmaker",
    "get_session",
    "session_scope",
    "create_all",
]
