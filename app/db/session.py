# app/db/session.py
from __future__ import annotations

"""
ReelVault — Database Engine & Session Factory

- One async engine per process, created lazily on first use so importing this
  module never opens a connection (tests swap in their own factory).
- Services receive an `async_sessionmaker` and open one transaction per
  operation with `async with session_factory.begin() as session`.
- `get_session_factory` is the single FastAPI dependency tests override.
"""

from typing import Optional
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import settings

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────

def _derive_async_url(url: str) -> str:
    """Convert a sync Postgres URL to an asyncpg URL if needed."""
    if "+asyncpg" in url:
        return url
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url

# Pool knobs
_POOL_PRE_PING = True
_POOL_RECYCLE = 1800
_POOL_TIMEOUT = 30
_POOL_SIZE = 10
_MAX_OVERFLOW = 20

# ─────────────────────────────────────────────────────────────
# ⚡ ASYNC ENGINE — created lazily
# ─────────────────────────────────────────────────────────────

_async_engine: Optional[AsyncEngine] = None
_async_session_maker: Optional[async_sessionmaker[AsyncSession]] = None


def build_async_engine(url: str) -> AsyncEngine:
    """Create an engine; pool sizing applies to server databases only."""
    url = _derive_async_url(url)
    kwargs = {"echo": False, "pool_pre_ping": _POOL_PRE_PING}
    if not url.startswith("sqlite"):
        kwargs.update(
            pool_recycle=_POOL_RECYCLE,
            pool_size=_POOL_SIZE,
            max_overflow=_MAX_OVERFLOW,
            pool_timeout=_POOL_TIMEOUT,
        )
    return create_async_engine(url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


def get_async_engine() -> AsyncEngine:
    """Create the process-wide async engine on first use."""
    global _async_engine
    if _async_engine is None:
        _async_engine = build_async_engine(settings.ASYNC_DATABASE_URL)
    return _async_engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """FastAPI dependency: the shared session factory injected into services."""
    global _async_session_maker
    if _async_session_maker is None:
        _async_session_maker = build_session_factory(get_async_engine())
    return _async_session_maker


async def dispose_engine() -> None:
    """Close pooled connections (called from the app lifespan)."""
    global _async_engine, _async_session_maker
    if _async_engine is not None:
        await _async_engine.dispose()
    _async_engine = None
    _async_session_maker = None


async def db_healthcheck() -> bool:
    """Quick SELECT 1 to verify DB connectivity (used by /readyz)."""
    try:
        async with get_async_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.exception("DB healthcheck failed")
        return False


__all__ = [
    "build_async_engine",
    "build_session_factory",
    "get_async_engine",
    "get_session_factory",
    "dispose_engine",
    "db_healthcheck",
]
