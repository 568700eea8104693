# tests/fixtures/db.py
"""
DB fixtures for tests (async, SQLite via aiosqlite):
- One database file per test under `tmp_path` (no cross-test leakage)
- Tables built from the ORM metadata
- The same `async_sessionmaker` the services receive in production
"""

from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.db import base
from app.db.session import build_async_engine, build_session_factory


@pytest.fixture(scope="session", autouse=True)
def anyio_backend():
    return "asyncio"


@pytest.fixture()
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    engine = build_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'reelvault.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(base.Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(db_engine)


@pytest.fixture()
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A plain session for arranging and asserting rows directly."""
    async with session_factory() as session:
        yield session
