"""
Alembic environment for ReelVault.

The target database is `ALEMBIC_DATABASE_URL` when set (migrating a scratch
database without touching `.env`), otherwise `settings.ASYNC_DATABASE_URL`.
Online runs go through an async engine. SQLite targets use batch mode so
column changes are emitted as table rebuilds.
"""

import asyncio
import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from app.core.config import settings
from app.db.base import Base

config = context.config
if config.config_file_name:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def database_url() -> str:
    return os.getenv("ALEMBIC_DATABASE_URL") or settings.ASYNC_DATABASE_URL


def _options(url: str) -> dict:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline(url: str) -> None:
    """Emit the migration SQL instead of executing it (`alembic upgrade --sql`)."""
    context.configure(url=url, literal_binds=True, dialect_opts={"paramstyle": "named"}, **_options(url))
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection, url: str) -> None:
    context.configure(connection=connection, **_options(url))
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online(url: str) -> None:
    engine = create_async_engine(url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate, url)
    finally:
        await engine.dispose()


url = database_url()
if context.is_offline_mode():
    run_migrations_offline(url)
else:
    asyncio.run(run_migrations_online(url))
