"""Alembic environment for the Fest schema, run through asyncpg."""

from __future__ import annotations

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context  # type: ignore[reportMissingImports]

# alembic.ini puts src/ on sys.path (prepend_sys_path)
from fest.database.connection import get_database_url, to_async_url  # noqa: E402
from fest.dbmodels import target_metadata  # noqa: E402

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)


def _configure(**kwargs) -> None:
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)
    with context.begin_transaction():
        context.run_migrations()


async def _migrate_online() -> None:
    # NullPool: migrations hold a single connection for their whole run
    engine = create_async_engine(to_async_url(get_database_url()), poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(lambda sync_conn: _configure(connection=sync_conn))
    finally:
        await engine.dispose()


if context.is_offline_mode():
    # --sql: render the migration script instead of touching a database
    _configure(url=get_database_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})
else:
    asyncio.run(_migrate_online())
