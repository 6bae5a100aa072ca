"""
Async engine and session management

One engine and session factory are shared by the whole process. They are
created lazily on first use, or explicitly through init_database() (tests point
it at a throwaway database).
"""

import os
import threading
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ..config import settings
from ..logging import get_logger

logger = get_logger(__name__)

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None
_lock = threading.Lock()


def get_database_url() -> str:
    """FEST_DATABASE_URL as set right now, falling back to the loaded settings."""
    return os.getenv("FEST_DATABASE_URL") or settings.database_url


def to_async_url(db_url: str) -> str:
    """Use the asyncpg driver for driverless postgres URLs; leave others alone."""
    for prefix in ("postgresql://", "postgres://"):
        if db_url.startswith(prefix):
            return "postgresql+asyncpg://" + db_url[len(prefix) :]
    return db_url


def init_database(database_url: str | None = None, force_reinit: bool = False) -> None:
    """Create the shared engine unless it already exists."""
    global _engine, _sessionmaker

    with _lock:
        if _engine is not None and not force_reinit:
            return

        url = to_async_url(database_url or get_database_url())
        options: dict[str, object] = {"echo": settings.sql_echo}
        if make_url(url).get_backend_name() == "postgresql":
            options.update(
                pool_size=settings.database_pool_size,
                max_overflow=settings.database_max_overflow,
                pool_pre_ping=True,
            )

        _engine = create_async_engine(url, **options)
        _sessionmaker = async_sessionmaker(_engine, autoflush=False, expire_on_commit=False)
        logger.info("Database engine created", url=_engine.url.render_as_string())


def reset_database() -> None:
    """Forget the shared engine so the next use builds a new one."""
    global _engine, _sessionmaker
    with _lock:
        _engine = None
        _sessionmaker = None


def get_async_engine() -> AsyncEngine:
    init_database()
    assert _engine is not None
    return _engine


@asynccontextmanager
async def get_async_session() -> AsyncIterator[AsyncSession]:
    """Session scoped to one unit of work: committed on success, rolled back on error."""
    init_database()
    assert _sessionmaker is not None

    async with _sessionmaker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def check_database_connection() -> tuple[bool, str | None]:
    """Run ``SELECT 1``; on failure return a message pointing at the likely fix."""
    try:
        async with get_async_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        message = str(e)
        if "does not exist" in message:
            hint = "create the database, then run `fest-migrate upgrade`"
        elif "password authentication failed" in message:
            hint = "check the credentials in FEST_DATABASE_URL"
        elif "refused" in message or "could not connect" in message:
            hint = "check that PostgreSQL is running and reachable"
        else:
            hint = type(e).__name__
        return False, f"{message} ({hint})"
    return True, None
