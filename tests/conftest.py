"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
import strawberry
from psycopg import Connection  # type: ignore[import]
from pytest_postgresql.executors import PostgreSQLExecutor  # type: ignore[import]
from sqlalchemy.ext.asyncio import AsyncSession

from alembic import command


def _dsn(postgresql: Connection[Any]) -> str:
    info = postgresql.info
    return (
        f"postgresql://{info.user}:{getattr(info, 'password', '')}"
        f"@{info.host}:{info.port}/{info.dbname}"
    )


@pytest.fixture(scope="function", autouse=False)
def alembic_migrate(
    postgresql_proc: PostgreSQLExecutor, postgresql: Connection[Any]
) -> Generator[None, None, None]:
    """Run Alembic upgrade to head against the pytest-postgresql instance."""
    from fest.database.cli import get_alembic_config

    os.environ["FEST_DATABASE_URL"] = _dsn(postgresql)
    cfg = get_alembic_config()
    command.upgrade(cfg, "head")
    yield
    command.downgrade(cfg, "base")


@pytest.fixture(scope="function")
def test_database(
    postgresql: Connection[Any],
) -> Generator[tuple[str, str], None, None]:
    """Return the DSN for the running pytest-postgresql database."""
    yield _dsn(postgresql), postgresql.info.dbname


@pytest_asyncio.fixture(scope="function")
async def reset_shared_db_connections(test_database: tuple[str, str]):
    """Point the shared engine at the test database for one test."""
    from fest.database.connection import get_async_engine, init_database, reset_database

    dsn, _ = test_database

    reset_database()
    init_database(dsn, force_reinit=True)

    yield

    await get_async_engine().dispose()
    reset_database()


@pytest_asyncio.fixture(scope="function")
async def festival(alembic_migrate: None, reset_shared_db_connections: None) -> dict[str, int]:
    """Migrated test database holding the seed_festival() rows."""
    from tests.factories import seed_festival

    _ = alembic_migrate, reset_shared_db_connections
    return await seed_festival()


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def mock_info():
    """Create a mock GraphQL info object with an authenticated request."""
    info = MagicMock(spec=strawberry.Info)
    info.context = {
        "request": MagicMock(
            headers=MagicMock(
                get=MagicMock(
                    side_effect=lambda key: {"authorization": "Bearer test-token"}.get(key)
                )
            )
        ),
        "loaders": MagicMock(),
    }
    return info


@pytest.fixture
def mock_session():
    """Patchable stand-in for get_async_session() and the session it yields.

    Returns (factory, session): assign ``factory`` as the patched
    get_async_session and configure ``session.execute``.
    """
    session = AsyncMock(spec=AsyncSession)
    factory = MagicMock()
    factory.return_value.__aenter__.return_value = session
    factory.return_value.__aexit__.return_value = False
    return factory, session


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "requires_db: mark test as requiring database connection")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")
