"""
FastAPI application serving the Fest GraphQL API
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import settings
from ..database.connection import check_database_connection, init_database
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware

configure_logging(debug=settings.debug)
logger = get_logger(__name__)


def _is_production() -> bool:
    return settings.environment.lower() in ("production", "prod")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect to the database before serving; outside production a bad connection only warns."""
    init_database()
    ok, error = await check_database_connection()
    if not ok:
        logger.error("Database unavailable at startup", error=error)
        if _is_production():
            raise RuntimeError(f"Database unavailable: {error}")
    logger.info("Fest API started", environment=settings.environment, database_ok=ok)

    yield

    logger.info("Fest API stopped")


def create_app() -> FastAPI:
    """Build the app; set FEST_DISABLE_GRAPHQL to serve only /health."""
    app = FastAPI(
        title="Fest API",
        description="Event listings, registrations and live event status",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(LoggingContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        return {"status": "healthy", "version": __version__}

    if not os.getenv("FEST_DISABLE_GRAPHQL"):
        from ..graphql.schema import create_graphql_router, validate_schema

        validate_schema()
        app.include_router(create_graphql_router())

    return app


app = create_app()
