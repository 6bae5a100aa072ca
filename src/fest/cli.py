#!/usr/bin/env python3
"""
fest: run the API server, seed sample data and print event statuses.
"""

import sys
from datetime import UTC, datetime

import click
import uvicorn

from fest import __version__
from fest.config import settings
from fest.logging import configure_logging, get_logger

logger = get_logger(__name__)

LOG_LEVELS = ["debug", "info", "warning", "error"]


@click.group()
@click.version_option(version=__version__, prog_name="fest")
def cli() -> None:
    """Fest CLI - run the API server and inspect events."""
    pass


@cli.command()
@click.option("--host", default=settings.api_host, show_default=True, help="Bind address")
@click.option("--port", default=settings.api_port, type=int, show_default=True, help="Bind port")
@click.option("--reload/--no-reload", default=settings.api_reload, help="Restart on code changes")
@click.option("--workers", default=1, type=int, show_default=True, help="Worker processes")
@click.option(
    "--log-level",
    default=settings.log_level.lower(),
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    show_default=True,
)
def serve(host: str, port: int, reload: bool, workers: int, log_level: str) -> None:
    """Start the Fest API server."""
    configure_logging(debug=log_level == "debug")
    if reload and workers > 1:
        logger.warning("--reload runs a single worker", requested_workers=workers)
        workers = 1

    logger.info("Starting Fest API server", host=host, port=port, reload=reload, workers=workers)
    try:
        uvicorn.run(
            "fest.api.app:app",
            host=host,
            port=port,
            reload=reload,
            workers=workers,
            log_level=log_level,
        )
    except KeyboardInterrupt:
        logger.info("Server stopped")


@cli.command()
def seed() -> None:
    """Seed the database with sample events."""
    import asyncio

    from fest.database.connection import get_async_session
    from fest.database.seed_data import seed_sample_events

    configure_logging()

    async def do_seed():
        async with get_async_session() as db:
            try:
                events = await seed_sample_events(db)
                click.echo(f"✓ Database seeded with {len(events)} events")
            except Exception as e:
                logger.error("Failed to seed database", error=str(e))
                click.echo(f"✗ Error seeding database: {e}", err=True)
                sys.exit(1)

    asyncio.run(do_seed())


@cli.command("event-status")
@click.option(
    "--at",
    "at",
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S"]),
    default=None,
    help="Reference time in UTC (default: now)",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Output JSON")
def event_status(at: datetime | None, as_json: bool) -> None:
    """Print the status of every published event."""
    import asyncio
    import json

    from fest.database.connection import get_async_session
    from fest.events.repository import fetch_published_events_with_rounds_and_winners
    from fest.events.status import classify_event_statuses

    configure_logging()
    now = at.replace(tzinfo=UTC) if at else datetime.now(UTC)

    async def do_status():
        async with get_async_session() as db:
            snapshots = await fetch_published_events_with_rounds_and_winners(db)
        return classify_event_statuses(snapshots, now)

    try:
        statuses = asyncio.run(do_status())
    except Exception as e:
        logger.error("Failed to compute event statuses", error=str(e))
        click.echo(f"✗ Error computing event statuses: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(
            json.dumps(
                [{"eventName": s.event_name, "status": s.status} for s in statuses], indent=2
            )
        )
        return

    if not statuses:
        click.echo("No published events found.")
        return

    click.echo(f"Event status as of {now.isoformat()}:")
    width = max(len(s.event_name) for s in statuses)
    for s in statuses:
        click.echo(f"  {s.event_name.ljust(width)}  {s.status}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
