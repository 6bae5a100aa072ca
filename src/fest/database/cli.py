"""
fest-migrate: thin click wrapper around Alembic for the events schema.
"""

import sys
from pathlib import Path

import click

from alembic import command
from alembic.config import Config
from fest import __version__
from fest.logging import configure_logging, get_logger

logger = get_logger(__name__)

# Checkout root: src/fest/database/cli.py -> ../../..
PROJECT_DIR = Path(__file__).resolve().parents[3]


def get_alembic_config() -> Config:
    """Alembic config for the project's alembic.ini, with an absolute script location."""
    ini_path = PROJECT_DIR / "alembic.ini"
    if not ini_path.exists():
        raise click.ClickException(f"alembic.ini not found at {ini_path}")

    config = Config(str(ini_path))
    config.set_main_option("script_location", str(PROJECT_DIR / "alembic"))
    return config


def _run(action: str, fn, *args) -> None:
    config = get_alembic_config()
    logger.info(f"Running alembic {action}", args=list(args))
    try:
        fn(config, *args)
    except Exception as e:
        logger.error(f"alembic {action} failed", error=str(e))
        sys.exit(1)


@click.group()
@click.option("--debug", is_flag=True, help="Verbose logging")
@click.version_option(version=__version__, prog_name="fest-migrate")
def main(debug: bool) -> None:
    """Manage the Fest database schema."""
    configure_logging(debug=debug)


@main.command()
@click.argument("revision", default="head")
def upgrade(revision: str) -> None:
    """Apply migrations up to REVISION (default: head)."""
    _run("upgrade", command.upgrade, revision)


@main.command()
@click.argument("revision", default="-1")
def downgrade(revision: str) -> None:
    """Revert migrations down to REVISION (default: one step)."""
    _run("downgrade", command.downgrade, revision)


@main.command()
def current() -> None:
    """Print the revision the database is at."""
    _run("current", command.current)


@main.command()
def history() -> None:
    """List all revisions."""
    _run("history", command.history)


if __name__ == "__main__":
    main()
