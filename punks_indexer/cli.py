"""Command line entry point for the market indexer."""

import asyncio
import json

import click

from punks_indexer.config import get_settings
from punks_indexer.services.indexer import DEFAULT_SOURCE


@click.group()
def main() -> None:
    """CryptoPunks market indexer."""
    from punks_indexer.main import configure_logging

    settings = get_settings()
    configure_logging(settings.log_level, json=settings.log_json)


@main.command("init-db")
def init_db_command() -> None:
    """Create database tables."""
    from punks_indexer.main import create_tables

    asyncio.run(create_tables())
    click.echo("Database initialized")


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--source", default=DEFAULT_SOURCE, help="Cursor name for this stream")
def replay(path: str, source: str) -> None:
    """Apply decoded events from a JSON Lines file."""
    from punks_indexer.main import replay as run_replay

    status = asyncio.run(run_replay(path, source=source))
    click.echo(json.dumps(status, indent=2))


@main.command()
@click.option("--source", default=DEFAULT_SOURCE, help="Cursor name for this stream")
def status(source: str) -> None:
    """Show the last applied event position."""
    from punks_indexer.main import sync_status

    click.echo(json.dumps(asyncio.run(sync_status(source)), indent=2))


if __name__ == "__main__":
    main()
