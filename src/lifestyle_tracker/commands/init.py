"""Initialize tracker command."""

import click

from ..config import Settings
from ..db import get_db_path, init_db
from .base import async_command, echo_info, echo_success


@click.command()
@async_command
async def init():
    """Initialize the tracker database.

    This creates the data directory and the SQLite document store that
    holds weekly plans, the session log and favorites.
    """
    settings = Settings()
    data_dir = settings.data_dir

    echo_info(f"Initializing lifestyle-tracker in {data_dir}")

    data_dir.mkdir(parents=True, exist_ok=True)
    await init_db(get_db_path(data_dir))
    echo_success("Database initialized")

    click.echo()
    click.echo(f"lifestyle-tracker is ready to use (account: {settings.account_id})")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Look at this week:")
    click.echo("     lifestyle-tracker week show")
    click.echo()
    click.echo("  2. Check a box or log a workout:")
    click.echo("     lifestyle-tracker week toggle mon Yoga")
    click.echo('     lifestyle-tracker session complete --name "Leg day" -t Resistance')
