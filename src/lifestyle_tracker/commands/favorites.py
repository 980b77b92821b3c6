"""Favorites commands."""

import click

from ..models.favorite import FavoriteItemType, parse_favorite_key
from ..services.favorites import MutationState
from .base import (
    async_command,
    echo_info,
    echo_notifications,
    ensure_initialized,
    format_table,
    get_context,
)

ITEM_TYPES = [t.value for t in FavoriteItemType]


@click.group()
def favorites():
    """Favorite routines and exercises."""
    pass


@favorites.command("toggle")
@click.argument("item_type", type=click.Choice(ITEM_TYPES))
@click.argument("item_id")
@click.pass_context
@async_command
async def toggle(ctx: click.Context, item_type: str, item_id: str):
    """Favorite or unfavorite an item."""
    ensure_initialized(ctx)
    tracker = get_context()
    await tracker.favorites_sync.start()
    try:
        outcome = await tracker.favorites_sync.toggle(item_type, item_id)
    finally:
        tracker.favorites_sync.stop()

    echo_notifications(tracker.notifier)
    if outcome == MutationState.ROLLED_BACK:
        ctx.exit(1)


@favorites.command("list")
@click.option("--type", "item_type", type=click.Choice(ITEM_TYPES), help="Filter by item type")
@click.pass_context
@async_command
async def list_favorites(ctx: click.Context, item_type: str | None):
    """List favorited items."""
    ensure_initialized(ctx)
    tracker = get_context()

    rows = []
    for key in sorted(await tracker.favorites.list_keys()):
        try:
            kind, item_id = parse_favorite_key(key)
        except ValueError:
            continue
        if item_type and kind.value != item_type:
            continue
        rows.append([kind.value, item_id])

    if not rows:
        echo_info("No favorites yet.")
        return
    click.echo()
    click.echo(format_table(["Type", "Item"], rows))
