"""Workout type catalog commands."""

import click

from ..errors import ValidationError
from ..models.weekly import Category
from .base import (
    async_command,
    echo_error,
    echo_success,
    echo_warning,
    ensure_initialized,
    format_table,
    get_context,
)

CATEGORY_CHOICES = [c.value for c in Category]


@click.group()
def types():
    """Manage the workout type catalog and weekly goals."""
    pass


@types.command("list")
@click.pass_context
@async_command
async def list_types(ctx: click.Context):
    """List workout types with their category and goal."""
    ensure_initialized(ctx)
    tracker = get_context()
    plan = await tracker.loader.load_current()

    rows = [
        [t, plan.category_of(t).value, str(plan.benchmarks.get(t, 0))]
        for t in plan.custom_types
    ]
    click.echo()
    click.echo(format_table(["Type", "Category", "Goal"], rows))


@types.command("add")
@click.argument("name")
@click.option(
    "--category", "-c", type=click.Choice(CATEGORY_CHOICES), default=Category.NONE.value
)
@click.pass_context
@async_command
async def add(ctx: click.Context, name: str, category: str):
    """Add a workout type."""
    ensure_initialized(ctx)
    tracker = get_context()
    plan = await tracker.loader.load_current()
    if name.strip() in plan.custom_types:
        echo_warning(f"{name} already exists")
        return

    try:
        await tracker.catalog.add_type(plan, name, Category(category))
    except ValidationError as e:
        echo_error(str(e))
        ctx.exit(1)
    echo_success(f"Added {name.strip()}")


@types.command("remove")
@click.argument("name")
@click.pass_context
@async_command
async def remove(ctx: click.Context, name: str):
    """Remove a workout type and its checkmarks from this week."""
    ensure_initialized(ctx)
    tracker = get_context()
    plan = await tracker.loader.load_current()
    if name not in plan.custom_types:
        echo_error(f"Unknown type: {name}")
        ctx.exit(1)

    await tracker.catalog.remove_type(plan, name)
    echo_success(f"Removed {name}")


@types.command("rename")
@click.argument("old_name")
@click.argument("new_name")
@click.pass_context
@async_command
async def rename(ctx: click.Context, old_name: str, new_name: str):
    """Rename a workout type."""
    ensure_initialized(ctx)
    tracker = get_context()
    plan = await tracker.loader.load_current()

    updated = await tracker.catalog.rename_type(plan, old_name, new_name)
    if updated.custom_types == plan.custom_types:
        echo_warning(f"Nothing renamed ({old_name} missing or {new_name!r} unavailable)")
        return
    echo_success(f"Renamed {old_name} to {new_name.strip()}")


@types.command("category")
@click.argument("name")
@click.argument("category", type=click.Choice(CATEGORY_CHOICES))
@click.pass_context
@async_command
async def category(ctx: click.Context, name: str, category: str):
    """Assign the category a type counts toward."""
    ensure_initialized(ctx)
    tracker = get_context()
    plan = await tracker.loader.load_current()

    try:
        await tracker.catalog.set_category(plan, name, Category(category))
    except ValidationError as e:
        echo_error(str(e))
        ctx.exit(1)
    echo_success(f"{name} counts toward {category}")


@types.command("benchmark")
@click.argument("name")
@click.argument("goal", type=int)
@click.pass_context
@async_command
async def benchmark(ctx: click.Context, name: str, goal: int):
    """Set the days-per-week goal for a type or category."""
    ensure_initialized(ctx)
    tracker = get_context()
    plan = await tracker.loader.load_current()

    try:
        await tracker.catalog.set_benchmark(plan, name, goal)
    except ValidationError as e:
        echo_error(str(e))
        ctx.exit(1)
    echo_success(f"Goal for {name}: {goal} days")
