"""Shared CLI utilities."""

import asyncio
from datetime import date
from functools import wraps

import click

from ..config import Settings
from ..context import TrackerContext
from ..db import get_db_path
from ..errors import ValidationError
from ..models.weekly import WeeklyPlan
from ..services.notifications import NotificationKind, Notifier
from ..utils.week_utils import parse_iso

WEEKDAYS = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def get_context() -> TrackerContext:
    """Build the tracker context from the environment."""
    return TrackerContext.create(Settings())


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_db_path(Settings().data_dir)
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Tracker not initialized. Run 'lifestyle-tracker init' first."
        )
        ctx.exit(1)


def parse_date_option(value: str | None) -> date:
    """Parse an optional YYYY-MM-DD option, defaulting to today."""
    if not value:
        return date.today()
    try:
        return parse_iso(value)
    except ValueError:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {value!r}") from None


def resolve_day(plan: WeeklyPlan, value: str) -> int:
    """Turn a weekday name, 0-6 index or ISO date into a day index."""
    value = value.strip().lower()
    if value in WEEKDAYS:
        return WEEKDAYS.index(value)
    if value.isdigit():
        return int(value)
    index = plan.day_index(value)
    if index is None:
        raise ValidationError(f"{value} is not a day of week {plan.week_of_iso}")
    return index


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def echo_notifications(notifier: Notifier) -> None:
    """Print and clear the notifications queued by the services."""
    printers = {
        NotificationKind.INFO: echo_info,
        NotificationKind.SUCCESS: echo_success,
        NotificationKind.ERROR: echo_error,
    }
    for notification in notifier.drain():
        printers[notification.kind](notification.message)


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    # Calculate column widths
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = [
        "".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers)),
        "".join("-" * w + " " * padding for w in widths),
    ]
    for row in rows:
        lines.append(
            "".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row))
        )

    return "\n".join(lines)
