"""Session log commands."""

import click

from ..errors import ValidationError
from ..models.session import Session
from ..services.reconciler import CompletionStatus
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_notifications,
    echo_warning,
    ensure_initialized,
    format_table,
    get_context,
    parse_date_option,
)


@click.group()
def session():
    """Log and manage workout sessions."""
    pass


@session.command("complete")
@click.option("--name", "-n", default="Workout", help="Session name")
@click.option("--type", "-t", "types", multiple=True, help="Workout type (repeatable)")
@click.option("--date", "date_str", help="Session date (default: today)")
@click.option("--duration", "-d", default=0, type=int, help="Duration in minutes")
@click.option("--template", "template_id", help="Routine the session was started from")
@click.pass_context
@async_command
async def complete(
    ctx: click.Context,
    name: str,
    types: tuple[str, ...],
    date_str: str | None,
    duration: int,
    template_id: str | None,
):
    """Record a finished workout and check its types on the grid."""
    ensure_initialized(ctx)
    tracker = get_context()
    day = parse_date_option(date_str)
    plan = await tracker.loader.load_current(day)

    workout = Session(
        date_iso=day.isoformat(),
        session_name=name,
        session_types=list(types),
        duration_sec=duration * 60,
        source_template_id=template_id,
    )
    try:
        result = await tracker.reconciler.complete_workout(plan, workout)
    except ValidationError as e:
        echo_error(str(e))
        ctx.exit(1)

    if result.status == CompletionStatus.OUTSIDE_WEEK:
        echo_warning(f"Saved session {workout.id}, but {workout.date_iso} is outside the week")
    elif result.status == CompletionStatus.COMPLETED:
        echo_info(f"Session id: {workout.id}")
    echo_notifications(tracker.notifier)
    if result.status == CompletionStatus.FAILED:
        ctx.exit(1)


@session.command("delete")
@click.argument("session_id")
@click.option("--date", "date_str", help="Any date in the session's week (default: today)")
@click.pass_context
@async_command
async def delete(ctx: click.Context, session_id: str, date_str: str | None):
    """Delete a session from the log."""
    ensure_initialized(ctx)
    tracker = get_context()

    stored = await tracker.sessions.get(session_id)
    if stored is None:
        echo_error(f"Session {session_id} not found")
        ctx.exit(1)

    plan = await tracker.loader.load_current(parse_date_option(date_str or stored.date_iso))
    result = await tracker.reconciler.delete_session(plan, session_id)
    if result.ok:
        echo_info(f"Deleted session {session_id}")
    echo_notifications(tracker.notifier)


@session.command("list")
@click.option("--date", "date_str", help="Only sessions on this date")
@click.pass_context
@async_command
async def list_sessions(ctx: click.Context, date_str: str | None):
    """List logged sessions."""
    ensure_initialized(ctx)
    tracker = get_context()

    if date_str:
        sessions = await tracker.sessions.list_by_date(parse_date_option(date_str).isoformat())
    else:
        sessions = await tracker.sessions.list_all()

    if not sessions:
        echo_info("No sessions logged.")
        return

    rows = [
        [
            s.id,
            s.date_iso,
            s.session_name,
            ", ".join(s.session_types),
            s.kind.value,
            f"{s.duration_sec // 60}m" if s.duration_sec else "-",
        ]
        for s in sorted(sessions, key=lambda s: (s.date_iso, s.completed_at or 0))
    ]
    click.echo()
    click.echo(format_table(["ID", "Date", "Name", "Types", "Kind", "Duration"], rows))
