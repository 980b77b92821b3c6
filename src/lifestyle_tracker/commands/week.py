"""Weekly grid commands."""

import click

from ..errors import ValidationError
from ..models.weekly import WeeklyPlan
from ..services.counts import BenchmarkStatus, weekly_summary
from ..utils.week_utils import parse_iso
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_notifications,
    ensure_initialized,
    format_table,
    get_context,
    parse_date_option,
    resolve_day,
)

STATUS_COLORS = {
    BenchmarkStatus.MET: "green",
    BenchmarkStatus.CLOSE: "yellow",
}


def render_week(plan: WeeklyPlan) -> None:
    """Print the checkbox grid with counts and goals."""
    summary = weekly_summary(plan)
    headers = ["Type"] + [
        parse_iso(d.date_iso).strftime("%a %d") for d in plan.days
    ] + ["Done", "Goal"]

    rows = []
    for workout_type in plan.custom_types:
        cells = ["x" if d.types.get(workout_type) else "." for d in plan.days]
        rows.append(
            [workout_type]
            + cells
            + [
                str(summary.type_counts.get(workout_type, 0)),
                str(plan.benchmarks.get(workout_type, 0)),
            ]
        )
    rows.append(["sessions"] + [str(d.sessions) for d in plan.days] + ["", ""])

    click.echo()
    click.echo(click.style(f"Week {plan.week_number} ({plan.week_of_iso})", bold=True))
    click.echo(format_table(headers, rows))
    click.echo()

    categories = ", ".join(
        f"{c.value}: {n}" for c, n in summary.category_counts.items()
    )
    click.echo(f"Checked this week: {summary.week_done}  |  {categories}")
    for name, status in summary.status.items():
        if status in STATUS_COLORS:
            click.echo(click.style(f"  {name}: {status.value}", fg=STATUS_COLORS[status]))

    for day in plan.days:
        for workout_type, text in day.comments.items():
            click.echo(f"  {day.date_iso} {workout_type}: {text}")


@click.group()
def week():
    """View and edit the weekly checkbox grid."""
    pass


@week.command("show")
@click.option("--date", "date_str", help="Any date in the week (default: today)")
@click.pass_context
@async_command
async def show(ctx: click.Context, date_str: str | None):
    """Show the grid for a week."""
    ensure_initialized(ctx)
    tracker = get_context()
    plan = await tracker.loader.load_current(parse_date_option(date_str))
    history = await tracker.loader.load_history(plan, tracker.settings.lookback_weeks)
    render_week(history.current)


@week.command("toggle")
@click.argument("day")
@click.argument("workout_type")
@click.option("--date", "date_str", help="Any date in the week (default: today)")
@click.pass_context
@async_command
async def toggle(ctx: click.Context, day: str, workout_type: str, date_str: str | None):
    """Check or uncheck WORKOUT_TYPE on DAY (mon..sun, 0-6 or YYYY-MM-DD)."""
    ensure_initialized(ctx)
    tracker = get_context()
    plan = await tracker.loader.load_current(parse_date_option(date_str))

    try:
        index = resolve_day(plan, day)
        result = await tracker.reconciler.toggle_type(plan, index, workout_type)
    except ValidationError as e:
        echo_error(str(e))
        ctx.exit(1)

    state = "checked" if result.checked else "unchecked"
    echo_info(f"{workout_type} {state} on {result.plan.days[index].date_iso}")
    echo_notifications(tracker.notifier)


@week.command("comment")
@click.argument("day")
@click.argument("workout_type")
@click.argument("text", default="")
@click.option("--date", "date_str", help="Any date in the week (default: today)")
@click.pass_context
@async_command
async def comment(
    ctx: click.Context, day: str, workout_type: str, text: str, date_str: str | None
):
    """Attach a note to a day/type cell (empty TEXT removes it)."""
    ensure_initialized(ctx)
    tracker = get_context()
    plan = await tracker.loader.load_current(parse_date_option(date_str))

    try:
        await tracker.reconciler.set_comment(plan, resolve_day(plan, day), workout_type, text)
    except ValidationError as e:
        echo_error(str(e))
        ctx.exit(1)
    echo_notifications(tracker.notifier)


@week.command("history")
@click.option("--weeks", "-n", type=int, help="Number of prior weeks to load")
@click.pass_context
@async_command
async def history(ctx: click.Context, weeks: int | None):
    """Show the current week and the weeks before it."""
    ensure_initialized(ctx)
    tracker = get_context()
    lookback = tracker.settings.lookback_weeks if weeks is None else weeks

    plan = await tracker.loader.load_current()
    loaded = await tracker.loader.load_history(plan, lookback)

    rows = []
    for week_plan in loaded.weeks:
        summary = weekly_summary(week_plan)
        met = sum(1 for s in summary.status.values() if s == BenchmarkStatus.MET)
        rows.append(
            [
                f"Week {week_plan.week_number}",
                week_plan.week_of_iso,
                str(summary.week_done),
                str(summary.sessions),
                f"{met}/{len(summary.status)}",
            ]
        )

    click.echo()
    click.echo(format_table(["Week", "Starts", "Checked", "Sessions", "Goals met"], rows))
    if len(loaded.previous) < lookback:
        echo_info(f"{lookback - len(loaded.previous)} of {lookback} prior weeks have no data.")
