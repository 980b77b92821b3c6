"""Calendar helpers for Monday-keyed weeks."""

from datetime import date, timedelta

DAYS_PER_WEEK = 7


def get_week_start(day: date) -> date:
    """Return the Monday of the week containing `day`."""
    return day - timedelta(days=day.weekday())


def to_iso(day: date) -> str:
    return day.isoformat()


def parse_iso(value: str) -> date:
    """Parse a YYYY-MM-DD string."""
    return date.fromisoformat(value[:10])


def week_dates(week_start: date) -> list[date]:
    """The seven consecutive dates starting at `week_start`."""
    return [week_start + timedelta(days=i) for i in range(DAYS_PER_WEEK)]


def shift_week(week_of_iso: str, weeks: int) -> str:
    """Move a week key by a whole number of weeks (negative = earlier)."""
    return to_iso(parse_iso(week_of_iso) + timedelta(days=DAYS_PER_WEEK * weeks))
