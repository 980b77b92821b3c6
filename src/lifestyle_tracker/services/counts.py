"""Aggregate counts derived from the checkbox grid.

Counts come from the grid only, never from the session log, so they always
match what the user checked. Category totals are derived here and never
written back to the grid: checking "Bike" counts toward Cardio without
checking a separate "Cardio" box.
"""

from dataclasses import dataclass, field
from enum import Enum

from ..models.weekly import Category, WeeklyPlan


class BenchmarkStatus(str, Enum):
    """Progress of a weekly count against its goal."""

    MET = "met"
    CLOSE = "close"
    BELOW = "below"
    NO_GOAL = "no_goal"


def benchmark_status(count: int, goal: int) -> BenchmarkStatus:
    """Classify a count against its goal (one short counts as CLOSE)."""
    if goal <= 0:
        return BenchmarkStatus.NO_GOAL
    if count >= goal:
        return BenchmarkStatus.MET
    if count == goal - 1:
        return BenchmarkStatus.CLOSE
    return BenchmarkStatus.BELOW


def type_counts(plan: WeeklyPlan) -> dict[str, int]:
    """Days each type was checked. Every custom type is present."""
    counts = {t: 0 for t in plan.custom_types}
    for day in plan.days:
        for workout_type in day.checked_types():
            counts[workout_type] = counts.get(workout_type, 0) + 1
    return counts


def _categories_of(plan: WeeklyPlan, workout_type: str) -> set[Category]:
    categories = set()
    category = plan.category_of(workout_type)
    if category != Category.NONE:
        categories.add(category)
    # A type named like a category ("Cardio") counts toward it too
    named = Category.from_value(workout_type)
    if named != Category.NONE:
        categories.add(named)
    return categories


def category_counts(plan: WeeklyPlan) -> dict[Category, int]:
    """Days on which at least one type of each category was checked.

    A day counts once per category, so Bike and Cardio checked on the same
    day give one Cardio day.
    """
    counts = {c: 0 for c in Category if c != Category.NONE}
    for day in plan.days:
        seen: set[Category] = set()
        for workout_type in day.checked_types():
            seen |= _categories_of(plan, workout_type)
        for category in seen:
            counts[category] += 1
    return counts


def day_done(plan: WeeklyPlan, date_iso: str) -> int:
    """Checked boxes on one day (0 if the date is not in the week)."""
    index = plan.day_index(date_iso)
    if index is None:
        return 0
    return len(plan.days[index].checked_types())


def week_done(plan: WeeklyPlan) -> int:
    """Checked boxes over the whole week."""
    return sum(len(day.checked_types()) for day in plan.days)


def unique_session_count(plan: WeeklyPlan) -> int:
    """Distinct sessions referenced by the week."""
    ids = set()
    for day in plan.days:
        for ref in day.sessions_list:
            ids.add(ref.id or f"types:{','.join(ref.session_types)}")
    return len(ids)


@dataclass
class WeeklySummary:
    """Everything the weekly header shows."""

    week_of_iso: str
    week_number: int
    type_counts: dict[str, int]
    category_counts: dict[Category, int]
    week_done: int
    sessions: int
    status: dict[str, BenchmarkStatus] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "weekOfISO": self.week_of_iso,
            "weekNumber": self.week_number,
            "typeCounts": dict(self.type_counts),
            "categoryCounts": {c.value: n for c, n in self.category_counts.items()},
            "weekDone": self.week_done,
            "sessions": self.sessions,
            "status": {t: s.value for t, s in self.status.items()},
        }


def weekly_summary(plan: WeeklyPlan) -> WeeklySummary:
    """Compute counts and goal status for a week.

    Goals may be set for types (e.g. "Bike") or category names
    (e.g. "Cardio"); category goals are checked against category counts.
    """
    counts = type_counts(plan)
    categories = category_counts(plan)
    status = {}
    for name, goal in plan.benchmarks.items():
        category = Category.from_value(name)
        if name in counts:
            count = counts[name]
            if category != Category.NONE:
                count = max(count, categories[category])
        elif category != Category.NONE:
            count = categories[category]
        else:
            continue
        status[name] = benchmark_status(count, goal)

    return WeeklySummary(
        week_of_iso=plan.week_of_iso,
        week_number=plan.week_number,
        type_counts=counts,
        category_counts=categories,
        week_done=week_done(plan),
        sessions=unique_session_count(plan),
        status=status,
    )
