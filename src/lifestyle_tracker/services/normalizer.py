"""Weekly plan normalization and validation.

`normalize_document` accepts whatever a stored weekly plan document contains
(older app versions wrote duplicate type names, stringly booleans, repeated
session references and stale counters) and returns a well-formed document.
It is pure, total and idempotent: normalizing twice gives the same result as
normalizing once.

`sessions` is always `len(sessionsList)`. A day from an older document that
only carries a `sessions` count comes out with an empty list and a count of
0; `WeekLoader.heal` rebuilds the list from the session log on load, which
restores the count.
"""

import json
from datetime import date
from typing import Any

from ..errors import ValidationError
from ..models.weekly import (
    DEFAULT_BENCHMARKS,
    DEFAULT_CUSTOM_TYPES,
    DEFAULT_TYPE_CATEGORIES,
    Category,
    SessionRef,
    WeeklyDay,
    WeeklyPlan,
)
from ..utils.week_utils import DAYS_PER_WEEK, parse_iso, to_iso, week_dates


def ensure_unique_types(values: Any) -> list[str]:
    """Trim, drop empty names and dedup, keeping first-seen order."""
    if not isinstance(values, (list, tuple)):
        return []
    seen: list[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        name = value.strip()
        if name and name not in seen:
            seen.append(name)
    return seen


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _normalize_benchmarks(raw: Any, custom_types: list[str]) -> dict[str, int]:
    benchmarks = (
        {str(k): _to_int(v, 0) for k, v in raw.items()} if isinstance(raw, dict) else {}
    )
    # Stale entries for removed types stay; removal is an explicit catalog edit
    for workout_type in custom_types:
        benchmarks.setdefault(workout_type, 0)
    return benchmarks


def _normalize_session_ref(entry: Any) -> dict:
    if not isinstance(entry, dict):
        entry = {}
    raw_id = entry.get("id")
    session_id = str(raw_id).strip() if raw_id is not None else ""
    raw_types = entry.get("sessionTypes")
    session_types = (
        [t.strip() for t in raw_types if isinstance(t, str) and t.strip()]
        if isinstance(raw_types, list)
        else []
    )
    return SessionRef.from_dict(
        {"id": session_id or None, "sessionTypes": session_types, "kind": entry.get("kind")}
    ).to_dict()


def _session_ref_key(ref: dict) -> str:
    if ref["id"]:
        return f"id:{ref['id']}"
    return f"types:{json.dumps(ref['sessionTypes'])}"


def _normalize_sessions_list(raw: Any) -> list[dict]:
    if not isinstance(raw, list):
        return []
    seen: set[str] = set()
    result = []
    for entry in raw:
        ref = _normalize_session_ref(entry)
        key = _session_ref_key(ref)
        if key in seen:
            continue
        seen.add(key)
        result.append(ref)
    return result


def _normalize_day(raw: dict) -> dict:
    types: dict[str, bool] = {}
    raw_types = raw.get("types")
    if isinstance(raw_types, dict):
        for key, value in raw_types.items():
            name = str(key).strip()
            if name:
                types[name] = bool(value)

    comments: dict[str, str] = {}
    raw_comments = raw.get("comments")
    if isinstance(raw_comments, dict):
        for key, value in raw_comments.items():
            name = str(key).strip()
            if name and value is not None:
                comments[name] = str(value)

    # A bare legacy "sessions" count is dropped here and rebuilt from the log
    sessions_list = _normalize_sessions_list(raw.get("sessionsList"))
    date_iso = raw.get("dateISO")
    return {
        "dateISO": date_iso.strip() if isinstance(date_iso, str) else "",
        "types": types,
        "sessionsList": sessions_list,
        "sessions": len(sessions_list),
        "comments": comments,
    }


def normalize_document(raw: Any) -> dict:
    """Sanitize a stored weekly plan document.

    Args:
        raw: Decoded document body (any JSON-like value)

    Returns:
        A document `WeeklyPlan.from_dict` accepts, with deduped custom types,
        a benchmark for every custom type, boolean day types, deduped session
        references and `sessions == len(sessionsList)` on every day.
    """
    data = raw if isinstance(raw, dict) else {}
    custom_types = ensure_unique_types(data.get("customTypes"))

    raw_days = data.get("days")
    days = (
        [_normalize_day(d) for d in raw_days if isinstance(d, dict)]
        if isinstance(raw_days, list)
        else []
    )

    raw_categories = data.get("typeCategories")
    type_categories = {}
    if isinstance(raw_categories, dict):
        for key, value in raw_categories.items():
            name = str(key).strip()
            if name:
                type_categories[name] = Category.from_value(value).value

    week_of_iso = data.get("weekOfISO")
    return {
        "weekOfISO": week_of_iso.strip() if isinstance(week_of_iso, str) else "",
        "weekNumber": max(_to_int(data.get("weekNumber"), 1), 1),
        "days": days,
        "benchmarks": _normalize_benchmarks(data.get("benchmarks"), custom_types),
        "customTypes": custom_types,
        "typeCategories": type_categories,
    }


def normalize_plan(plan: WeeklyPlan) -> WeeklyPlan:
    """Normalize a plan model (see `normalize_document`)."""
    return WeeklyPlan.from_dict(normalize_document(plan.to_dict()))


def validate_plan(plan: WeeklyPlan) -> None:
    """Reject plans that must never be persisted.

    Raises:
        ValidationError: On a bad week key, a day count other than seven,
            duplicate or non-contiguous dates, or an empty type name.
    """
    try:
        week_start = parse_iso(plan.week_of_iso)
    except ValueError:
        raise ValidationError(f"Invalid week key {plan.week_of_iso!r}") from None

    if len(plan.days) != DAYS_PER_WEEK:
        raise ValidationError(
            f"Week {plan.week_of_iso} has {len(plan.days)} days, expected {DAYS_PER_WEEK}"
        )

    dates = [d.date_iso for d in plan.days]
    if len(set(dates)) != len(dates):
        raise ValidationError(f"Week {plan.week_of_iso} has duplicate dates")

    expected = [to_iso(d) for d in week_dates(week_start)]
    if dates != expected:
        raise ValidationError(
            f"Week {plan.week_of_iso} days must be {expected[0]}..{expected[-1]} in order"
        )

    for workout_type in plan.custom_types:
        if not workout_type.strip():
            raise ValidationError("Workout type names must not be empty")


def default_plan(
    week_start: date,
    custom_types: list[str] | None = None,
    benchmarks: dict[str, int] | None = None,
    type_categories: dict[str, Category] | None = None,
) -> WeeklyPlan:
    """Create a fresh week with empty days.

    Types, benchmarks and categories default to the tracker's starter set.
    """
    plan = WeeklyPlan(
        week_of_iso=to_iso(week_start),
        days=[WeeklyDay(date_iso=to_iso(d)) for d in week_dates(week_start)],
        benchmarks=dict(DEFAULT_BENCHMARKS if benchmarks is None else benchmarks),
        custom_types=list(DEFAULT_CUSTOM_TYPES if custom_types is None else custom_types),
        type_categories=dict(
            DEFAULT_TYPE_CATEGORIES if type_categories is None else type_categories
        ),
    )
    return normalize_plan(plan)
