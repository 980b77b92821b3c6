"""Weekly plan data models: the per-day checkbox grid and its session references."""

import copy
from dataclasses import dataclass, field
from enum import Enum

# Legacy documents marked locally-created placeholder ids with this prefix
LEGACY_PLACEHOLDER_PREFIX = "manual:"

DEFAULT_CUSTOM_TYPES = ["Bike", "Calves", "Rings", "Mindfulness"]


class Category(str, Enum):
    """Aggregate bucket a workout type counts toward."""

    NONE = "None"
    CARDIO = "Cardio"
    RESISTANCE = "Resistance"
    MINDFULNESS = "Mindfulness"
    SKILLS = "Skills"

    @classmethod
    def from_value(cls, value) -> "Category":
        """Parse a stored category, reading unknown values as NONE."""
        if isinstance(value, Category):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            return cls.NONE


DEFAULT_TYPE_CATEGORIES = {
    "Bike": Category.CARDIO,
    "Calves": Category.NONE,
    "Rings": Category.RESISTANCE,
    "Mindfulness": Category.MINDFULNESS,
}

DEFAULT_BENCHMARKS = {
    "Bike": 3,
    "Calves": 4,
    "Resistance": 2,
    "Cardio": 2,
    "Mobility": 2,
    "Other": 1,
    "Mindfulness": 3,
}


class SessionRefKind(str, Enum):
    """Whether a session reference points at a real or a placeholder session."""

    REAL = "real"
    PLACEHOLDER = "placeholder"


@dataclass
class SessionRef:
    """A day's reference into the session log."""

    id: str | None
    session_types: list[str] = field(default_factory=list)
    kind: SessionRefKind = SessionRefKind.REAL

    @classmethod
    def real(cls, session_id: str, session_types: list[str]) -> "SessionRef":
        return cls(id=session_id, session_types=list(session_types))

    @classmethod
    def placeholder(cls, session_id: str, session_types: list[str]) -> "SessionRef":
        return cls(
            id=session_id,
            session_types=list(session_types),
            kind=SessionRefKind.PLACEHOLDER,
        )

    @property
    def is_real(self) -> bool:
        """True when this references a completed, non-placeholder session."""
        return self.kind == SessionRefKind.REAL and bool(self.id)

    @property
    def is_placeholder(self) -> bool:
        return self.kind == SessionRefKind.PLACEHOLDER

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "sessionTypes": list(self.session_types),
            "kind": self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SessionRef":
        """Create from dictionary, inferring the kind of legacy entries."""
        session_id = data.get("id") or None
        kind = data.get("kind")
        if kind in (SessionRefKind.REAL.value, SessionRefKind.PLACEHOLDER.value):
            ref_kind = SessionRefKind(kind)
        elif session_id and str(session_id).startswith(LEGACY_PLACEHOLDER_PREFIX):
            ref_kind = SessionRefKind.PLACEHOLDER
        else:
            ref_kind = SessionRefKind.REAL
        return cls(
            id=str(session_id) if session_id else None,
            session_types=list(data.get("sessionTypes") or []),
            kind=ref_kind,
        )


@dataclass
class WeeklyDay:
    """One calendar day of the checkbox grid."""

    date_iso: str
    types: dict[str, bool] = field(default_factory=dict)
    sessions_list: list[SessionRef] = field(default_factory=list)
    comments: dict[str, str] = field(default_factory=dict)

    @property
    def sessions(self) -> int:
        """Number of sessions backing this day (always len(sessions_list))."""
        return len(self.sessions_list)

    def checked_types(self) -> list[str]:
        """Types checked on this day, in grid order."""
        return [t for t, done in self.types.items() if done]

    def has_real_session(self) -> bool:
        return any(ref.is_real for ref in self.sessions_list)

    def placeholder_refs(self) -> list[SessionRef]:
        return [ref for ref in self.sessions_list if ref.is_placeholder]

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "dateISO": self.date_iso,
            "types": dict(self.types),
            "sessionsList": [ref.to_dict() for ref in self.sessions_list],
            "sessions": self.sessions,
            "comments": dict(self.comments),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WeeklyDay":
        """Create from dictionary."""
        return cls(
            date_iso=data["dateISO"],
            types={k: bool(v) for k, v in (data.get("types") or {}).items()},
            sessions_list=[
                SessionRef.from_dict(s) for s in (data.get("sessionsList") or [])
            ],
            comments=dict(data.get("comments") or {}),
        )


@dataclass
class WeeklyPlan:
    """One week of the tracker, keyed by its Monday.

    `week_number` is a display label recomputed on every history load;
    gaps between stored weeks are not visible from it.
    """

    week_of_iso: str
    days: list[WeeklyDay] = field(default_factory=list)
    benchmarks: dict[str, int] = field(default_factory=dict)
    custom_types: list[str] = field(default_factory=list)
    type_categories: dict[str, Category] = field(default_factory=dict)
    week_number: int = 1

    def day_index(self, date_iso: str) -> int | None:
        """Position of the day with the given date, or None."""
        for i, day in enumerate(self.days):
            if day.date_iso == date_iso:
                return i
        return None

    def category_of(self, workout_type: str) -> Category:
        return self.type_categories.get(workout_type, Category.NONE)

    def copy(self) -> "WeeklyPlan":
        """Deep copy, so callers can treat plans as values."""
        return copy.deepcopy(self)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "weekOfISO": self.week_of_iso,
            "weekNumber": self.week_number,
            "days": [d.to_dict() for d in self.days],
            "benchmarks": dict(self.benchmarks),
            "customTypes": list(self.custom_types),
            "typeCategories": {k: v.value for k, v in self.type_categories.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WeeklyPlan":
        """Create from dictionary."""
        return cls(
            week_of_iso=data["weekOfISO"],
            week_number=int(data.get("weekNumber") or 1),
            days=[WeeklyDay.from_dict(d) for d in data.get("days") or []],
            benchmarks={k: int(v) for k, v in (data.get("benchmarks") or {}).items()},
            custom_types=list(data.get("customTypes") or []),
            type_categories={
                k: Category.from_value(v)
                for k, v in (data.get("typeCategories") or {}).items()
            },
        )


@dataclass
class TypeSettings:
    """Account-wide workout type catalog shared by all weeks."""

    types: list[str] = field(default_factory=list)
    categories: dict[str, Category] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "types": list(self.types),
            "categories": {k: v.value for k, v in self.categories.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TypeSettings":
        """Create from dictionary (accepts the legacy `typeCategories` key)."""
        raw_types = data.get("types")
        categories = data.get("categories") or data.get("typeCategories") or {}
        return cls(
            types=[t for t in raw_types if isinstance(t, str)]
            if isinstance(raw_types, list)
            else [],
            categories={
                str(k): Category.from_value(v)
                for k, v in categories.items()
            }
            if isinstance(categories, dict)
            else {},
        )
