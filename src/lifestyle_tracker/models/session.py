"""Session log data models."""

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

PLACEHOLDER_SESSION_NAME = "Manual"


class SessionKind(str, Enum):
    """Completed workout, or a placeholder backing a checkbox-only day."""

    REAL = "real"
    PLACEHOLDER = "placeholder"


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def _date_from_millis(value) -> str | None:
    try:
        return datetime.fromtimestamp(float(value) / 1000).date().isoformat()
    except (TypeError, ValueError, OverflowError, OSError):
        return None


@dataclass
class SessionExercise:
    """An exercise performed in a session, with reps per set."""

    name: str
    id: str | None = None
    min_sets: int = 3
    target_reps: int = 0
    sets: list[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "minSets": self.min_sets,
            "targetReps": self.target_reps,
            "sets": list(self.sets),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SessionExercise":
        """Create from dictionary."""
        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            min_sets=int(data.get("minSets", 3) or 0),
            target_reps=int(data.get("targetReps", 0) or 0),
            sets=[int(s or 0) for s in data.get("sets") or []],
        )


@dataclass
class Session:
    """A session log entry.

    Real sessions are immutable once completed. Placeholder ("Manual")
    sessions are created by the reconciler for checkbox-only days and are
    updated or retired while no real session exists for the date.
    """

    date_iso: str
    session_name: str = "Workout"
    session_types: list[str] = field(default_factory=list)
    exercises: list[SessionExercise] = field(default_factory=list)
    completed_at: int | None = None
    duration_sec: int = 0
    source_template_id: str | None = None
    kind: SessionKind = SessionKind.REAL
    completed: bool = False
    id: str | None = None

    @classmethod
    def placeholder(cls, date_iso: str, session_types: list[str]) -> "Session":
        """Create a placeholder session for a checkbox-only day."""
        return cls(
            date_iso=date_iso,
            session_name=PLACEHOLDER_SESSION_NAME,
            session_types=list(session_types),
            completed_at=now_millis(),
            kind=SessionKind.PLACEHOLDER,
            completed=True,
        )

    @property
    def is_placeholder(self) -> bool:
        return self.kind == SessionKind.PLACEHOLDER

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        data = {
            "dateISO": self.date_iso,
            "sessionName": self.session_name,
            "sessionTypes": list(self.session_types),
            "exercises": [e.to_dict() for e in self.exercises],
            "completedAt": self.completed_at,
            "durationSec": self.duration_sec,
            "kind": self.kind.value,
        }
        if self.source_template_id:
            data["sourceTemplateId"] = self.source_template_id
        return data

    @classmethod
    def from_dict(cls, data: dict, id: str | None = None) -> "Session":
        """Create from a stored document.

        Older documents may lack `dateISO` or `kind`; the date falls back to
        other date-like fields and `sessionName == "Manual"` marks a
        placeholder.
        """
        kind = data.get("kind")
        if kind not in (SessionKind.REAL.value, SessionKind.PLACEHOLDER.value):
            kind = (
                SessionKind.PLACEHOLDER.value
                if data.get("sessionName") == PLACEHOLDER_SESSION_NAME
                else SessionKind.REAL.value
            )

        return cls(
            id=id or data.get("id"),
            date_iso=session_date(data) or "",
            session_name=data.get("sessionName", "Workout"),
            session_types=list(data.get("sessionTypes") or []),
            exercises=[
                SessionExercise.from_dict(e)
                for e in data.get("exercises") or []
                if isinstance(e, dict)
            ],
            completed_at=data.get("completedAt"),
            duration_sec=int(data.get("durationSec") or 0),
            source_template_id=data.get("sourceTemplateId"),
            kind=SessionKind(kind),
            completed=True,
        )


def session_date(data: dict) -> str | None:
    """Derive the calendar date (YYYY-MM-DD) of a stored session document."""
    for key in ("dateISO", "date"):
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()[:10]

    for key in ("completedAt", "createdAt", "ts", "timestamp"):
        if data.get(key) is not None:
            derived = _date_from_millis(data[key])
            if derived:
                return derived

    return None
