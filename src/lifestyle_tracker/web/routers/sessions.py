"""Session log routes."""

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from ...models.session import Session, SessionExercise
from ...services.reconciler import CompletionStatus
from ...utils.week_utils import parse_iso
from ..dependencies import drain_notifications, get_tracker
from .week import plan_payload

router = APIRouter(prefix="/sessions", tags=["sessions"])


class ExerciseIn(BaseModel):
    name: str
    id: str | None = None
    min_sets: int = 3
    target_reps: int = 0
    sets: list[int] = Field(default_factory=list)


class SessionIn(BaseModel):
    date_iso: str
    session_name: str = "Workout"
    session_types: list[str] = Field(default_factory=list)
    exercises: list[ExerciseIn] = Field(default_factory=list)
    duration_sec: int = 0
    source_template_id: str | None = None


@router.get("")
async def list_sessions(request: Request, date: str | None = None):
    """List the session log, optionally for one date."""
    tracker = get_tracker(request)
    if date:
        sessions = await tracker.sessions.list_by_date(date)
    else:
        sessions = await tracker.sessions.list_all()
    return {"sessions": [{"id": s.id, **s.to_dict()} for s in sessions]}


@router.post("")
async def complete_workout(request: Request, body: SessionIn):
    """Record a finished workout."""
    tracker = get_tracker(request)
    try:
        day = parse_iso(body.date_iso)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid date: {body.date_iso}") from None

    session = Session(
        date_iso=day.isoformat(),
        session_name=body.session_name,
        session_types=list(body.session_types),
        exercises=[SessionExercise(**e.model_dump()) for e in body.exercises],
        duration_sec=body.duration_sec,
        source_template_id=body.source_template_id,
    )
    plan = await tracker.loader.load_current(day)
    result = await tracker.reconciler.complete_workout(plan, session)
    if result.status == CompletionStatus.FAILED:
        raise HTTPException(status_code=503, detail="Could not save session")

    return {
        **plan_payload(result.plan),
        "status": result.status.value,
        "sessionId": session.id,
        "errors": [str(e) for e in result.errors],
        "notifications": drain_notifications(tracker),
    }


@router.delete("/{session_id}")
async def delete_session(request: Request, session_id: str):
    """Delete a session and its references in its week."""
    tracker = get_tracker(request)
    stored = await tracker.sessions.get(session_id)
    if stored is None:
        raise HTTPException(status_code=404, detail="Session not found")

    day = parse_iso(stored.date_iso) if stored.date_iso else None
    plan = await tracker.loader.load_current(day)
    result = await tracker.reconciler.delete_session(plan, session_id)
    return {
        **plan_payload(result.plan),
        "status": "deleted" if result.ok else "failed",
        "errors": [str(e) for e in result.errors],
        "notifications": drain_notifications(tracker),
    }
