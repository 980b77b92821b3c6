"""Weekly grid routes."""

from datetime import date

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel

from ...services.counts import weekly_summary
from ...utils.week_utils import parse_iso
from ..dependencies import drain_notifications, get_tracker

router = APIRouter(prefix="/week", tags=["week"])


class ToggleRequest(BaseModel):
    day_index: int
    workout_type: str
    week_of: str | None = None


class CommentRequest(BaseModel):
    day_index: int
    workout_type: str
    text: str = ""
    week_of: str | None = None


def _day(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return parse_iso(value)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid date: {value}") from None


def plan_payload(plan) -> dict:
    return {"plan": plan.to_dict(), "summary": weekly_summary(plan).to_dict()}


@router.get("")
async def get_week(request: Request, day: str | None = Query(None, alias="date")):
    """The week containing `date` (default today), with counts."""
    tracker = get_tracker(request)
    plan = await tracker.loader.load_current(_day(day))
    history = await tracker.loader.load_history(plan, tracker.settings.lookback_weeks)
    return plan_payload(history.current)


@router.post("/toggle")
async def toggle_type(request: Request, body: ToggleRequest):
    """Flip one checkbox."""
    tracker = get_tracker(request)
    plan = await tracker.loader.load_current(_day(body.week_of))
    result = await tracker.reconciler.toggle_type(plan, body.day_index, body.workout_type)
    return {
        **plan_payload(result.plan),
        "checked": result.checked,
        "placeholderId": result.placeholder_id,
        "errors": [str(e) for e in result.errors],
        "notifications": drain_notifications(tracker),
    }


@router.post("/comment")
async def set_comment(request: Request, body: CommentRequest):
    """Attach or clear a note on a day/type cell."""
    tracker = get_tracker(request)
    plan = await tracker.loader.load_current(_day(body.week_of))
    result = await tracker.reconciler.set_comment(
        plan, body.day_index, body.workout_type, body.text
    )
    return {
        **plan_payload(result.plan),
        "errors": [str(e) for e in result.errors],
        "notifications": drain_notifications(tracker),
    }


@router.get("/history")
async def get_history(request: Request, weeks: int | None = Query(None, ge=0)):
    """The current week and up to `weeks` prior weeks, renumbered."""
    tracker = get_tracker(request)
    lookback = tracker.settings.lookback_weeks if weeks is None else weeks
    plan = await tracker.loader.load_current()
    history = await tracker.loader.load_history(plan, lookback)
    return {"weeks": [plan_payload(p) for p in history.weeks]}
