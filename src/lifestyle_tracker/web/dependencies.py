"""Request helpers shared by the routers."""

from fastapi import Request

from ..context import TrackerContext


def get_tracker(request: Request) -> TrackerContext:
    """Get the tracker context from app state."""
    return request.app.state.tracker


def drain_notifications(tracker: TrackerContext) -> list[dict]:
    """Pending notifications as JSON, clearing them."""
    return [n.to_dict() for n in tracker.notifier.drain()]
