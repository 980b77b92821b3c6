"""Favorites routes."""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from ...models.favorite import FavoriteItemType
from ..dependencies import drain_notifications, get_tracker

router = APIRouter(prefix="/favorites", tags=["favorites"])


class FavoriteToggle(BaseModel):
    item_type: FavoriteItemType
    item_id: str


@router.get("")
async def list_favorites(request: Request):
    """Current favorite keys (`itemType::itemId`)."""
    tracker = get_tracker(request)
    return {"favorites": sorted(tracker.favorites_cache.keys)}


@router.post("/toggle")
async def toggle_favorite(request: Request, body: FavoriteToggle):
    """Favorite or unfavorite an item."""
    tracker = get_tracker(request)
    outcome = await tracker.favorites_sync.toggle(body.item_type, body.item_id)
    return {
        "status": outcome.value if outcome else "in_flight",
        "favorite": tracker.favorites_sync.is_favorite(body.item_type, body.item_id),
        "notifications": drain_notifications(tracker),
    }
