"""Data models for lifestyle-tracker."""

from .favorite import Favorite, FavoriteItemType, favorite_key, parse_favorite_key
from .session import Session, SessionExercise, SessionKind
from .weekly import (
    Category,
    SessionRef,
    SessionRefKind,
    TypeSettings,
    WeeklyDay,
    WeeklyPlan,
)

__all__ = [
    "Category",
    "Favorite",
    "FavoriteItemType",
    "favorite_key",
    "parse_favorite_key",
    "Session",
    "SessionExercise",
    "SessionKind",
    "SessionRef",
    "SessionRefKind",
    "TypeSettings",
    "WeeklyDay",
    "WeeklyPlan",
]
