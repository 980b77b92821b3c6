"""Database layer for lifestyle-tracker."""

from .document_store import STORE_ERRORS, Document, DocumentStore
from .engine import get_db_path, init_db
from .repositories import (
    FavoriteRepository,
    SessionRepository,
    TypeSettingsRepository,
    WeeklyPlanRepository,
)

__all__ = [
    "STORE_ERRORS",
    "Document",
    "DocumentStore",
    "FavoriteRepository",
    "get_db_path",
    "init_db",
    "SessionRepository",
    "TypeSettingsRepository",
    "WeeklyPlanRepository",
]
