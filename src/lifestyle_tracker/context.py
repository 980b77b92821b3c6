"""Wiring of stores and services for one account."""

from dataclasses import dataclass, field
from pathlib import Path

from .config import Settings
from .db.document_store import DocumentStore
from .db.engine import get_db_path
from .db.repositories import (
    FavoriteRepository,
    SessionRepository,
    TypeSettingsRepository,
    WeeklyPlanRepository,
)
from .services.catalog import CatalogService
from .services.favorites import FavoritesCache, FavoritesSynchronizer
from .services.loader import WeekLoader
from .services.notifications import Notifier
from .services.reconciler import Reconciler


@dataclass
class TrackerContext:
    """Repositories and services bound to one account and database."""

    settings: Settings
    db_path: Path
    store: DocumentStore
    plans: WeeklyPlanRepository
    sessions: SessionRepository
    favorites: FavoriteRepository
    type_settings: TypeSettingsRepository
    notifier: Notifier = field(default_factory=Notifier)

    @classmethod
    def create(
        cls, settings: Settings | None = None, db_path: Path | None = None
    ) -> "TrackerContext":
        settings = settings or Settings()
        db_path = db_path or get_db_path(settings.data_dir)
        store = DocumentStore(db_path)
        account = settings.account_id
        return cls(
            settings=settings,
            db_path=db_path,
            store=store,
            plans=WeeklyPlanRepository(store, account),
            sessions=SessionRepository(store, account),
            favorites=FavoriteRepository(store, account),
            type_settings=TypeSettingsRepository(store, account),
        )

    def __post_init__(self):
        self.reconciler = Reconciler(self.plans, self.sessions, self.notifier)
        self.loader = WeekLoader(self.plans, self.sessions, self.type_settings)
        self.catalog = CatalogService(self.plans, self.type_settings, self.reconciler)
        self.favorites_cache = FavoritesCache(self.settings.favorites_debounce_seconds)
        self.favorites_sync = FavoritesSynchronizer(
            self.favorites, self.favorites_cache, self.notifier
        )
