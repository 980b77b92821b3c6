"""Data access layer for lifestyle-tracker.

Each repository is bound to one account and addresses its documents under
`accounts/{account_id}/...`.
"""

from collections.abc import Callable

from ..models.favorite import Favorite
from ..models.session import Session
from ..models.weekly import TypeSettings, WeeklyPlan
from ..services.normalizer import normalize_document, validate_plan
from .document_store import DocumentStore


def account_root(account_id: str) -> str:
    return f"accounts/{account_id}"


class WeeklyPlanRepository:
    """Repository for weekly plan documents, one per week-start date."""

    def __init__(self, store: DocumentStore, account_id: str):
        self.store = store
        self.collection = f"{account_root(account_id)}/weeklyPlans"

    def path(self, week_of_iso: str) -> str:
        return f"{self.collection}/{week_of_iso}"

    async def get(self, week_of_iso: str) -> WeeklyPlan | None:
        """Get the normalized plan for a week, or None if never stored."""
        raw = await self.store.get(self.path(week_of_iso))
        if raw is None:
            return None
        data = normalize_document(raw)
        # The document key is authoritative for the week
        data["weekOfISO"] = week_of_iso
        return WeeklyPlan.from_dict(data)

    async def save(self, plan: WeeklyPlan) -> None:
        """Validate and write a plan, replacing the stored document."""
        validate_plan(plan)
        await self.store.set(self.path(plan.week_of_iso), plan.to_dict())

    async def list_weeks(self) -> list[str]:
        """Week keys of all stored plans, most recent first."""
        docs = await self.store.list_documents(self.collection)
        return sorted((d.id for d in docs), reverse=True)


class SessionRepository:
    """Repository for the session log."""

    def __init__(self, store: DocumentStore, account_id: str):
        self.store = store
        self.collection = f"{account_root(account_id)}/sessions"

    def path(self, session_id: str) -> str:
        return f"{self.collection}/{session_id}"

    async def create(self, session: Session) -> str:
        """Append a session to the log and return its generated id."""
        return await self.store.add(self.collection, session.to_dict())

    async def get(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        data = await self.store.get(self.path(session_id))
        if data is None:
            return None
        return Session.from_dict(data, id=session_id)

    async def put(self, session_id: str, session: Session) -> None:
        """Overwrite a session in place, keeping its id."""
        await self.store.set(self.path(session_id), session.to_dict())

    async def delete(self, session_id: str) -> bool:
        """Delete a session. Returns True if it existed."""
        return await self.store.delete(self.path(session_id))

    async def list_all(self) -> list[Session]:
        """List the whole log, oldest first."""
        docs = await self.store.list_documents(self.collection)
        return [Session.from_dict(d.data, id=d.id) for d in docs]

    async def list_by_date(self, date_iso: str) -> list[Session]:
        """List sessions stored with the given `dateISO`."""
        docs = await self.store.query(self.collection, dateISO=date_iso)
        return [Session.from_dict(d.data, id=d.id) for d in docs]

    async def list_placeholders(self, date_iso: str) -> list[Session]:
        """List placeholder sessions of a date."""
        return [s for s in await self.list_by_date(date_iso) if s.is_placeholder]


class FavoriteRepository:
    """Repository for favorites, keyed by `itemType::itemId`."""

    def __init__(self, store: DocumentStore, account_id: str):
        self.store = store
        self.collection = f"{account_root(account_id)}/favorites"

    def path(self, key: str) -> str:
        return f"{self.collection}/{key}"

    async def exists(self, key: str) -> bool:
        return await self.store.get(self.path(key)) is not None

    async def create(self, favorite: Favorite) -> None:
        await self.store.set(self.path(favorite.key), favorite.to_dict())

    async def delete(self, key: str) -> bool:
        return await self.store.delete(self.path(key))

    async def list_keys(self) -> set[str]:
        """Keys of all favorites of the account."""
        docs = await self.store.list_documents(self.collection)
        return {d.id for d in docs}

    def subscribe(self, callback: Callable[[set[str]], None]) -> Callable[[], None]:
        """Receive the full favorites key set after every change.

        Returns an unsubscribe function.
        """
        return self.store.watch(
            self.collection, lambda docs: callback({d.id for d in docs})
        )


class TypeSettingsRepository:
    """Repository for the account-wide workout type catalog."""

    def __init__(self, store: DocumentStore, account_id: str):
        self.store = store
        self.path = f"{account_root(account_id)}/settings/types"

    async def get(self) -> TypeSettings | None:
        data = await self.store.get(self.path)
        if data is None:
            return None
        return TypeSettings.from_dict(data)

    async def save(self, settings: TypeSettings) -> None:
        await self.store.set(self.path, settings.to_dict(), merge=True)
