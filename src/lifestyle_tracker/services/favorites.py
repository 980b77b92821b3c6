"""Favorites with optimistic toggling.

Three pieces cooperate:

- `FavoritesCache` holds the account's favorite keys for every consumer.
  It is passed explicitly to whoever renders favorites and notifies its
  listeners (debounced) when the set changes.
- `OptimisticMutator` runs toggle-style mutations through a small per-key
  state machine: idle -> pending -> committed | rolled_back -> idle.
- `FavoritesSynchronizer` toggles a favorite with an immediate local flip,
  then confirms or reverts it, while a live subscription republishes the
  authoritative set into the cache.
"""

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum

from loguru import logger

from ..db.document_store import STORE_ERRORS
from ..db.repositories import FavoriteRepository
from ..errors import TrackerError
from ..models.favorite import Favorite, FavoriteItemType, favorite_key
from .notifications import Notifier

Listener = Callable[[frozenset[str]], None]


class FavoritesCache:
    """Shared in-memory set of favorite keys (`itemType::itemId`)."""

    def __init__(self, debounce_seconds: float = 0.15):
        self.debounce_seconds = debounce_seconds
        self._keys: set[str] = set()
        self._listeners: list[Listener] = []
        self._timer: asyncio.TimerHandle | None = None

    def contains(self, key: str) -> bool:
        return key in self._keys

    @property
    def keys(self) -> frozenset[str]:
        return frozenset(self._keys)

    def set_present(self, key: str, present: bool) -> bool:
        """Add or remove one key. Returns True if the set changed."""
        if present == (key in self._keys):
            return False
        if present:
            self._keys.add(key)
        else:
            self._keys.discard(key)
        self._schedule_notify()
        return True

    def replace(self, keys: set[str] | frozenset[str]) -> bool:
        """Replace the whole set. Returns True if it changed.

        An unchanged set (e.g. a subscription echoing a toggle that was
        already applied) triggers no notification.
        """
        if set(keys) == self._keys:
            return False
        self._keys = set(keys)
        self._schedule_notify()
        return True

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def flush(self) -> None:
        """Notify listeners now, dropping any pending debounce timer."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._notify()

    def _schedule_notify(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop (synchronous caller): nothing to debounce against
            self._notify()
            return
        if self._timer is not None:
            self._timer.cancel()
        self._timer = loop.call_later(self.debounce_seconds, self._fire)

    def _fire(self) -> None:
        self._timer = None
        self._notify()

    def _notify(self) -> None:
        snapshot = self.keys
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Favorites listener failed")


class MutationState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class OptimisticMutator:
    """Runs optimistic mutations, at most one in flight per key."""

    def __init__(self):
        self._states: dict[str, MutationState] = {}
        self.last_outcome: dict[str, MutationState] = {}

    def state(self, key: str) -> MutationState:
        return self._states.get(key, MutationState.IDLE)

    def is_pending(self, key: str) -> bool:
        return self.state(key) == MutationState.PENDING

    async def run(
        self,
        key: str,
        apply: Callable[[], None],
        commit: Callable[[], Awaitable[None]],
        revert: Callable[[], None],
        errors: tuple[type[BaseException], ...] = (Exception,),
    ) -> MutationState | None:
        """Apply a local change, then persist it or undo it.

        Args:
            key: Identity of the thing being mutated
            apply: Immediate local (optimistic) change
            commit: Persists the change. Any exception rolls back; those
                outside `errors` are re-raised afterwards
            revert: Undoes `apply`
            errors: Exception types that count as a failed commit

        Returns:
            COMMITTED or ROLLED_BACK, or None when a mutation for `key` was
            already in flight and this request was ignored
        """
        if self.is_pending(key):
            logger.debug("Mutation for {} already in flight; ignoring", key)
            return None

        self._states[key] = MutationState.PENDING
        outcome = MutationState.ROLLED_BACK
        try:
            apply()
            try:
                await commit()
            except errors as e:
                logger.warning("Mutation for {} failed, rolling back: {}", key, e)
                revert()
            except BaseException:
                logger.error("Mutation for {} raised unexpectedly, rolling back", key)
                revert()
                raise
            else:
                outcome = MutationState.COMMITTED
        finally:
            self.last_outcome[key] = outcome
            self._states.pop(key, None)
        return outcome


class FavoritesSynchronizer:
    """Toggles favorites optimistically and mirrors the stored set."""

    def __init__(
        self,
        repo: FavoriteRepository,
        cache: FavoritesCache,
        notifier: Notifier | None = None,
    ):
        self.repo = repo
        self.cache = cache
        self.notifier = notifier or Notifier()
        self.mutator = OptimisticMutator()
        # Locally rendered flags; they lead the cache during a toggle
        self.flags: dict[str, bool] = {}
        self._unsubscribe: Callable[[], None] | None = None

    def is_favorite(self, item_type: FavoriteItemType | str, item_id: str) -> bool:
        key = favorite_key(item_type, item_id)
        if key in self.flags:
            return self.flags[key]
        return self.cache.contains(key)

    def is_pending(self, item_type: FavoriteItemType | str, item_id: str) -> bool:
        return self.mutator.is_pending(favorite_key(item_type, item_id))

    async def toggle(
        self, item_type: FavoriteItemType | str, item_id: str
    ) -> MutationState | None:
        """Toggle a favorite.

        Returns:
            COMMITTED, ROLLED_BACK, or None if a toggle for the same item was
            already in flight
        """
        key = favorite_key(item_type, item_id)
        before = self.is_favorite(item_type, item_id)

        def apply() -> None:
            self.flags[key] = not before

        def revert() -> None:
            self.flags[key] = before

        async def commit() -> None:
            if await self.repo.exists(key):
                await self.repo.delete(key)
                present = False
            else:
                await self.repo.create(
                    Favorite(item_type=FavoriteItemType(item_type), item_id=item_id)
                )
                present = True
            self.flags[key] = present
            self.cache.set_present(key, present)

        outcome = await self.mutator.run(
            key, apply, commit, revert, errors=(*STORE_ERRORS, TrackerError)
        )
        if outcome == MutationState.COMMITTED:
            self.notifier.success(
                "Favorited" if self.flags[key] else "Removed favorite"
            )
        elif outcome == MutationState.ROLLED_BACK:
            self.notifier.error("Could not update favorite")
        return outcome

    async def start(self) -> None:
        """Load the stored set and follow later changes."""
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self.repo.subscribe(self._on_snapshot)
        self._on_snapshot(await self.repo.list_keys())

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_snapshot(self, keys: set[str]) -> None:
        # Settled local flags now follow the authoritative set
        for key in list(self.flags):
            if not self.mutator.is_pending(key):
                self.flags.pop(key)
        if self.cache.replace(keys):
            logger.debug("Favorites changed ({} total)", len(keys))
