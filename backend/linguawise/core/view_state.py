# backend/linguawise/core/view_state.py
"""
Optimistic collections for the dashboard.

A displayed list is changed first and the store is asked afterwards. If
the store call fails the list is put back exactly as it was (same rows,
same order) and a PersistenceError is raised, so the displayed state
never drifts from what is actually stored.

All mutations run on the single event loop thread; no locking is needed.
"""

import inspect
import logging
from typing import Any, Callable, Generic, Iterable, List, Optional, Tuple, TypeVar

from linguawise.core.statistics import aggregate
from linguawise.db.repository import SupabaseStore
from linguawise.errors import GENERIC_PERSISTENCE_ERROR, PersistenceError
from linguawise.models import (
    DictionaryEntry,
    Favorite,
    TranslationHistoryItem,
    UsageStatistics,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

RemoteCall = Callable[[], Any]


async def _call(remote: RemoteCall) -> Any:
    result = remote()
    if inspect.isawaitable(result):
        result = await result
    return result


class OptimisticList(Generic[T]):
    """An ordered list of records with rollback-on-failure mutations."""

    def __init__(self, items: Iterable[T] = (), key: Callable[[T], Any] = lambda item: item.id):
        self._items: List[T] = list(items)
        self._key = key

    @property
    def items(self) -> Tuple[T, ...]:
        return tuple(self._items)

    def __len__(self):
        return len(self._items)

    def replace(self, items: Iterable[T]) -> None:
        self._items = list(items)

    async def _apply(self, mutate: Callable[[], None], remote: RemoteCall) -> Any:
        snapshot = list(self._items)
        mutate()
        try:
            return await _call(remote)
        except Exception as e:
            self._items = snapshot
            logger.warning("Remote update failed, restored %d rows: %s", len(snapshot), e)
            if isinstance(e, PersistenceError):
                raise
            raise PersistenceError(GENERIC_PERSISTENCE_ERROR) from e

    async def remove(self, item_id: Any, remote: RemoteCall) -> None:
        def mutate():
            self._items = [item for item in self._items if self._key(item) != item_id]
        await self._apply(mutate, remote)

    async def clear(self, remote: RemoteCall) -> None:
        def mutate():
            self._items = []
        await self._apply(mutate, remote)

    async def prepend(self, item: T, remote: RemoteCall) -> T:
        """
        Show the item at the top right away. If the remote call returns the
        stored record (with its assigned id) it replaces the tentative one.
        """
        def mutate():
            self._items = [item] + self._items
        stored = await self._apply(mutate, remote)
        if stored is not None:
            self._items = [stored if current is item else current for current in self._items]
            return stored
        return item


class DashboardState:
    """History, favorites and dictionary lists for one signed-in user."""

    def __init__(self, store: SupabaseStore, user_id: str):
        self.store = store
        self.user_id = user_id
        self.history: OptimisticList[TranslationHistoryItem] = OptimisticList()
        self.favorites: OptimisticList[Favorite] = OptimisticList()
        self.dictionary: OptimisticList[DictionaryEntry] = OptimisticList()

    def load(self, search: Optional[str] = None) -> "DashboardState":
        self.history.replace(self.store.list_history(self.user_id, search))
        self.favorites.replace(self.store.list_favorites(self.user_id))
        self.dictionary.replace(self.store.list_dictionary(self.user_id, search))
        return self

    async def delete_history(self, item_id: str) -> None:
        await self.history.remove(item_id, lambda: self.store.delete_history(self.user_id, item_id))

    async def clear_history(self) -> None:
        await self.history.clear(lambda: self.store.clear_history(self.user_id))

    async def delete_favorite(self, favorite_id: str) -> None:
        await self.favorites.remove(favorite_id, lambda: self.store.delete_favorite(self.user_id, favorite_id))

    async def add_dictionary_entry(self, entry: DictionaryEntry) -> DictionaryEntry:
        return await self.dictionary.prepend(entry, lambda: self.store.add_dictionary_entry(entry))

    async def delete_dictionary_entry(self, entry_id: str) -> None:
        await self.dictionary.remove(entry_id, lambda: self.store.delete_dictionary_entry(self.user_id, entry_id))

    def statistics(self) -> UsageStatistics:
        return aggregate(self.history.items)
