# backend/linguawise/db/repository.py
"""
Supabase-backed store for per-user records.

Tables:
- translation_history : TranslationHistoryItem rows
- favorites           : Favorite rows
- dictionary          : DictionaryEntry rows
- user_settings       : one UserSettings row per user (keyed by user_id)

Every query is filtered by user_id, so one user can never read or delete
another user's rows. Client failures are logged and re-raised as
PersistenceError; deleting or fetching a row that does not exist (for this
user) raises RecordNotFoundError.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from supabase import Client

from linguawise.errors import PersistenceError, RecordNotFoundError
from linguawise.models import (
    DictionaryEntry,
    Favorite,
    TranslationHistoryItem,
    TranslationResult,
    TranslationRequest,
    UserSettings,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

HISTORY_TABLE = "translation_history"
FAVORITES_TABLE = "favorites"
DICTIONARY_TABLE = "dictionary"
SETTINGS_TABLE = "user_settings"

SETTINGS_FIELDS = ("native_language", "default_target_language", "default_tone", "save_history")


def _with_str_id(row: Dict[str, Any]) -> Dict[str, Any]:
    """Store ids may come back as ints; the models carry them as strings."""
    if row.get("id") is not None:
        return {**row, "id": str(row["id"])}
    return row


def _matches(search: Optional[str], *values: str) -> bool:
    if not search:
        return True
    needle = search.lower()
    return any(needle in (value or "").lower() for value in values)


class SupabaseStore:
    """Per-user collections on top of a supabase-py Client."""

    def __init__(self, client: Client):
        self.client = client

    def _run(self, action: str, query: Callable[[], Any]) -> List[Dict[str, Any]]:
        """Execute a query builder chain and return its rows."""
        try:
            result = query()
        except Exception as e:
            logger.error("Store operation '%s' failed: %s", action, e)
            raise PersistenceError(f"Failed to {action}") from e
        return result.data or []

    # Translation history
    def add_history(self, user_id: str, request: TranslationRequest,
                    result: TranslationResult) -> TranslationHistoryItem:
        rows = self._run("save history", lambda: (
            self.client.table(HISTORY_TABLE)
            .insert({
                "user_id": user_id,
                "original_text": request.original_text,
                "translated_text": result.translated_text,
                "source_lang": request.source_lang,
                "target_lang": request.target_lang,
                "tone": request.tone,
                "timestamp": utc_now_iso(),
            })
            .execute()
        ))
        if not rows:
            raise PersistenceError("Failed to save history")
        return TranslationHistoryItem(**_with_str_id(rows[0]))

    def list_history(self, user_id: str, search: Optional[str] = None) -> List[TranslationHistoryItem]:
        """History items for the user, newest first, optionally filtered by text."""
        rows = self._run("list history", lambda: (
            self.client.table(HISTORY_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("timestamp", desc=True)
            .execute()
        ))
        items = [TranslationHistoryItem(**_with_str_id(row)) for row in rows]
        return [item for item in items if _matches(search, item.original_text, item.translated_text)]

    def get_history(self, user_id: str, item_id: str) -> TranslationHistoryItem:
        rows = self._run("fetch history item", lambda: (
            self.client.table(HISTORY_TABLE)
            .select("*")
            .eq("id", item_id)
            .eq("user_id", user_id)
            .execute()
        ))
        if not rows:
            raise RecordNotFoundError("History item not found")
        return TranslationHistoryItem(**_with_str_id(rows[0]))

    def delete_history(self, user_id: str, item_id: str) -> None:
        rows = self._run("delete history item", lambda: (
            self.client.table(HISTORY_TABLE)
            .delete()
            .eq("id", item_id)
            .eq("user_id", user_id)
            .execute()
        ))
        if not rows:
            raise RecordNotFoundError("History item not found")

    def clear_history(self, user_id: str) -> int:
        """Delete every history item owned by the user; returns how many."""
        rows = self._run("clear history", lambda: (
            self.client.table(HISTORY_TABLE)
            .delete()
            .eq("user_id", user_id)
            .execute()
        ))
        return len(rows)

    # Favorites
    def add_favorite(self, favorite: Favorite) -> Favorite:
        rows = self._run("save favorite", lambda: (
            self.client.table(FAVORITES_TABLE)
            .insert(favorite.model_dump(exclude={"id"}))
            .execute()
        ))
        if not rows:
            raise PersistenceError("Failed to save favorite")
        return Favorite(**_with_str_id(rows[0]))

    def list_favorites(self, user_id: str) -> List[Favorite]:
        rows = self._run("list favorites", lambda: (
            self.client.table(FAVORITES_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("favorited_at", desc=True)
            .execute()
        ))
        return [Favorite(**_with_str_id(row)) for row in rows]

    def delete_favorite(self, user_id: str, favorite_id: str) -> None:
        rows = self._run("delete favorite", lambda: (
            self.client.table(FAVORITES_TABLE)
            .delete()
            .eq("id", favorite_id)
            .eq("user_id", user_id)
            .execute()
        ))
        if not rows:
            raise RecordNotFoundError("Favorite not found")

    # Personal dictionary
    def add_dictionary_entry(self, entry: DictionaryEntry) -> DictionaryEntry:
        rows = self._run("save dictionary entry", lambda: (
            self.client.table(DICTIONARY_TABLE)
            .insert(entry.model_dump(exclude={"id"}))
            .execute()
        ))
        if not rows:
            raise PersistenceError("Failed to save dictionary entry")
        return DictionaryEntry(**_with_str_id(rows[0]))

    def list_dictionary(self, user_id: str, search: Optional[str] = None) -> List[DictionaryEntry]:
        rows = self._run("list dictionary", lambda: (
            self.client.table(DICTIONARY_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .execute()
        ))
        entries = [DictionaryEntry(**_with_str_id(row)) for row in rows]
        return [entry for entry in entries if _matches(search, entry.term, entry.translation)]

    def delete_dictionary_entry(self, user_id: str, entry_id: str) -> None:
        rows = self._run("delete dictionary entry", lambda: (
            self.client.table(DICTIONARY_TABLE)
            .delete()
            .eq("id", entry_id)
            .eq("user_id", user_id)
            .execute()
        ))
        if not rows:
            raise RecordNotFoundError("Dictionary entry not found")

    # Settings
    def get_settings(self, user_id: str) -> UserSettings:
        """Stored settings, or the new-account defaults if none are saved."""
        rows = self._run("fetch settings", lambda: (
            self.client.table(SETTINGS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        ))
        if not rows:
            return UserSettings()
        return UserSettings(**{k: v for k, v in rows[0].items() if k in SETTINGS_FIELDS and v is not None})

    def upsert_settings(self, user_id: str, changes: Dict[str, Any]) -> UserSettings:
        """Merge the given fields into the stored settings and save them."""
        merged = self.get_settings(user_id).model_copy(
            update={k: v for k, v in changes.items() if k in SETTINGS_FIELDS and v is not None}
        )
        merged = UserSettings.model_validate(merged.model_dump())
        self._run("save settings", lambda: (
            self.client.table(SETTINGS_TABLE)
            .upsert({"user_id": user_id, **merged.model_dump()}, on_conflict="user_id")
            .execute()
        ))
        return merged

    def ensure_settings(self, user_id: str) -> UserSettings:
        """Create default settings for a new account if none exist yet."""
        rows = self._run("fetch settings", lambda: (
            self.client.table(SETTINGS_TABLE)
            .select("user_id")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        ))
        if rows:
            return self.get_settings(user_id)
        return self.upsert_settings(user_id, {})
