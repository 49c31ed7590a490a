from datetime import datetime

import pytest

from linguawise.errors import PersistenceError, RecordNotFoundError
from linguawise.models import (
    DictionaryEntry,
    Favorite,
    TranslationHistoryItem,
    TranslationRequest,
    TranslationResult,
    UserSettings,
)


def _save(store, user_id, text="Hello there", translated="Hola", target="es"):
    request = TranslationRequest(original_text=text, source_lang="en", target_lang=target, tone="formal")
    return store.add_history(user_id, request, TranslationResult(translated_text=translated))


def test_add_history_copies_request_and_result(store) -> None:
    item = _save(store, "alice")

    assert item.user_id == "alice"
    assert item.original_text == "Hello there"
    assert item.translated_text == "Hola"
    assert item.target_lang == "es"
    assert item.tone == "formal"
    assert item.id
    assert datetime.fromisoformat(item.timestamp)


def test_history_is_scoped_to_owner(store) -> None:
    mine = _save(store, "alice")
    _save(store, "bob", text="Good night")

    assert [item.id for item in store.list_history("alice")] == [mine.id]
    with pytest.raises(RecordNotFoundError):
        store.delete_history("bob", mine.id)
    with pytest.raises(RecordNotFoundError):
        store.get_history("bob", mine.id)
    assert len(store.list_history("alice")) == 1


def test_history_search_is_case_insensitive(store) -> None:
    _save(store, "alice", text="Good morning", translated="Buenos días")
    _save(store, "alice", text="Thank you", translated="Gracias")

    assert [item.original_text for item in store.list_history("alice", search="GRACIAS")] == ["Thank you"]
    assert len(store.list_history("alice", search="")) == 2


def test_clear_history_only_touches_owner(store) -> None:
    _save(store, "alice")
    _save(store, "alice")
    _save(store, "bob")

    assert store.clear_history("alice") == 2
    assert store.list_history("alice") == []
    assert len(store.list_history("bob")) == 1


def test_store_failure_raises_persistence_error(store, supabase) -> None:
    supabase.failing_tables.add("translation_history")

    with pytest.raises(PersistenceError):
        store.list_history("alice")


def test_favorite_from_history_keeps_fields(store) -> None:
    item = _save(store, "alice")

    favorite = store.add_favorite(Favorite.from_history(item))

    assert (favorite.original_text, favorite.translated_text, favorite.source_lang,
            favorite.target_lang, favorite.tone) == (
        item.original_text, item.translated_text, item.source_lang, item.target_lang, item.tone)
    assert favorite.favorited_at != item.timestamp
    assert favorite.id
    assert store.list_favorites("alice") == [favorite]
    assert store.list_favorites("bob") == []


def test_favorited_at_differs_even_at_same_instant() -> None:
    moment = datetime.fromisoformat("2024-05-20T10:00:00+00:00")
    item = TranslationHistoryItem(
        id="1", user_id="alice", original_text="a", translated_text="b",
        source_lang="en", target_lang="es", tone="formal", timestamp=moment.isoformat(),
    )

    favorite = Favorite.from_history(item, favorited_at=moment)

    assert favorite.favorited_at != item.timestamp


def test_favorited_at_bumped_for_same_instant_in_z_form() -> None:
    moment = datetime.fromisoformat("2024-05-20T10:00:00+00:00")
    item = TranslationHistoryItem(
        id="1", user_id="alice", original_text="a", translated_text="b",
        source_lang="en", target_lang="es", tone="formal", timestamp="2024-05-20T10:00:00Z",
    )

    favorite = Favorite.from_history(item, favorited_at=moment)

    assert datetime.fromisoformat(favorite.favorited_at) > moment


def test_delete_favorite(store) -> None:
    favorite = store.add_favorite(Favorite.from_history(_save(store, "alice")))

    with pytest.raises(RecordNotFoundError):
        store.delete_favorite("bob", favorite.id)
    store.delete_favorite("alice", favorite.id)

    assert store.list_favorites("alice") == []


def test_dictionary_entries(store) -> None:
    entry = store.add_dictionary_entry(
        DictionaryEntry(user_id="alice", term="Prototype", translation="Prototipo", language="Spanish")
    )
    store.add_dictionary_entry(
        DictionaryEntry(user_id="alice", term="User Interface", translation="Interface utilisateur", language="French")
    )

    assert len(store.list_dictionary("alice")) == 2
    assert [e.term for e in store.list_dictionary("alice", search="proto")] == ["Prototype"]

    store.delete_dictionary_entry("alice", entry.id)
    assert [e.term for e in store.list_dictionary("alice")] == ["User Interface"]


def test_settings_default_when_missing(store) -> None:
    assert store.get_settings("alice") == UserSettings(
        native_language="en", default_target_language="es", default_tone="formal", save_history=True
    )


def test_settings_upsert_merges(store, supabase) -> None:
    store.upsert_settings("alice", {"default_target_language": "fr"})
    updated = store.upsert_settings("alice", {"save_history": False})

    assert updated.default_target_language == "fr"
    assert updated.save_history is False
    assert store.get_settings("alice") == updated
    assert len(supabase.tables["user_settings"]) == 1


def test_ensure_settings_does_not_overwrite(store) -> None:
    store.upsert_settings("alice", {"default_tone": "casual"})

    assert store.ensure_settings("alice").default_tone == "casual"
    assert store.ensure_settings("bob") == UserSettings()
