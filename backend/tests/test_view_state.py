import asyncio

import pytest

from linguawise.core.view_state import DashboardState, OptimisticList
from linguawise.errors import PersistenceError
from linguawise.models import DictionaryEntry, TranslationHistoryItem, TranslationRequest, TranslationResult


def _row(item_id):
    return TranslationHistoryItem(
        id=item_id,
        user_id="alice",
        original_text=f"text {item_id}",
        translated_text=f"texto {item_id}",
        source_lang="en",
        target_lang="es",
        tone="casual",
        timestamp="2024-05-20T10:00:00Z",
    )


def _fail():
    raise PersistenceError("delete failed")


def test_remove_keeps_change_when_remote_succeeds() -> None:
    rows = OptimisticList([_row("1"), _row("2"), _row("3")])

    asyncio.run(rows.remove("2", lambda: None))

    assert [row.id for row in rows.items] == ["1", "3"]


def test_remove_restores_original_position_on_failure() -> None:
    rows = OptimisticList([_row("1"), _row("2"), _row("3")])

    with pytest.raises(PersistenceError):
        asyncio.run(rows.remove("2", _fail))

    assert [row.id for row in rows.items] == ["1", "2", "3"]


def test_rows_are_removed_before_remote_call_finishes() -> None:
    rows = OptimisticList([_row("1"), _row("2")])
    seen = []

    async def remote():
        seen.append([row.id for row in rows.items])

    asyncio.run(rows.remove("1", remote))

    assert seen == [["2"]]


def test_clear_restores_everything_on_failure() -> None:
    rows = OptimisticList([_row("1"), _row("2")])

    with pytest.raises(PersistenceError):
        asyncio.run(rows.clear(_fail))

    assert len(rows) == 2


def test_unexpected_errors_become_persistence_errors() -> None:
    rows = OptimisticList([_row("1")])

    async def remote():
        raise TimeoutError("store timed out")

    with pytest.raises(PersistenceError):
        asyncio.run(rows.remove("1", remote))

    assert len(rows) == 1


def test_prepend_swaps_in_stored_record() -> None:
    entries = OptimisticList([DictionaryEntry(id="1", user_id="alice", term="AI", translation="IA", language="Spanish")])
    tentative = DictionaryEntry(user_id="alice", term="Backend", translation="Backend", language="German")
    stored = tentative.model_copy(update={"id": "2"})

    result = asyncio.run(entries.prepend(tentative, lambda: stored))

    assert result == stored
    assert [entry.id for entry in entries.items] == ["2", "1"]


def test_dashboard_delete_rolls_back_when_store_fails(store, supabase) -> None:
    request = TranslationRequest(original_text="Hello there", source_lang="en", target_lang="es", tone="formal")
    for _ in range(3):
        store.add_history("alice", request, TranslationResult(translated_text="Hola"))
    state = DashboardState(store, "alice").load()
    before = [item.id for item in state.history.items]

    supabase.failing_tables.add("translation_history")
    with pytest.raises(PersistenceError):
        asyncio.run(state.delete_history(before[1]))

    assert [item.id for item in state.history.items] == before
    assert state.statistics().total_translations == 3


def test_dashboard_delete_removes_from_store(store) -> None:
    request = TranslationRequest(original_text="Hello", source_lang="en", target_lang="fr", tone="formal")
    saved = store.add_history("alice", request, TranslationResult(translated_text="Bonjour"))
    state = DashboardState(store, "alice").load()

    asyncio.run(state.delete_history(saved.id))

    assert state.history.items == ()
    assert store.list_history("alice") == []


def test_dashboard_missing_row_rolls_back(store) -> None:
    state = DashboardState(store, "alice").load()
    state.dictionary.replace([DictionaryEntry(id="99", user_id="alice", term="x", translation="y", language="French")])

    with pytest.raises(PersistenceError):
        asyncio.run(state.delete_dictionary_entry("99"))

    assert [entry.id for entry in state.dictionary.items] == ["99"]
