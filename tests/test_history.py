"""Undo/redo behavior tests."""

from __future__ import annotations

import pytest

from book.contact_book import ContactBook
from book.errors import EmptyHistoryError
from book.history import HistoryManager, HistoryPolicy
from book.schemas import ContactField
from book.stores.graph_store import GraphStore
from book.stores.record_store import RecordStore
from core.event_bus import CONTACT_ADDED, CONTACT_DELETED, EventBus


def names(book: ContactBook) -> list[str]:
    return [c.name for c in book.list_contacts()]


def test_undo_and_redo_on_empty_history_fail() -> None:
    book = ContactBook()
    undo = book.undo()
    redo = book.redo()
    assert undo.success is False and undo.error == "empty_history"
    assert "Nothing to undo" in undo.reason
    assert redo.success is False and "Nothing to redo" in redo.reason


def test_manager_raises_on_empty_stacks() -> None:
    manager = HistoryManager()
    with pytest.raises(EmptyHistoryError):
        manager.undo(RecordStore(), GraphStore())
    with pytest.raises(EmptyHistoryError):
        manager.redo(RecordStore(), GraphStore())


def test_undo_retracts_last_add_and_redo_restores_order() -> None:
    book = ContactBook()
    book.add("A", "1111111111", "x")
    book.add("B", "2222222222", "y")
    result = book.undo()
    assert result.success and result.record.name == "B"
    assert names(book) == ["A"]
    assert book.graph.neighbors("A") == []

    book.redo()
    assert names(book) == ["B", "A"]
    assert book.graph.neighbors("B") == ["A"]


def test_undo_of_update_removes_record_by_default() -> None:
    book = ContactBook()
    book.add("A", "1111111111", "old")
    book.update("A", ContactField.CATEGORY, "new")
    book.undo()
    assert names(book) == []
    assert not book.exists("A")


def test_redo_after_retracted_update_brings_back_updated_record() -> None:
    book = ContactBook()
    book.add("A", "1111111111", "old")
    book.update("A", "category", "new")
    book.undo()
    book.redo()
    assert [(c.name, c.category) for c in book.list_contacts()] == [("A", "new")]


def test_undo_drops_entries_whose_record_is_gone() -> None:
    book = ContactBook()
    book.add("A", "1111111111", "x")
    book.update("A", "phone", "2222222222")
    assert book.undo().success
    # The add entry points at a record the update undo already retracted.
    second = book.undo()
    assert second.success is False and second.error == "empty_history"
    assert names(book) == []
    assert book.redo().success
    assert book.redo().success is False
    assert names(book) == ["A"]
    assert len(book.graph) == 1


def test_new_mutation_keeps_redo_available_by_default() -> None:
    book = ContactBook()
    book.add("A", "1111111111", "x")
    book.undo()
    book.add("B", "2222222222", "y")
    assert book.history.can_redo()
    book.redo()
    assert names(book) == ["A", "B"]


def test_clear_redo_on_mutation_policy() -> None:
    book = ContactBook(history_policy=HistoryPolicy(clear_redo_on_mutation=True))
    book.add("A", "1111111111", "x")
    book.undo()
    book.add("B", "2222222222", "y")
    assert not book.history.can_redo()
    assert book.redo().error == "empty_history"


def test_delete_is_not_undoable_by_default() -> None:
    bus = EventBus()
    seen: list[str] = []
    bus.subscribe_mutations(lambda name, payload: seen.append(name))
    book = ContactBook(event_bus=bus)
    book.add("A", "1111111111", "x")
    book.delete("A")

    undo = book.undo()
    redo = book.redo()

    assert undo.success is False and undo.error == "empty_history"
    assert redo.success is False
    assert names(book) == []
    assert seen == [CONTACT_ADDED, CONTACT_DELETED]


def test_undo_after_delete_moves_on_to_older_entry() -> None:
    book = ContactBook()
    book.add("A", "1111111111", "x")
    book.add("B", "2222222222", "y")
    book.delete("B")
    result = book.undo()
    assert result.success and result.record.name == "A"
    assert names(book) == []
    book.redo()
    assert names(book) == ["A"]
    assert book.redo().success is False
    assert not book.exists("B")


def test_revert_mode_restores_previous_value() -> None:
    book = ContactBook(history_policy=HistoryPolicy(update_undo_mode="revert"))
    book.add("A", "1111111111", "old")
    book.update("A", ContactField.CATEGORY, "new")
    result = book.undo()
    assert result.success
    assert [(c.name, c.category) for c in book.list_contacts()] == [("A", "old")]
    book.redo()
    assert [(c.name, c.category) for c in book.list_contacts()] == [("A", "new")]


def test_revert_mode_renames_graph_node() -> None:
    book = ContactBook(history_policy=HistoryPolicy(update_undo_mode="revert"))
    book.add("A", "1111111111", "x")
    book.update("A", ContactField.NAME, "Z")
    book.undo()
    assert [node.name for node in book.graph.nodes()] == ["A"]
    assert names(book) == ["A"]


def test_undoable_deletes_restore_original_position() -> None:
    book = ContactBook(history_policy=HistoryPolicy(undoable_deletes=True))
    book.add("A", "1111111111", "x")
    book.add("B", "2222222222", "y")
    book.add("C", "3333333333", "z")
    book.delete("B")
    assert names(book) == ["C", "A"]
    book.undo()
    assert names(book) == ["C", "B", "A"]
    book.redo()
    assert names(book) == ["C", "A"]


def test_policy_from_config_validates_mode() -> None:
    policy = HistoryPolicy.from_config({"update_undo_mode": "Revert", "undoable_deletes": True})
    assert policy.update_undo_mode == "revert"
    assert policy.undoable_deletes is True
    assert policy.clear_redo_on_mutation is False
    with pytest.raises(ValueError):
        HistoryPolicy.from_config({"update_undo_mode": "rewind"})
