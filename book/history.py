"""Linear undo/redo history over record references."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from book.errors import EmptyHistoryError
from book.schemas import ContactField, ContactRecord, assign_field
from book.stores.graph_store import GraphStore
from book.stores.record_store import RecordStore

logger = logging.getLogger("cb.history")

UPDATE_UNDO_MODES = {"retract", "revert"}


@dataclass
class HistoryEntry:
    """One recorded mutation, tagged with what happened."""

    kind: str  # add/update/delete
    record_id: int
    field: ContactField | None = None
    previous: str | None = None
    new: str | None = None
    position: int | None = None


@dataclass
class HistoryPolicy:
    """How undo/redo treat updates and deletes."""

    update_undo_mode: str = "retract"
    undoable_deletes: bool = False
    clear_redo_on_mutation: bool = False

    @classmethod
    def from_config(cls, config: dict[str, Any] | None = None) -> HistoryPolicy:
        cfg = config or {}
        mode = str(cfg.get("update_undo_mode", "retract")).lower().strip()
        if mode not in UPDATE_UNDO_MODES:
            raise ValueError(
                f"history.update_undo_mode must be one of {sorted(UPDATE_UNDO_MODES)}, got {mode!r}"
            )
        return cls(
            update_undo_mode=mode,
            undoable_deletes=bool(cfg.get("undoable_deletes", False)),
            clear_redo_on_mutation=bool(cfg.get("clear_redo_on_mutation", False)),
        )


class HistoryManager:
    """Two LIFO stacks of history entries.

    With the default policy an undo always retracts the record as if it had
    been deleted, even when the entry came from an update, and a fresh mutation
    leaves the redo stack alone.
    """

    def __init__(self, policy: HistoryPolicy | None = None) -> None:
        self.policy = policy or HistoryPolicy()
        self.undo_stack: list[HistoryEntry] = []
        self.redo_stack: list[HistoryEntry] = []

    def record_mutation(self, entry: HistoryEntry) -> None:
        if entry.kind == "delete" and not self.policy.undoable_deletes:
            return
        self.undo_stack.append(entry)
        if self.policy.clear_redo_on_mutation:
            self.redo_stack.clear()

    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def undo(self, store: RecordStore, graph: GraphStore) -> HistoryEntry:
        """Apply the inverse of the newest entry to ``store`` and ``graph``.

        Entries whose record is not where the inverse expects it are dropped
        and the next one is tried.
        """
        while self.undo_stack:
            entry = self.undo_stack.pop()
            record = store.get(entry.record_id)
            restoring = entry.kind == "delete"
            if self._is_stale(record, store, expect_present=not restoring):
                continue

            if restoring:
                self._restore(record, store, graph, entry.position or 0)
            elif self._reverts(entry):
                self._set_field(record, entry, entry.previous, graph)
            else:
                self._retract(record, store, graph)

            self.redo_stack.append(entry)
            return entry
        raise EmptyHistoryError("Nothing to undo.")

    def redo(self, store: RecordStore, graph: GraphStore) -> HistoryEntry:
        """Re-apply the newest undone entry, skipping stale ones."""
        while self.redo_stack:
            entry = self.redo_stack.pop()
            record = store.get(entry.record_id)
            reinserting = entry.kind != "delete" and not self._reverts(entry)
            if self._is_stale(record, store, expect_present=not reinserting):
                continue

            if entry.kind == "delete":
                self._retract(record, store, graph)
            elif reinserting:
                self._restore(record, store, graph, 0)
            else:
                self._set_field(record, entry, entry.new, graph)

            self.undo_stack.append(entry)
            return entry
        raise EmptyHistoryError("Nothing to redo.")

    def _reverts(self, entry: HistoryEntry) -> bool:
        return entry.kind == "update" and self.policy.update_undo_mode == "revert"

    @staticmethod
    def _is_stale(record: ContactRecord, store: RecordStore, expect_present: bool) -> bool:
        if (record.id in store) == expect_present:
            return False
        logger.warning(
            "Discarding history entry for %r: record is %s the store.",
            record.name,
            "no longer in" if expect_present else "already in",
        )
        return True

    @staticmethod
    def _retract(record: ContactRecord, store: RecordStore, graph: GraphStore) -> None:
        store.remove(record.id)
        graph.unlink(record.name)

    @staticmethod
    def _restore(record: ContactRecord, store: RecordStore, graph: GraphStore, position: int) -> None:
        store.insert_at(record.id, position)
        graph.link(record.name, record.category)

    @staticmethod
    def _set_field(
        record: ContactRecord, entry: HistoryEntry, value: str | None, graph: GraphStore
    ) -> None:
        old_name = record.name
        assign_field(record, entry.field or ContactField.NAME, value or "")
        graph.unlink(old_name)
        graph.link(record.name, record.category)
