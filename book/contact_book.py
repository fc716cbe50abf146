"""Contact book facade over the record store, history, graph and file."""

from __future__ import annotations

import logging
from typing import Any

from book.errors import ContactBookError, NotFoundError, PersistenceWarning, ValidationError
from book.history import HistoryEntry, HistoryManager, HistoryPolicy
from book.schemas import (
    ContactField,
    ContactSnapshot,
    LoadReport,
    OperationResult,
    assign_field,
    validate_contact,
)
from book.stores.flat_file_store import FlatFileStore
from book.stores.graph_store import GraphStore
from book.stores.record_store import (
    RecordPredicate,
    RecordQuery,
    RecordStore,
    in_category,
    matches_term,
)
from core.event_bus import (
    CONTACT_ADDED,
    CONTACT_DELETED,
    CONTACT_UPDATED,
    HISTORY_REDONE,
    HISTORY_UNDONE,
    EventBus,
)

logger = logging.getLogger("cb.book")


class ContactBook:
    """Owns one record store and keeps history, graph and file in step with it.

    Every mutation runs in the same order: record store, history, graph,
    persistence, then the event. Failures come back as ``OperationResult``
    values and never escape as exceptions.
    """

    def __init__(
        self,
        file_store: FlatFileStore | None = None,
        history_policy: HistoryPolicy | None = None,
        event_bus: EventBus | None = None,
        case_sensitive_sort: bool = True,
    ) -> None:
        self.store = RecordStore()
        self.history = HistoryManager(policy=history_policy)
        self.graph = GraphStore()
        self.file_store = file_store
        self.event_bus = event_bus or EventBus()
        self.case_sensitive_sort = case_sensitive_sort

    def __len__(self) -> int:
        return len(self.store)

    # Mutations

    def add(self, name: str, phone: str, category: str) -> OperationResult:
        """Insert a new contact at the front."""
        try:
            validate_contact(name, phone, category)
        except ContactBookError as exc:
            logger.warning("Contact not added: %s", exc)
            return OperationResult.failed(exc)

        record = self.store.create(name, phone, category)
        self.store.insert_front(record.id)
        self.history.record_mutation(HistoryEntry(kind="add", record_id=record.id))
        self.graph.link(record.name, record.category)
        warnings = self._persist()
        snapshot = record.snapshot()
        logger.info("Contact added: %s", snapshot.name)
        self._emit(CONTACT_ADDED, snapshot)
        return OperationResult.ok("Contact added.", snapshot, warnings)

    def delete(self, name: str) -> OperationResult:
        """Remove the first contact named ``name``."""
        record = self.store.find_first(name)
        if record is None:
            return self._not_found(name, "Deletion")

        position = self.store.remove(record.id)
        self.history.record_mutation(
            HistoryEntry(kind="delete", record_id=record.id, position=position)
        )
        self.graph.unlink(record.name)
        warnings = self._persist()
        snapshot = record.snapshot()
        logger.info("Contact deleted: %s", snapshot.name)
        self._emit(CONTACT_DELETED, snapshot)
        return OperationResult.ok("Contact deleted.", snapshot, warnings)

    def update(self, name: str, field: ContactField | str, new_value: str) -> OperationResult:
        """Change one field of the first contact named ``name`` in place."""
        try:
            contact_field = self._parse_field(field)
        except ContactBookError as exc:
            logger.warning("Contact not updated: %s", exc)
            return OperationResult.failed(exc)

        record = self.store.find_first(name)
        if record is None:
            return self._not_found(name, "Update")

        try:
            previous = assign_field(record, contact_field, new_value)
        except ContactBookError as exc:
            logger.warning("Contact not updated: %s", exc)
            return OperationResult.failed(exc)

        self.history.record_mutation(
            HistoryEntry(
                kind="update",
                record_id=record.id,
                field=contact_field,
                previous=previous,
                new=new_value,
            )
        )
        self.graph.unlink(name)
        self.graph.link(record.name, record.category)
        warnings = self._persist()
        snapshot = record.snapshot()
        logger.info("Contact updated: %s (%s)", snapshot.name, contact_field.value)
        self._emit(CONTACT_UPDATED, snapshot, field=contact_field.value)
        return OperationResult.ok("Contact updated.", snapshot, warnings)

    def undo(self) -> OperationResult:
        try:
            entry = self.history.undo(self.store, self.graph)
        except ContactBookError as exc:
            logger.warning("Undo failed: %s", exc)
            return OperationResult.failed(exc)
        return self._history_applied(HISTORY_UNDONE, "Undone", entry)

    def redo(self) -> OperationResult:
        try:
            entry = self.history.redo(self.store, self.graph)
        except ContactBookError as exc:
            logger.warning("Redo failed: %s", exc)
            return OperationResult.failed(exc)
        return self._history_applied(HISTORY_REDONE, "Redone", entry)

    # Queries

    def find(self, predicate: RecordPredicate) -> RecordQuery:
        """Restartable lazy sequence of snapshots matching ``predicate``."""
        return self.store.find(predicate).snapshots()

    def search(self, term: str) -> list[ContactSnapshot]:
        return list(self.find(matches_term(term)))

    def search_by_category(self, category: str) -> list[ContactSnapshot]:
        return list(self.find(in_category(category)))

    def exists(self, name: str) -> bool:
        return self.store.exists(name)

    def get(self, name: str) -> ContactSnapshot | None:
        record = self.store.find_first(name)
        return record.snapshot() if record else None

    def list_contacts(self) -> list[ContactSnapshot]:
        return [record.snapshot() for record in self.store]

    def sorted_view(self, case_sensitive: bool | None = None) -> list[str]:
        if case_sensitive is None:
            case_sensitive = self.case_sensitive_sort
        return self.store.sorted_view(case_sensitive=case_sensitive)

    def sorted_contacts(self, case_sensitive: bool | None = None) -> list[ContactSnapshot]:
        """Snapshots in ``sorted_view`` order; duplicate names keep store order."""
        by_name: dict[str, list[ContactSnapshot]] = {}
        for snapshot in self.list_contacts():
            by_name.setdefault(snapshot.name, []).append(snapshot)
        ordered: list[ContactSnapshot] = []
        for name in self.sorted_view(case_sensitive):
            ordered.append(by_name[name].pop(0))
        return ordered

    # Persistence

    def load(self) -> LoadReport:
        """Rebuild the store from the contacts file.

        Lines pass the same validation as ``add`` but are not recorded in
        history and do not trigger a save. Store order ends up equal to file
        order.
        """
        report = LoadReport()
        if self.file_store is None:
            return report
        try:
            rows = self.file_store.load()
        except PersistenceWarning as exc:
            logger.warning("%s", exc)
            report.warnings.append(str(exc))
            return report

        accepted: list[tuple[str, str, str]] = []
        for line_no, (name, phone, category) in enumerate(rows, start=1):
            try:
                validate_contact(name, phone, category)
            except ContactBookError as exc:
                logger.warning("Skipping line %d of contacts file: %s", line_no, exc)
                report.rejected.append((line_no, str(exc)))
                continue
            accepted.append((name, phone, category))

        # The file is newest-first; insert oldest first so the front ends up newest.
        for name, phone, category in reversed(accepted):
            record = self.store.create(name, phone, category)
            self.store.insert_front(record.id)
            self.graph.link(record.name, record.category)
        report.loaded = len(accepted)
        logger.info("Loaded %d contacts", report.loaded)
        return report

    def save(self) -> OperationResult:
        warnings = self._persist()
        if warnings:
            return OperationResult(
                success=False, reason=warnings[0], error="persistence", warnings=warnings
            )
        return OperationResult.ok("Contacts saved.")

    def _persist(self) -> list[str]:
        if self.file_store is None:
            return []
        try:
            self.file_store.save(self.list_contacts())
        except PersistenceWarning as exc:
            logger.warning("%s", exc)
            return [str(exc)]
        return []

    # Helpers

    @staticmethod
    def _parse_field(field: ContactField | str) -> ContactField:
        try:
            return ContactField(field)
        except ValueError as exc:
            raise ValidationError(f"Unknown field: {field}") from exc

    def _history_applied(self, event_name: str, verb: str, entry: HistoryEntry) -> OperationResult:
        warnings = self._persist()
        snapshot = self.store.get(entry.record_id).snapshot()
        logger.info("%s %s of %s", verb, entry.kind, snapshot.name)
        self._emit(event_name, snapshot, entry_kind=entry.kind)
        return OperationResult.ok(f"{verb} {entry.kind}.", snapshot, warnings)

    def _not_found(self, name: str, action: str) -> OperationResult:
        exc = NotFoundError(f"Contact not found: {name}. {action} failed.")
        logger.warning("%s", exc)
        return OperationResult.failed(exc)

    def _emit(self, event_name: str, snapshot: ContactSnapshot, **extra: Any) -> None:
        payload: dict[str, Any] = {"record_id": snapshot.id, "name": snapshot.name}
        payload.update(extra)
        self.event_bus.emit(event_name, payload)
