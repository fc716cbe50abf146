"""Ordered in-memory record store backed by an id-keyed arena."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from book.schemas import ContactRecord

RecordPredicate = Callable[[ContactRecord], bool]


def matches_term(term: str) -> RecordPredicate:
    """Substring match against name, phone or category."""

    def _predicate(record: ContactRecord) -> bool:
        return term in record.name or term in record.phone or term in record.category

    return _predicate


def in_category(category: str) -> RecordPredicate:
    """Exact category match."""

    def _predicate(record: ContactRecord) -> bool:
        return record.category == category

    return _predicate


def has_name(name: str) -> RecordPredicate:
    def _predicate(record: ContactRecord) -> bool:
        return record.name == name

    return _predicate


class RecordQuery:
    """Lazy view over matching records; every iteration rescans the store."""

    def __init__(
        self,
        store: RecordStore,
        predicate: RecordPredicate,
        project: Callable[[ContactRecord], Any] | None = None,
    ) -> None:
        self._store = store
        self._predicate = predicate
        self._project = project

    def __iter__(self) -> Iterator[Any]:
        for record in self._store:
            if self._predicate(record):
                yield self._project(record) if self._project else record

    def first(self) -> Any | None:
        return next(iter(self), None)

    def snapshots(self) -> RecordQuery:
        """Same query, yielding immutable snapshots instead of live records."""
        return RecordQuery(self._store, self._predicate, lambda record: record.snapshot())


class RecordStore:
    """Keeps records newest-first.

    Records live in an arena keyed by a never-reused integer id; the order list
    holds ids only. A record dropped from the order stays in the arena so
    history entries keep pointing at something real.
    """

    def __init__(self) -> None:
        self._arena: dict[int, ContactRecord] = {}
        self._order: list[int] = []
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[ContactRecord]:
        # Copy so callers may mutate the store while iterating a query.
        for record_id in list(self._order):
            yield self._arena[record_id]

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._order

    def create(self, name: str, phone: str, category: str) -> ContactRecord:
        """Allocate a record in the arena without placing it in the order."""
        record = ContactRecord(id=self._next_id, name=name, phone=phone, category=category)
        self._arena[record.id] = record
        self._next_id += 1
        return record

    def get(self, record_id: int) -> ContactRecord:
        return self._arena[record_id]

    def insert_front(self, record_id: int) -> None:
        """Place a record at the front, moving it there if already present."""
        if record_id not in self._arena:
            raise KeyError(record_id)
        if record_id in self._order:
            self._order.remove(record_id)
        self._order.insert(0, record_id)

    def insert_at(self, record_id: int, position: int) -> None:
        if record_id not in self._arena:
            raise KeyError(record_id)
        if record_id in self._order:
            self._order.remove(record_id)
        position = max(0, min(position, len(self._order)))
        self._order.insert(position, record_id)

    def remove(self, record_id: int) -> int | None:
        """Drop a record from the order; return its former position or None."""
        try:
            position = self._order.index(record_id)
        except ValueError:
            return None
        del self._order[position]
        return position

    def find(self, predicate: RecordPredicate) -> RecordQuery:
        return RecordQuery(self, predicate)

    def find_first(self, name: str) -> ContactRecord | None:
        return self.find(has_name(name)).first()

    def exists(self, name: str) -> bool:
        return self.find_first(name) is not None

    def sorted_view(self, case_sensitive: bool = True) -> list[str]:
        """Names in ascending order without touching store order.

        Case-sensitive order is plain code-point order, so "Bob" sorts before
        "alice". Case-insensitive order compares casefolded names and breaks
        ties by code point.
        """
        names = [record.name for record in self]
        if case_sensitive:
            return sorted(names)
        return sorted(names, key=lambda name: (name.casefold(), name))
