"""Error taxonomy for contact book operations."""

from __future__ import annotations


class ContactBookError(Exception):
    """Base class for recoverable contact book failures."""

    kind = "error"


class ValidationError(ContactBookError):
    """A field is empty or the phone number is malformed."""

    kind = "validation"


class NotFoundError(ContactBookError):
    """No record matches the requested name."""

    kind = "not_found"


class EmptyHistoryError(ContactBookError):
    """Undo or redo was requested with nothing available."""

    kind = "empty_history"


class PersistenceWarning(ContactBookError):
    """The contacts file could not be read or written.

    Never fatal: the in-memory store stays authoritative.
    """

    kind = "persistence"
