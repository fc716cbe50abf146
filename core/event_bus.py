"""In-process event bus carrying contact book mutation events."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Any

EventHandler = Callable[[str, dict[str, Any]], None]

CONTACT_ADDED = "contact.added"
CONTACT_UPDATED = "contact.updated"
CONTACT_DELETED = "contact.deleted"
HISTORY_UNDONE = "history.undone"
HISTORY_REDONE = "history.redone"

MUTATION_EVENTS = (
    CONTACT_ADDED,
    CONTACT_UPDATED,
    CONTACT_DELETED,
    HISTORY_UNDONE,
    HISTORY_REDONE,
)


class EventBus:
    """Dispatches events to subscribers by event name."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        """Register a callback for an event."""
        self._handlers[event_name].append(handler)

    def subscribe_mutations(self, handler: EventHandler) -> None:
        """Register a callback for every mutation event."""
        for event_name in MUTATION_EVENTS:
            self.subscribe(event_name, handler)

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        """Emit an event to all subscribers."""
        for handler in self._handlers.get(event_name, []):
            handler(event_name, payload)
