"""Confirmation events emitted alongside extraction and patching.

The extractor and patcher are pure: instead of printing, they append events to
an EventLog supplied by the caller. The orchestrator decides how to surface
them (it logs each one at INFO level).
"""

import logging
from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class EventKind(StrEnum):
    """Kinds of confirmation events."""

    FUNCTION_EXTRACTED = "function_extracted"
    ARROW_FUNCTION_EXTRACTED = "arrow_function_extracted"
    CALLBACK_EXTRACTED = "callback_extracted"
    STATE_EXTRACTED = "state_extracted"
    EFFECT_EXTRACTED = "effect_extracted"
    FUNCTION_UPDATED = "function_updated"
    FUNCTION_INSERTED = "function_inserted"
    STATE_UPDATED = "state_updated"
    STATE_INSERTED = "state_inserted"


_MESSAGES = {
    EventKind.FUNCTION_EXTRACTED: "Extracted function: {name}",
    EventKind.ARROW_FUNCTION_EXTRACTED: "Extracted arrow function: {name}",
    EventKind.CALLBACK_EXTRACTED: "Extracted callback: {name}",
    EventKind.STATE_EXTRACTED: "Extracted state: {name}",
    EventKind.EFFECT_EXTRACTED: "Extracted {name} logic",
    EventKind.FUNCTION_UPDATED: "Updated function: {name}",
    EventKind.FUNCTION_INSERTED: "Inserted new function: {name}",
    EventKind.STATE_UPDATED: "Updated state variable: {name}",
    EventKind.STATE_INSERTED: "Inserted state variable: {name}",
}


class SyncEvent(BaseModel):
    """A single human-readable confirmation."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    name: str

    @property
    def message(self) -> str:
        """Return the one-line confirmation text."""
        return _MESSAGES[self.kind].format(name=self.name)


class EventLog:
    """Ordered collector of SyncEvents."""

    def __init__(self) -> None:
        """Initialise an empty event log."""
        self._events: list[SyncEvent] = []

    def emit(self, kind: EventKind, name: str) -> None:
        """Record an event."""
        self._events.append(SyncEvent(kind=kind, name=name))

    @property
    def events(self) -> list[SyncEvent]:
        """Return a copy of the recorded events in emission order."""
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def drain_to(self, logger: logging.Logger, level: int = logging.INFO) -> None:
        """Log every recorded event and clear the log."""
        for event in self._events:
            logger.log(level, "✓ %s", event.message)
        self._events.clear()
