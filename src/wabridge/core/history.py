"""The pair of logs owned by one running bridge."""

import logging
from dataclasses import dataclass

from wabridge.core.models import EventEntry, LogEntry
from wabridge.core.ports import EventStoragePort, MessageStoragePort

event_logger = logging.getLogger("wabridge.events")

_LEVELS = {
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass
class History:
    """Message log and diagnostic event log for a single process.

    Handlers receive this object explicitly; nothing else holds the logs.

    Attributes:
        messages: Storage for LogEntry objects.
        events: Storage for EventEntry objects.
    """

    messages: MessageStoragePort
    events: EventStoragePort

    def add_message(self, entry: LogEntry) -> LogEntry:
        """Push a message log entry and return it."""
        self.messages.push(entry)
        return entry

    def record(self, entry: EventEntry) -> EventEntry:
        """Push a diagnostic event and mirror it to the ``wabridge.events`` logger."""
        self.events.push(entry)
        event_logger.log(
            _LEVELS.get(entry.kind, logging.INFO),
            "[%s] %s",
            entry.area,
            entry.summary,
        )
        return entry
