"""Ring buffer storage adapters for the message and event logs.

Provides bounded in-memory storage that automatically evicts the oldest
entries when the buffer is full. Entries are kept newest first.
"""

from collections import deque
from itertools import islice

from wabridge.core.models import EventEntry, LogEntry


def _clamp(limit: int, read_cap: int) -> int:
    return max(0, min(limit, read_cap))


class RingBufferMessageStorage:
    """Ring buffer implementation of MessageStoragePort.

    Stores log entries in a fixed-size buffer. New entries go to the head;
    when the buffer is full the tail entry is evicted to make room.

    Args:
        max_size: Maximum number of entries to store.
        read_cap: Upper bound applied to every read, whatever limit is asked.
            Defaults to max_size.
    """

    def __init__(self, max_size: int = 200, read_cap: int | None = None) -> None:
        self._buffer: deque[LogEntry] = deque(maxlen=max_size)
        self.read_cap = max_size if read_cap is None else read_cap

    def __len__(self) -> int:
        return len(self._buffer)

    def push(self, entry: LogEntry) -> None:
        """Insert a log entry at the head of the buffer."""
        self._buffer.appendleft(entry)

    def read(self, limit: int) -> list[LogEntry]:
        """Return up to ``limit`` entries, newest first."""
        return list(islice(self._buffer, _clamp(limit, self.read_cap)))


class RingBufferEventStorage:
    """Ring buffer implementation of EventStoragePort.

    Stores diagnostic events in a fixed-size buffer, newest first. When the
    buffer is full the oldest event is evicted.

    Args:
        max_size: Maximum number of events to store.
        read_cap: Upper bound applied to every read. Defaults to max_size.
    """

    def __init__(self, max_size: int = 300, read_cap: int | None = None) -> None:
        self._buffer: deque[EventEntry] = deque(maxlen=max_size)
        self.read_cap = max_size if read_cap is None else read_cap

    def __len__(self) -> int:
        return len(self._buffer)

    def push(self, entry: EventEntry) -> None:
        """Insert an event at the head of the buffer."""
        self._buffer.appendleft(entry)

    def read(self, limit: int) -> list[EventEntry]:
        """Return up to ``limit`` events, newest first."""
        return list(islice(self._buffer, _clamp(limit, self.read_cap)))
