"""Port interfaces for storage and the messaging Cloud API.

These protocols define the contracts that adapters must implement.
The core domain depends only on these interfaces, not concrete implementations.
"""

from typing import Any, Protocol, runtime_checkable

from wabridge.core.models import EventEntry, LogEntry, UpstreamResponse


@runtime_checkable
class MessageStoragePort(Protocol):
    """Port for the message log.

    Adapters implementing this protocol keep LogEntry objects newest first.
    Examples: RingBufferMessageStorage.
    """

    def push(self, entry: LogEntry) -> None:
        """Insert a log entry at the head of the log."""
        ...

    def read(self, limit: int) -> list[LogEntry]:
        """Read the most recent entries.

        Args:
            limit: Maximum number of entries wanted. Adapters clamp it to
                   their own read cap.

        Returns:
            List of LogEntry objects, newest first.
        """
        ...


@runtime_checkable
class EventStoragePort(Protocol):
    """Port for the diagnostic event log.

    Examples: RingBufferEventStorage.
    """

    def push(self, entry: EventEntry) -> None:
        """Insert an event at the head of the log."""
        ...

    def read(self, limit: int) -> list[EventEntry]:
        """Read the most recent events, newest first."""
        ...


@runtime_checkable
class CloudApiPort(Protocol):
    """Port for the messaging provider's HTTP API.

    Transport failures are raised; HTTP error statuses are returned.
    Examples: GraphApiClient.
    """

    async def get(
        self, path: str, params: dict[str, Any] | None = None
    ) -> UpstreamResponse:
        """Issue a GET request against a path relative to the API version root."""
        ...

    async def post(self, path: str, payload: dict[str, Any]) -> UpstreamResponse:
        """Issue a JSON POST request against a path relative to the version root."""
        ...
