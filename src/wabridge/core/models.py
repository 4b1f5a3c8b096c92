"""Core domain models for the message and diagnostic logs."""

from dataclasses import dataclass
from typing import Any, Literal

Direction = Literal["in", "out"]
Severity = Literal["info", "warn", "error"]


@dataclass(frozen=True)
class LogEntry:
    """A message log entry.

    Attributes:
        id: Opaque identifier, unique and ordered roughly by creation time.
        ts: Unix timestamp in milliseconds.
        direction: "in" for webhook traffic, "out" for send attempts.
        sender: Sender phone identifier (inbound only).
        recipient: Normalized destination (outbound only).
        name: Contact display name from the webhook profile.
        text: Human-readable message body or placeholder.
        raw: Originating payload, kept for debugging.
    """

    id: str
    ts: int
    direction: Direction
    sender: str | None = None
    recipient: str | None = None
    name: str | None = None
    text: str | None = None
    raw: Any = None


@dataclass(frozen=True)
class EventEntry:
    """A diagnostic event.

    Attributes:
        id: Opaque identifier.
        ts: Unix timestamp in milliseconds.
        kind: Severity ("info", "warn" or "error").
        area: Subsystem tag (e.g., http, send, templates, webhook).
        summary: Short human-readable description.
        data: Optional structured detail payload.
    """

    id: str
    ts: int
    kind: Severity
    area: str
    summary: str
    data: Any = None


@dataclass(frozen=True)
class UpstreamResponse:
    """Status code and decoded JSON body of a Graph API call."""

    status: int
    data: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300
