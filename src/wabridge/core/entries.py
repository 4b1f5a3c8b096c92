"""Helper functions for creating LogEntry and EventEntry objects."""

import time
import uuid
from typing import Any

from wabridge.core.models import Direction, EventEntry, LogEntry, Severity


def now_ms() -> int:
    """Return the current Unix time in milliseconds."""
    return int(time.time() * 1000)


def new_id(prefix: str) -> str:
    """Create an entry identifier such as ``in_1718000000000_3f2a9c1b7d4e``.

    Args:
        prefix: Short tag describing the entry origin (in, out, event, ...).

    Returns:
        Identifier combining the prefix, a millisecond timestamp and random hex.
    """
    return f"{prefix}_{now_ms()}_{uuid.uuid4().hex[:12]}"


def message(
    direction: Direction,
    *,
    prefix: str | None = None,
    sender: str | None = None,
    recipient: str | None = None,
    name: str | None = None,
    text: str | None = None,
    raw: Any = None,
) -> LogEntry:
    """Create a message log entry with automatic id and timestamp.

    Args:
        direction: "in" or "out".
        prefix: Identifier prefix, defaults to the direction.
        sender: Sender identifier for inbound messages.
        recipient: Destination for outbound messages.
        name: Contact display name.
        text: Message text or placeholder.
        raw: Originating payload.

    Returns:
        LogEntry stamped with the current time
    """
    return LogEntry(
        id=new_id(prefix or direction),
        ts=now_ms(),
        direction=direction,
        sender=sender,
        recipient=recipient,
        name=name,
        text=text,
        raw=raw,
    )


def event(kind: Severity, area: str, summary: str, data: Any = None) -> EventEntry:
    """Create a diagnostic event with automatic id and timestamp.

    Args:
        kind: Severity ("info", "warn" or "error")
        area: Subsystem tag
        summary: Human-readable description
        data: Optional structured detail

    Returns:
        EventEntry stamped with the current time
    """
    return EventEntry(
        id=new_id("evt"),
        ts=now_ms(),
        kind=kind,
        area=area,
        summary=summary,
        data=data,
    )


def info(area: str, summary: str, data: Any = None) -> EventEntry:
    """Create an info event."""
    return event("info", area, summary, data)


def warn(area: str, summary: str, data: Any = None) -> EventEntry:
    """Create a warn event."""
    return event("warn", area, summary, data)


def error(area: str, summary: str, data: Any = None) -> EventEntry:
    """Create an error event."""
    return event("error", area, summary, data)
