"""JSON-ready encoders for log entries.

Field names follow the wire format read by the browser UI. Optional fields
that are unset are left out.
"""

from collections.abc import Iterable
from typing import Any

from wabridge.core.models import EventEntry, LogEntry


def _compact(obj: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in obj.items() if value is not None}


def encode_message(entry: LogEntry) -> dict[str, Any]:
    """Encode one message log entry."""
    return _compact(
        {
            "id": entry.id,
            "ts": entry.ts,
            "direction": entry.direction,
            "from": entry.sender,
            "to": entry.recipient,
            "name": entry.name,
            "text": entry.text,
            "raw": entry.raw,
        }
    )


def encode_event(entry: EventEntry) -> dict[str, Any]:
    """Encode one diagnostic event."""
    return _compact(
        {
            "id": entry.id,
            "ts": entry.ts,
            "kind": entry.kind,
            "area": entry.area,
            "summary": entry.summary,
            "data": entry.data,
        }
    )


def encode_messages(entries: Iterable[LogEntry]) -> list[dict[str, Any]]:
    """Encode message log entries, preserving order."""
    return [encode_message(entry) for entry in entries]


def encode_events(entries: Iterable[EventEntry]) -> list[dict[str, Any]]:
    """Encode diagnostic events, preserving order."""
    return [encode_event(entry) for entry in entries]
