"""Webhook payload normalization.

Turns the loosely documented Cloud API webhook payloads into a single inbound
LogEntry. Only the first message and the first contact of a batch are used.
"""

from collections.abc import Callable
from typing import Any

from wabridge.core import entries
from wabridge.core.history import History
from wabridge.core.models import LogEntry

AREA = "webhook"

NO_MESSAGE_TEXT = "(event without message)"
INTERACTIVE_TEXT = "(interactive message)"
UNKNOWN_TYPE = "unknown"


def _get(obj: Any, key: str) -> Any:
    return obj.get(key) if isinstance(obj, dict) else None


def _first(items: Any) -> Any:
    if isinstance(items, list) and items:
        return items[0]
    return None


def _text_body(msg: Any) -> str | None:
    return _get(_get(msg, "text"), "body")


def _button_label(msg: Any) -> str | None:
    return _get(_get(msg, "button"), "text")


def _interactive(msg: Any) -> str:
    return INTERACTIVE_TEXT


# Closed set of known message types; everything else goes through summarize().
_SUMMARIZERS: dict[str, Callable[[Any], str | None]] = {
    "text": _text_body,
    "button": _button_label,
    "interactive": _interactive,
}


def summarize(msg: Any) -> str | None:
    """Map a webhook message to the text shown in the message log.

    Args:
        msg: One element of ``value.messages``.

    Returns:
        The text body, button label, or a placeholder naming the type.
    """
    msg_type = _get(msg, "type")
    summarizer = _SUMMARIZERS.get(msg_type) if isinstance(msg_type, str) else None
    if summarizer is None:
        return f"(type {msg_type or UNKNOWN_TYPE})"
    return summarizer(msg)


def normalize_webhook(payload: Any) -> LogEntry:
    """Build the inbound LogEntry for a webhook payload.

    Looks for ``entry[0].changes[0].value.messages``. Payloads without
    messages (status updates, delivery receipts) yield a placeholder entry.

    Args:
        payload: Decoded webhook body.

    Returns:
        LogEntry with direction "in" and the payload attached as ``raw``.
    """
    value = _get(_first(_get(_first(_get(payload, "entry")), "changes")), "value")
    messages = _get(value, "messages")

    if not (isinstance(messages, list) and messages):
        return entries.message("in", prefix="event", text=NO_MESSAGE_TEXT, raw=payload)

    msg = messages[0]
    contact = _first(_get(value, "contacts"))
    return entries.message(
        "in",
        sender=_get(msg, "from"),
        name=_get(_get(contact, "profile"), "name"),
        text=summarize(msg),
        raw=payload,
    )


def ingest_webhook(payload: Any, history: History) -> LogEntry | None:
    """Record a webhook delivery in the history.

    Always records a raw capture event first. Normalization failures are
    recorded as error events and never raised.

    Args:
        payload: Decoded webhook body (any shape).
        history: Logs to write into.

    Returns:
        The inbound LogEntry, or None when normalization failed.
    """
    history.record(entries.info(AREA, "Webhook received", payload))
    try:
        entry = normalize_webhook(payload)
    except Exception as exc:
        history.record(
            entries.error(
                AREA,
                f"Failed to process webhook: {exc}",
                {"error": str(exc), "type": type(exc).__name__},
            )
        )
        return None
    return history.add_message(entry)
