"""Step definitions for webhook ingestion scenarios."""

from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from wabridge.adapters.storage.ring_buffer import (
    RingBufferEventStorage,
    RingBufferMessageStorage,
)
from wabridge.core.history import History
from wabridge.core.normalizer import ingest_webhook


@pytest.fixture
def bridge() -> dict[str, Any]:
    """Mutable scenario context."""
    return {}


def _history(max_messages: int = 200) -> History:
    return History(
        messages=RingBufferMessageStorage(max_size=max_messages),
        events=RingBufferEventStorage(max_size=300),
    )


def _message(msg_type: str, sender: str, text: str) -> dict[str, Any]:
    msg: dict[str, Any] = {"from": sender, "id": "wamid.IN", "type": msg_type}
    if msg_type == "text":
        msg["text"] = {"body": text}
    elif msg_type == "button":
        msg["button"] = {"text": text, "payload": text.upper()}
    return msg


@given("an empty bridge history")
def empty_history(bridge: dict[str, Any]) -> None:
    bridge["history"] = _history()


@given(parsers.parse("a bridge history holding at most {count:d} messages"))
def bounded_history(bridge: dict[str, Any], count: int) -> None:
    bridge["history"] = _history(max_messages=count)


@when(
    parsers.parse(
        'a webhook arrives with a "{msg_type}" message from "{sender}" saying "{text}"'
    )
)
def webhook_with_message(
    bridge: dict[str, Any], make_webhook, msg_type: str, sender: str, text: str
) -> None:
    payload = make_webhook(
        messages=[_message(msg_type, sender, text)],
        contacts=[{"wa_id": sender, "profile": {"name": "Test User"}}],
    )
    bridge["payload"] = payload
    ingest_webhook(payload, bridge["history"])


@when(parsers.parse('a webhook arrives with only a "{status}" status'))
def webhook_with_status(bridge: dict[str, Any], make_webhook, status: str) -> None:
    payload = make_webhook(statuses=[{"id": "wamid.OUT", "status": status}])
    bridge["payload"] = payload
    ingest_webhook(payload, bridge["history"])


@when(parsers.parse("{count:d} text webhooks arrive"))
def many_webhooks(bridge: dict[str, Any], make_webhook, count: int) -> None:
    for i in range(count):
        payload = make_webhook(messages=[_message("text", "5511", f"message {i}")])
        ingest_webhook(payload, bridge["history"])


@then(parsers.parse("the message log holds {count:d} inbound entry"))
@then(parsers.parse("the message log holds {count:d} inbound entries"))
def message_count(bridge: dict[str, Any], count: int) -> None:
    messages = bridge["history"].messages.read(1000)
    assert len(messages) == count
    assert all(m.direction == "in" for m in messages)


@then(parsers.parse('the newest inbound entry has text "{text}"'))
def newest_text(bridge: dict[str, Any], text: str) -> None:
    assert bridge["history"].messages.read(1)[0].text == text


@then(parsers.parse('the newest inbound entry is from "{sender}"'))
def newest_sender(bridge: dict[str, Any], sender: str) -> None:
    assert bridge["history"].messages.read(1)[0].sender == sender


@then("the event log holds a raw capture of the delivery")
def raw_capture(bridge: dict[str, Any]) -> None:
    captures = [
        e
        for e in bridge["history"].events.read(1000)
        if e.area == "webhook" and e.kind == "info"
    ]
    assert captures
    assert captures[0].data is bridge["payload"]
