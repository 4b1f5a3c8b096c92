"""Shared test fixtures for all test modules."""

import json
from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest

from wabridge.adapters.cloud_api import GraphApiClient
from wabridge.adapters.frameworks.fastapi import create_app
from wabridge.adapters.storage.ring_buffer import (
    RingBufferEventStorage,
    RingBufferMessageStorage,
)
from wabridge.config import BridgeConfig
from wabridge.core.history import History


class GraphStub:
    """Stand-in for the Graph API behind an httpx.MockTransport.

    Records every request; answers with ``status`` and ``body`` or raises
    ``error`` when set.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status = 200
        self.body: Any = {"messages": [{"id": "wamid.TEST"}]}
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status, json=self.body)

    @property
    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def config() -> BridgeConfig:
    """Provide a fully configured bridge config."""
    return BridgeConfig(
        verify_token="verify-secret",
        access_token="test-token",
        phone_number_id="1234567890",
        business_account_id="9876543210",
    )


@pytest.fixture
def history() -> History:
    """Provide empty ring buffer logs."""
    return History(
        messages=RingBufferMessageStorage(max_size=200),
        events=RingBufferEventStorage(max_size=300),
    )


@pytest.fixture
def graph() -> GraphStub:
    """Provide a Graph API stub answering 200 by default."""
    return GraphStub()


@pytest.fixture
async def cloud_api(graph: GraphStub) -> AsyncGenerator[GraphApiClient, None]:
    """GraphApiClient wired to the Graph API stub."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(graph.handler))
    client = GraphApiClient(access_token="test-token", http=http)
    yield client
    await client.aclose()


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            app = create_app(config, history, cloud_api)
            async with asgi_test_client(app) as client:
                response = await client.get("/endpoint")
    """

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client


@pytest.fixture
async def client(config, history, cloud_api, asgi_test_client):
    """Client for a bridge app sharing the history and Graph API stub fixtures."""
    app = create_app(config, history, cloud_api)
    async with asgi_test_client(app) as client:
        yield client


def build_webhook(
    messages: list[dict[str, Any]] | None = None,
    contacts: list[dict[str, Any]] | None = None,
    statuses: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Build a Cloud API webhook payload with the given value lists."""
    value: dict[str, Any] = {
        "messaging_product": "whatsapp",
        "metadata": {"display_phone_number": "15550000000", "phone_number_id": "1234567890"},
    }
    if messages is not None:
        value["messages"] = messages
    if contacts is not None:
        value["contacts"] = contacts
    if statuses is not None:
        value["statuses"] = statuses
    return {
        "object": "whatsapp_business_account",
        "entry": [{"id": "9876543210", "changes": [{"field": "messages", "value": value}]}],
    }


@pytest.fixture
def make_webhook():
    """Factory fixture building webhook payloads.

    Usage:
        payload = make_webhook(messages=[{"type": "text", "text": {"body": "hi"}}])
    """
    return build_webhook
