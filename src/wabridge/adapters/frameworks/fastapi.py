"""FastAPI adapter exposing the bridge to the browser UI and the webhook."""

import json
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from wabridge.adapters.cloud_api import GraphApiClient
from wabridge.adapters.frameworks.middleware import RequestEventMiddleware
from wabridge.adapters.frameworks.query_params import _parse_limit_param
from wabridge.adapters.storage.ring_buffer import (
    RingBufferEventStorage,
    RingBufferMessageStorage,
)
from wabridge.config import BridgeConfig
from wabridge.core.dispatcher import OutboundDispatcher
from wabridge.core.encoding.json import encode_events, encode_messages
from wabridge.core.errors import BridgeError
from wabridge.core.history import History
from wabridge.core.normalizer import ingest_webhook
from wabridge.core.ports import CloudApiPort
from wabridge.core.verification import verify_subscription

logger = logging.getLogger(__name__)

MESSAGES_DEFAULT_LIMIT = 50
MESSAGES_MAX_LIMIT = 200
EVENTS_DEFAULT_LIMIT = 100
EVENTS_MAX_LIMIT = 300


def _utc_now() -> str:
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


async def _json_body(request: Request) -> dict[str, Any]:
    """Decode a JSON object body; anything else counts as empty."""
    try:
        body = await request.json()
    except (ValueError, RecursionError):
        return {}
    return body if isinstance(body, dict) else {}


def _decode_webhook(raw: bytes) -> Any:
    """Decode a webhook body, keeping undecodable input as text."""
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except (ValueError, RecursionError):
        return {"raw": raw.decode("utf-8", errors="replace")}


def create_bridge_router(
    config: BridgeConfig,
    history: History,
    dispatcher: OutboundDispatcher,
) -> APIRouter:
    """Create a router with the UI API and the webhook endpoints.

    Args:
        config: Bridge settings (for health and the webhook handshake).
        history: Logs read by the polling endpoints and fed by the webhook.
        dispatcher: Outbound dispatcher for send and template endpoints.

    Returns:
        APIRouter with /api/* and /webhook endpoints configured.
    """
    router = APIRouter()

    @router.get("/api/health")
    async def health() -> dict[str, Any]:
        """Report liveness and which settings are present."""
        return {"ok": True, "time": _utc_now(), "configured": config.configured()}

    @router.get("/api/messages")
    async def get_messages(limit: str | None = None) -> dict[str, Any]:
        """Return the most recent message log entries, newest first."""
        count = _parse_limit_param(limit, MESSAGES_DEFAULT_LIMIT, MESSAGES_MAX_LIMIT)
        return {"ok": True, "messages": encode_messages(history.messages.read(count))}

    @router.get("/api/logs")
    async def get_events(limit: str | None = None) -> dict[str, Any]:
        """Return the most recent diagnostic events, newest first."""
        count = _parse_limit_param(limit, EVENTS_DEFAULT_LIMIT, EVENTS_MAX_LIMIT)
        return {"ok": True, "events": encode_events(history.events.read(count))}

    @router.post("/api/send")
    async def send(request: Request) -> dict[str, Any]:
        body = await _json_body(request)
        result = await dispatcher.send_text(body.get("to"), body.get("text"))
        return {"ok": True, "result": result}

    @router.post("/api/send-template")
    async def send_template(request: Request) -> dict[str, Any]:
        body = await _json_body(request)
        result = await dispatcher.send_template(
            body.get("to"),
            body.get("templateName"),
            body.get("language"),
            body.get("variables"),
        )
        return {"ok": True, "result": result}

    @router.get("/api/templates")
    async def list_templates() -> dict[str, Any]:
        return {"ok": True, "result": await dispatcher.list_templates()}

    @router.post("/api/templates")
    async def create_template(request: Request) -> dict[str, Any]:
        body = await _json_body(request)
        result = await dispatcher.create_template(
            body.get("name"),
            body.get("language"),
            body.get("category"),
            body.get("bodyText"),
        )
        return {"ok": True, "result": result}

    @router.get("/webhook")
    async def verify_webhook(request: Request) -> Response:
        """Answer the Cloud API subscription handshake."""
        params = request.query_params
        challenge = verify_subscription(
            params.get("hub.mode"),
            params.get("hub.verify_token"),
            params.get("hub.challenge"),
            config.verify_token,
        )
        if challenge is None:
            logger.warning("Webhook verification rejected")
            return Response(status_code=403)
        return PlainTextResponse(challenge)

    @router.post("/webhook")
    async def receive_webhook(request: Request) -> Response:
        """Ingest a webhook delivery. Always acknowledged with 200."""
        ingest_webhook(_decode_webhook(await request.body()), history)
        return PlainTextResponse("EVENT_RECEIVED")

    return router


async def _bridge_error_handler(_request: Request, exc: BridgeError) -> JSONResponse:
    content: dict[str, Any] = {"ok": False, "error": exc.message}
    if exc.details is not None:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


def create_history(config: BridgeConfig) -> History:
    """Create the ring buffer backed logs sized from the config."""
    return History(
        messages=RingBufferMessageStorage(
            max_size=config.message_log_size, read_cap=MESSAGES_MAX_LIMIT
        ),
        events=RingBufferEventStorage(
            max_size=config.event_log_size, read_cap=EVENTS_MAX_LIMIT
        ),
    )


def create_app(
    config: BridgeConfig | None = None,
    history: History | None = None,
    cloud_api: CloudApiPort | None = None,
) -> FastAPI:
    """Create the bridge FastAPI application.

    Args:
        config: Settings. Defaults to ``BridgeConfig.from_env()``.
        history: Logs owned by this app. Ring buffers are created when omitted.
        cloud_api: Cloud API adapter. A GraphApiClient is created when omitted
            and closed on shutdown.

    Returns:
        Configured FastAPI application instance
    """
    config = config or BridgeConfig.from_env()
    history = history or create_history(config)
    owned_client: GraphApiClient | None = None
    if cloud_api is None:
        owned_client = GraphApiClient(
            access_token=config.access_token,
            api_version=config.api_version,
            base_url=config.graph_base_url,
        )
        cloud_api = owned_client
    dispatcher = OutboundDispatcher(config, history, cloud_api)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
        """Close the Graph API client on shutdown."""
        yield
        if owned_client is not None:
            await owned_client.aclose()

    app = FastAPI(title="WhatsApp Cloud API Bridge", lifespan=lifespan)
    app.include_router(create_bridge_router(config, history, dispatcher))
    app.add_exception_handler(BridgeError, _bridge_error_handler)
    app.add_middleware(RequestEventMiddleware, history=history)
    return app
