"""ASGI middleware that records API requests in the diagnostic event log.

Works with any ASGI application; the FastAPI app factory installs it around
the bridge routes.
"""

import fnmatch
import time
import uuid
from collections.abc import Callable, Coroutine
from typing import Any

from wabridge.core import entries
from wabridge.core.history import History
from wabridge.core.models import Severity

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]

AREA = "http"

# Polling endpoints would flood the event log
DEFAULT_EXCLUDE_PATHS = ["/api/health", "/api/messages", "/api/logs"]


def _extract_request_id(scope: Scope, header_name: str = "X-Request-ID") -> str:
    """Extract or generate a request ID from ASGI scope headers.

    Searches for the specified header (case-insensitive). If not found,
    generates a new UUID.

    Args:
        scope: ASGI scope dictionary containing request metadata.
        header_name: Name of the header to search for (default: "X-Request-ID").

    Returns:
        Request ID string (either from header or newly generated UUID).
    """
    header_bytes = header_name.lower().encode()
    headers: list[tuple[bytes, bytes]] = scope.get("headers", [])
    for name, value in headers:
        if name.lower() == header_bytes:
            return str(value.decode("utf-8", errors="replace"))

    return str(uuid.uuid4())


def _get_severity_for_status(status_code: int) -> Severity:
    """Map an HTTP status code to an event severity.

    - 400-499 (4xx) → "warn"
    - 500-599 (5xx) → "error"
    - Other → "info"
    """
    if 400 <= status_code < 500:
        return "warn"
    if 500 <= status_code < 600:
        return "error"
    return "info"


class RequestEventMiddleware:
    """ASGI middleware writing one ``http`` event per handled request.

    Excluded paths pass straight through. Exceptions raised by the wrapped
    app are recorded as errors and re-raised.
    """

    def __init__(
        self,
        app: ASGIApp,
        history: History,
        exclude_paths: list[str] | None = None,
        request_id_header: str = "X-Request-ID",
    ) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application to wrap.
            history: Logs receiving the request events.
            exclude_paths: Paths not recorded. Supports exact matches and
                          wildcard patterns (e.g., "/static/*"). Defaults to
                          the polling endpoints.
            request_id_header: Header carrying a caller-supplied request ID.
        """
        self.app = app
        self.history = history
        self.exclude_paths = (
            DEFAULT_EXCLUDE_PATHS if exclude_paths is None else exclude_paths
        )
        self.request_id_header = request_id_header

    def _path_excluded(self, path: str) -> bool:
        """Check if path matches any pattern in exclude_paths."""
        return any(fnmatch.fnmatch(path, pattern) for pattern in self.exclude_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or self._path_excluded(scope["path"]):
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        request_id = _extract_request_id(scope, self.request_id_header)
        captured: dict[str, Any] = {"status": None, "exception": None}

        async def wrapped_send(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                captured["status"] = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, wrapped_send)
        except Exception as e:
            captured["exception"] = e
            captured["status"] = 500

        duration = time.perf_counter() - start_time
        self._record(scope, request_id, captured, duration)
        if captured["exception"] is not None:
            raise captured["exception"]

    def _record(
        self,
        scope: Scope,
        request_id: str,
        captured: dict[str, Any],
        duration: float,
    ) -> None:
        status = captured["status"] or 0
        data: dict[str, Any] = {
            "request_id": request_id,
            "method": scope["method"],
            "path": scope["path"],
            "status_code": status,
            "duration_ms": duration * 1000,
        }
        if captured["exception"] is not None:
            exc = captured["exception"]
            data["exception"] = f"{type(exc).__name__}: {exc!s}"
        self.history.record(
            entries.event(
                _get_severity_for_status(status),
                AREA,
                f"{scope['method']} {scope['path']} -> {status}",
                data,
            )
        )
