"""httpx adapter for the Meta Graph (WhatsApp Cloud) API."""

import logging
from typing import Any

import httpx

from wabridge.core.models import UpstreamResponse

logger = logging.getLogger(__name__)


def _decode(response: httpx.Response) -> Any:
    """Decode a JSON body, falling back to an empty dict."""
    try:
        return response.json()
    except ValueError:
        return {}


class GraphApiClient:
    """Implementation of CloudApiPort over ``httpx.AsyncClient``.

    Paths are relative to ``<base_url>/<api_version>/``. HTTP error statuses
    are returned to the caller; only transport errors raise.

    Args:
        access_token: Bearer token sent on every request.
        api_version: Graph API version tag (e.g., "v19.0").
        base_url: Graph API root.
        http: Client to use. One is created lazily when omitted.
    """

    def __init__(
        self,
        access_token: str,
        api_version: str = "v19.0",
        base_url: str = "https://graph.facebook.com",
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self.access_token = access_token
        self.api_version = api_version
        self.base_url = base_url.rstrip("/")
        self._http = http

    def _client(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient()
        return self._http

    def url(self, path: str) -> str:
        return f"{self.base_url}/{self.api_version}/{path.lstrip('/')}"

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}

    async def get(
        self, path: str, params: dict[str, Any] | None = None
    ) -> UpstreamResponse:
        """GET a Graph API path and return status plus decoded body."""
        url = self.url(path)
        logger.debug("GET %s", url)
        response = await self._client().get(url, params=params, headers=self.headers)
        return UpstreamResponse(status=response.status_code, data=_decode(response))

    async def post(self, path: str, payload: dict[str, Any]) -> UpstreamResponse:
        """POST a JSON payload to a Graph API path."""
        url = self.url(path)
        logger.debug("POST %s", url)
        response = await self._client().post(url, json=payload, headers=self.headers)
        return UpstreamResponse(status=response.status_code, data=_decode(response))

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._http is not None:
            await self._http.aclose()
