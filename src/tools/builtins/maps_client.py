"""Thin async client for the Google Maps Platform web services.

One request per call, no retries and no caching. The API key is supplied
per call because it belongs to the calling session, not to the client.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from src.infra.errors import MissingCredentialError, TransportError, UpstreamError

logger = structlog.get_logger()

DEFAULT_BASE_URL = "https://maps.googleapis.com/maps/api"


class GoogleMapsClient:
    """Wraps a shared httpx.AsyncClient; the owner closes it via aclose()."""

    def __init__(
        self,
        http: httpx.AsyncClient | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout_s: float = 10.0,
    ) -> None:
        self._http = http or httpx.AsyncClient(timeout=timeout_s)
        self._base_url = base_url.rstrip("/")

    async def aclose(self) -> None:
        await self._http.aclose()

    async def get_json(
        self,
        endpoint: str,
        params: dict[str, Any],
        *,
        api_key: str | None,
        operation: str,
    ) -> dict[str, Any]:
        """GET {base_url}/{endpoint}/json and return the body when status == OK.

        Raises MissingCredentialError, TransportError or UpstreamError
        ("<operation> failed: <error_message or status>").
        """
        if not api_key or not api_key.strip():
            raise MissingCredentialError()

        url = f"{self._base_url}/{endpoint}/json"
        query = {k: v for k, v in params.items() if v is not None}
        query["key"] = api_key
        try:
            response = await self._http.get(url, params=query)
        except httpx.HTTPError as e:
            logger.warning("maps_transport_error", endpoint=endpoint, error=str(e))
            raise TransportError(f"{operation} failed: {str(e) or type(e).__name__}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(
                f"{operation} failed: HTTP {response.status_code}",
                status=str(response.status_code),
            ) from e

        status = data.get("status") if isinstance(data, dict) else None
        if status != "OK":
            message = (data.get("error_message") if isinstance(data, dict) else None) or (
                status or f"HTTP {response.status_code}"
            )
            logger.info("maps_upstream_error", endpoint=endpoint, status=status)
            raise UpstreamError(f"{operation} failed: {message}", status=status)
        return data
