"""REST backend async connection."""

import logging
from typing import Any, Optional

import httpx

from user_graph.config import get_settings
from user_graph.errors import BackendNotFound, BackendUnavailable

logger = logging.getLogger("rest_backend")


class RestBackend:
    """REST backend connection manager."""

    _client: httpx.AsyncClient | None = None

    @classmethod
    async def connect(cls, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        """Open the shared HTTP client."""
        settings = get_settings()
        if cls._client is not None:
            await cls.disconnect()
        cls._client = httpx.AsyncClient(
            base_url=settings.backend_url,
            timeout=settings.backend_timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    @classmethod
    async def disconnect(cls) -> None:
        """Close the shared HTTP client."""
        if cls._client:
            await cls._client.aclose()
            cls._client = None

    @classmethod
    def is_connected(cls) -> bool:
        return cls._client is not None

    @classmethod
    def client(cls) -> httpx.AsyncClient:
        """Get the shared HTTP client."""
        if not cls._client:
            raise RuntimeError("REST backend not connected")
        return cls._client

    @classmethod
    async def get_json(cls, path: str) -> Any:
        """GET a path and decode its JSON body.

        Raises BackendNotFound on 404 and BackendUnavailable on transport
        errors, timeouts, other error statuses or an undecodable body.
        """
        try:
            response = await cls.client().get(path)
        except httpx.HTTPError as e:
            logger.error(f"GET {path} failed: {e!r}")
            raise BackendUnavailable(f"Backend request failed: GET {path}", path) from e

        if response.status_code == 404:
            raise BackendNotFound(f"Not found: GET {path}", path)
        if response.is_error:
            logger.error(f"GET {path} returned {response.status_code}")
            raise BackendUnavailable(
                f"Backend returned {response.status_code}: GET {path}", path
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"GET {path} returned invalid JSON")
            raise BackendUnavailable(f"Backend returned invalid JSON: GET {path}", path) from e
