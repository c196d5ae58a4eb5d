"""HTTP retrieval of raw response bodies.

The client only needs one capability from the transport: given a URL,
return the body as text or fail. ``Fetcher`` describes that capability and
``HttpxFetcher`` implements it on top of ``httpx.AsyncClient``. Tests and
applications can inject any object with a matching ``fetch`` coroutine.

Example:
    >>> async with HttpxFetcher(timeout=10.0) as fetcher:
    ...     body = await fetcher.fetch("https://api.openweathermap.org/...")
"""

import logging
from typing import Any, Optional, Protocol

import httpx

from .exceptions import OpenWeatherMapConnectionError
from .url import redact_url

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    """Retrieves the body of a URL.

    Implementations raise their own transport errors; the client propagates
    them unchanged.
    """

    async def fetch(self, url: str) -> str: ...


class HttpxFetcher:
    """Fetcher backed by a lazily created ``httpx.AsyncClient``.

    Args:
        timeout: HTTP request timeout in seconds. Defaults to 30.0.

    Attributes:
        _timeout: HTTP timeout in seconds.
        _client: Lazy-initialized httpx.AsyncClient.
    """

    def __init__(self, *, timeout: float = 30.0) -> None:
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HttpxFetcher":
        await self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Create the httpx.AsyncClient on first use."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client. Safe to call multiple times."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str) -> str:
        """Fetch a URL and return the response body.

        Args:
            url: Fully composed request URL.

        Client errors (4xx) that carry a body are returned as-is: the
        provider explains them in a JSON error envelope which the parser
        turns into OpenWeatherMapAPIError.

        Returns:
            Response body as text.

        Raises:
            OpenWeatherMapConnectionError: If the request fails, the provider
                answers with a 5xx status, or an error response has no body.
        """
        client = await self._ensure_client()
        logger.debug(f"GET {redact_url(url)}")

        try:
            response = await client.get(url)
            if response.is_server_error or (response.is_error and not response.text):
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise OpenWeatherMapConnectionError(
                f"HTTP error: {e.response.status_code} for {redact_url(url)}"
            ) from e
        except httpx.RequestError as e:
            raise OpenWeatherMapConnectionError(
                f"Request error: {type(e).__name__} for {redact_url(url)}"
            ) from e

        return response.text
