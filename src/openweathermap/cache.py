"""Response caching for the OpenWeatherMap client.

Caching happens at the level of raw response bodies, keyed by the fully
composed request URL. Two pieces are involved:

1. **Cache**: the storage capability. Anything with ``is_fresh``, ``get``
   and ``put`` works; ``MemoryCache`` is the in-process implementation.
   Freshness is decided by the cache, given the caller's TTL.

2. **CacheGate**: decides whether a URL is served from the cache or
   fetched, and records whether the last answer came from the cache.

Example:
    Caching is wired up by OpenWeatherMapClient::

        async with OpenWeatherMapClient(
            api_key="...", cache=MemoryCache(), ttl_seconds=300
        ) as client:
            await client.get_weather("Berlin")  # fetched
            await client.get_weather("Berlin")  # served from cache
            assert client.was_cached
"""

import logging
from datetime import datetime, timedelta
from datetime import timezone as dt_timezone
from typing import Optional, Protocol

from .fetcher import Fetcher
from .url import redact_url

logger = logging.getLogger(__name__)


class Cache(Protocol):
    """Storage capability for raw response bodies."""

    def is_fresh(self, key: str, ttl_seconds: int) -> bool: ...

    def get(self, key: str) -> str: ...

    def put(self, key: str, body: str) -> None: ...


class MemoryCache:
    """In-memory cache for response bodies.

    Entries never expire on their own; ``is_fresh`` compares their age
    against the TTL given by the caller. Nothing survives the process.

    Example:
        >>> cache = MemoryCache()
        >>> cache.put(url, body)
        >>> if cache.is_fresh(url, ttl_seconds=600):
        ...     body = cache.get(url)
    """

    def __init__(self) -> None:
        self._bodies: dict[str, str] = {}
        self._stored_at: dict[str, datetime] = {}

    def __len__(self) -> int:
        return len(self._bodies)

    def is_fresh(self, key: str, ttl_seconds: int) -> bool:
        """Check whether ``key`` was stored less than ``ttl_seconds`` ago."""
        stored = self._stored_at.get(key)
        if stored is None:
            return False
        now = datetime.now(tz=dt_timezone.utc)
        return (now - stored) < timedelta(seconds=ttl_seconds)

    def get(self, key: str) -> str:
        """Return the body stored under ``key``.

        Raises:
            KeyError: If nothing is stored under ``key``.
        """
        return self._bodies[key]

    def put(self, key: str, body: str) -> None:
        self._bodies[key] = body
        self._stored_at[key] = datetime.now(tz=dt_timezone.utc)

    def clear(self) -> None:
        """Remove all cached bodies."""
        self._bodies.clear()
        self._stored_at.clear()


class CacheGate:
    """Serves request URLs from the cache or from the fetcher.

    ``was_cached`` is shared by every call going through the gate and only
    reflects the most recently completed call. Concurrent callers can not
    rely on it describing their own request; use the second element of
    ``resolve``'s result instead. There is no locking: two concurrent
    misses for the same URL both fetch.

    Args:
        fetcher: Retrieves bodies on a cache miss.
        cache: Optional storage. Without it every call fetches.

    Attributes:
        was_cached: Whether the last resolved URL came from the cache.
    """

    def __init__(self, fetcher: Fetcher, cache: Optional[Cache] = None) -> None:
        self.fetcher = fetcher
        self.cache = cache
        self.was_cached = False

    async def resolve(self, url: str, ttl_seconds: int) -> tuple[str, bool]:
        """Return the body for ``url`` and whether it came from the cache.

        A TTL of 0 bypasses the cache for this call, both for reading and
        for storing.

        Args:
            url: Fully composed request URL, used as the cache key.
            ttl_seconds: Freshness window passed to the cache.

        Returns:
            Tuple of (body, served_from_cache).

        Raises:
            Exception: Whatever the fetcher raises, unchanged.
        """
        if self.cache is None or ttl_seconds <= 0:
            body = await self.fetcher.fetch(url)
            self.was_cached = False
            return body, False

        if self.cache.is_fresh(url, ttl_seconds):
            logger.debug(f"Using cached response for {redact_url(url)}")
            body = self.cache.get(url)
            self.was_cached = True
            return body, True

        logger.debug(f"Fetching fresh response for {redact_url(url)}")
        body = await self.fetcher.fetch(url)
        self.cache.put(url, body)
        self.was_cached = False
        return body, False
