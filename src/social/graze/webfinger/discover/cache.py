"""
Fetch cache for discovery documents.

Wraps a fetch coroutine with keyed, TTL based memoization on top of a
pluggable CacheStore. Only successful fetches are stored; failures propagate
to the caller and are retried on the next request.

Stores:
- MemoryCacheStore: per-process dictionary, the default
- RedisCacheStore: shared cache on a redis.asyncio client
"""

import logging
from time import monotonic
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, Tuple

import redis.asyncio as redis

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "webfinger-cache-"

# Replaces characters that are unsafe in cache keys. Distinct URLs may map to
# the same key.
CACHE_KEY_SEPARATOR = "-.-"

DEFAULT_TTL = 3600


def cache_key(url: str) -> str:
    return CACHE_KEY_PREFIX + url.replace("/", CACHE_KEY_SEPARATOR).replace(
        ":", CACHE_KEY_SEPARATOR
    )


def normalize_redis_string(value: Any) -> str:
    """
    Normalize Redis value to string, handling bytes conversion.
    """
    if isinstance(value, bytes):
        return value.decode()
    return str(value)


class CacheStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def put(self, key: str, value: str, ttl: int) -> None: ...


class MemoryCacheStore:
    """
    In-process cache store.

    Entries expire `ttl` seconds after they were written according to
    `clock`, which defaults to time.monotonic. Expired entries are dropped
    on every write.
    """

    def __init__(self, clock: Callable[[], float] = monotonic) -> None:
        self.clock = clock
        self._entries: Dict[str, Tuple[float, str]] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self.clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def put(self, key: str, value: str, ttl: int) -> None:
        now = self.clock()
        self.evict_expired(now)
        self._entries[key] = (now + ttl, value)

    def evict_expired(self, now: float) -> None:
        expired = [
            key for key, (expires_at, _) in self._entries.items() if now >= expires_at
        ]
        for key in expired:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)


class RedisCacheStore:
    """Cache store backed by Redis, expiry is delegated to the server."""

    def __init__(self, redis_client: redis.Redis) -> None:
        self.redis_client = redis_client

    async def get(self, key: str) -> Optional[str]:
        value = await self.redis_client.get(key)
        if value is None:
            return None
        return normalize_redis_string(value)

    async def put(self, key: str, value: str, ttl: int) -> None:
        await self.redis_client.set(key, value, ex=ttl)


class FetchCache:
    def __init__(self, store: CacheStore) -> None:
        self.store = store

    async def get_or_fetch(
        self, key: str, ttl: int, fetch_fn: Callable[[], Awaitable[str]]
    ) -> str:
        """
        Return the cached content for `key`, fetching and storing it on a miss.

        Exceptions raised by `fetch_fn` propagate and nothing is stored.
        """
        cached = await self.store.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        content = await fetch_fn()
        if ttl > 0:
            await self.store.put(key, content, ttl)
        return content
