"""
Configuration for the WebFinger client.

Settings are loaded from environment variables through pydantic-settings, with
defaults that make the client usable without any configuration: HTTPS only,
in-memory cache, one hour TTL.

`create_webfinger` wires a WebFinger client from Settings, an aiohttp session
and, optionally, a Redis client for a shared cache.
"""

import logging
from typing import Optional

from aiohttp import ClientSession
from pydantic import AliasChoices, Field, RedisDsn
from pydantic_settings import BaseSettings
import redis.asyncio as redis

from social.graze.webfinger.discover.cache import (
    DEFAULT_TTL,
    CacheStore,
    FetchCache,
    MemoryCacheStore,
    RedisCacheStore,
)
from social.graze.webfinger.discover.client import WebFinger
from social.graze.webfinger.discover.fetch import DEFAULT_USER_AGENT, AiohttpFetcher

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    WebFinger client settings.

    Every field can be set with the upper-cased environment variable of the
    same name, for example FALLBACK_TO_HTTP=true.
    """

    debug: bool = False
    """
    Enable debug logging.
    Set with DEBUG=true environment variable.
    """

    sentry_dsn: Optional[str] = None
    """
    Sentry DSN for error reporting. Optional, no error reporting if not set.
    Set with SENTRY_DSN environment variable.
    """

    fallback_to_http: bool = False
    """
    Retry the WebFinger request over plain HTTP when HTTPS fails.
    Not allowed by RFC 7033, only meant for local development.
    Set with FALLBACK_TO_HTTP environment variable.
    """

    cache_ttl: int = Field(default=DEFAULT_TTL, ge=0)
    """
    Seconds fetched documents are cached. 0 disables caching.
    Set with CACHE_TTL environment variable.
    Default: 3600 (1 hour)
    """

    redis_dsn: Optional[RedisDsn] = Field(
        None,
        validation_alias=AliasChoices("redis_dsn", "redis_url"),
    )
    """
    Redis connection string for a shared document cache.
    Set with REDIS_DSN or REDIS_URL environment variables.
    An in-process cache is used when not set.
    """

    user_agent: str = DEFAULT_USER_AGENT
    """
    User-Agent header sent with discovery requests.
    Set with USER_AGENT environment variable.
    """

    request_timeout: float = Field(default=10.0, gt=0)
    """
    Total timeout in seconds for each HTTP request.
    Set with REQUEST_TIMEOUT environment variable.
    """


def create_webfinger(
    settings: Settings,
    session: ClientSession,
    redis_client: Optional[redis.Redis] = None,
) -> WebFinger:
    """
    Build a WebFinger client from settings.

    Args:
        settings: Client settings
        session: Shared aiohttp session used for all requests
        redis_client: Redis client for the cache; an in-memory cache is used
            when None

    Returns:
        A configured WebFinger client
    """
    store: CacheStore
    if redis_client is not None:
        store = RedisCacheStore(redis_client)
    else:
        store = MemoryCacheStore()

    return WebFinger(
        AiohttpFetcher(session, timeout=settings.request_timeout),
        cache=FetchCache(store),
        fallback_to_http=settings.fallback_to_http,
        cache_ttl=settings.cache_ttl,
        user_agent=settings.user_agent,
    )
