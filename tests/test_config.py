"""
Unit tests for social.graze.webfinger.config

Tests cover environment based settings and the wiring of the WebFinger client.
"""

from unittest.mock import AsyncMock

from aiohttp import ClientSession
from pydantic import ValidationError
import pytest

from social.graze.webfinger.config import Settings, create_webfinger
from social.graze.webfinger.discover.cache import MemoryCacheStore, RedisCacheStore
from social.graze.webfinger.discover.fetch import DEFAULT_USER_AGENT, AiohttpFetcher

ENV_VARS = (
    "DEBUG",
    "SENTRY_DSN",
    "FALLBACK_TO_HTTP",
    "CACHE_TTL",
    "REDIS_DSN",
    "REDIS_URL",
    "USER_AGENT",
    "REQUEST_TIMEOUT",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    """Test suite for Settings."""

    def test_defaults(self, clean_env):
        settings = Settings()
        assert settings.debug is False
        assert settings.sentry_dsn is None
        assert settings.fallback_to_http is False
        assert settings.cache_ttl == 3600
        assert settings.redis_dsn is None
        assert settings.user_agent == DEFAULT_USER_AGENT
        assert settings.request_timeout == 10.0

    def test_from_environment(self, clean_env):
        clean_env.setenv("DEBUG", "true")
        clean_env.setenv("FALLBACK_TO_HTTP", "1")
        clean_env.setenv("CACHE_TTL", "60")
        clean_env.setenv("USER_AGENT", "test-agent/1.0")
        clean_env.setenv("REQUEST_TIMEOUT", "2.5")

        settings = Settings()

        assert settings.debug is True
        assert settings.fallback_to_http is True
        assert settings.cache_ttl == 60
        assert settings.user_agent == "test-agent/1.0"
        assert settings.request_timeout == 2.5

    @pytest.mark.parametrize("name", ["REDIS_DSN", "REDIS_URL"])
    def test_redis_dsn(self, clean_env, name):
        clean_env.setenv(name, "redis://localhost:6379/1")
        settings = Settings()
        assert settings.redis_dsn is not None
        assert str(settings.redis_dsn).startswith("redis://localhost:6379")

    def test_negative_ttl_rejected(self, clean_env):
        clean_env.setenv("CACHE_TTL", "-1")
        with pytest.raises(ValidationError):
            Settings()


class TestCreateWebFinger:
    """Test suite for create_webfinger."""

    def test_memory_cache(self, clean_env):
        settings = Settings(fallback_to_http=True, cache_ttl=30, request_timeout=3.0)
        session = AsyncMock(spec=ClientSession)

        webfinger = create_webfinger(settings, session)

        assert isinstance(webfinger.cache.store, MemoryCacheStore)
        assert isinstance(webfinger.fetcher, AiohttpFetcher)
        assert webfinger.fetcher.session is session
        assert webfinger.fetcher.timeout == 3.0
        assert webfinger.fallback_to_http is True
        assert webfinger.cache_ttl == 30

    @pytest.mark.asyncio
    async def test_redis_cache(self, clean_env, fake_redis_client):
        settings = Settings(user_agent="test-agent/1.0")

        webfinger = create_webfinger(
            settings, AsyncMock(spec=ClientSession), fake_redis_client
        )

        assert isinstance(webfinger.cache.store, RedisCacheStore)
        assert webfinger.cache.store.redis_client is fake_redis_client
        assert webfinger.headers["User-Agent"] == "test-agent/1.0"
