"""
Unit tests for social.graze.webfinger.discover.fetch

Tests cover AiohttpFetcher status and error handling with a mocked aiohttp
session.
"""

import asyncio
from unittest.mock import AsyncMock

import aiohttp
from aiohttp import ClientResponse, ClientSession
import pytest

from social.graze.webfinger.discover.fetch import (
    ACCEPT,
    AiohttpFetcher,
    FetchError,
    request_headers,
)

URL = "https://example.org/.well-known/host-meta"


def mock_session_returning(status: int, body: str = "", reason: str = "OK"):
    mock_session = AsyncMock(spec=ClientSession)
    mock_response = AsyncMock(spec=ClientResponse)
    mock_response.status = status
    mock_response.reason = reason
    mock_response.text.return_value = body
    mock_session.get.return_value.__aenter__.return_value = mock_response
    return mock_session


def mock_session_raising(error: Exception):
    mock_session = AsyncMock(spec=ClientSession)
    mock_session.get.return_value.__aenter__.side_effect = error
    return mock_session


class TestRequestHeaders:
    def test_headers(self):
        assert request_headers("agent/1.0") == {"User-Agent": "agent/1.0", "Accept": ACCEPT}


class TestAiohttpFetcher:
    """Test suite for AiohttpFetcher."""

    @pytest.mark.asyncio
    async def test_success(self):
        mock_session = mock_session_returning(200, "<XRD/>")
        fetcher = AiohttpFetcher(mock_session)

        body = await fetcher.fetch(URL, {"Accept": ACCEPT})

        assert body == "<XRD/>"
        mock_session.get.assert_called_once_with(
            URL, headers={"Accept": ACCEPT}, allow_redirects=True
        )

    @pytest.mark.asyncio
    async def test_session_timeout_kept(self):
        """Test no timeout is passed when unset, so the session default applies."""
        mock_session = mock_session_returning(200, "{}")
        await AiohttpFetcher(mock_session).fetch(URL, {})

        assert "timeout" not in mock_session.get.call_args.kwargs

    @pytest.mark.asyncio
    async def test_timeout_passed(self):
        mock_session = mock_session_returning(200, "{}")
        await AiohttpFetcher(mock_session, timeout=5.0).fetch(URL, {})

        timeout = mock_session.get.call_args.kwargs["timeout"]
        assert isinstance(timeout, aiohttp.ClientTimeout)
        assert timeout.total == 5.0

    @pytest.mark.asyncio
    async def test_not_found(self):
        """Test non-200 responses raise FetchError with the status."""
        fetcher = AiohttpFetcher(mock_session_returning(404, reason="Not Found"))

        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch(URL, {})

        assert exc_info.value.status == 404
        assert exc_info.value.url == URL
        assert "404 Not Found" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_redirect_status_not_accepted(self):
        fetcher = AiohttpFetcher(mock_session_returning(304, reason="Not Modified"))
        with pytest.raises(FetchError):
            await fetcher.fetch(URL, {})

    @pytest.mark.asyncio
    async def test_client_error(self):
        fetcher = AiohttpFetcher(mock_session_raising(aiohttp.ClientError()))

        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch(URL, {})

        assert exc_info.value.status is None
        assert isinstance(exc_info.value.__cause__, aiohttp.ClientError)

    @pytest.mark.asyncio
    async def test_timeout(self):
        fetcher = AiohttpFetcher(mock_session_raising(asyncio.TimeoutError()))

        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch(URL, {})

        assert "timed out" in str(exc_info.value)
