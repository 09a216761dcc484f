"""HTTP fetch capability used by the discovery engine.

The engine only depends on the Fetcher protocol; AiohttpFetcher is the
default implementation on top of a shared aiohttp ClientSession.
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol

import aiohttp
from aiohttp import ClientSession

logger = logging.getLogger(__name__)

ACCEPT = "application/jrd+json, application/xrd+xml;q=0.9"

DEFAULT_USER_AGENT = "graze-webfinger"


def request_headers(user_agent: str = DEFAULT_USER_AGENT) -> Dict[str, str]:
    return {"User-Agent": user_agent, "Accept": ACCEPT}


class FetchError(Exception):
    """
    A document could not be retrieved.

    Raised for unreachable hosts, timeouts and non-200 responses alike; the
    discovery engine treats all of them as a failed attempt.
    """

    def __init__(self, message: str, url: str, status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status

    @staticmethod
    def bad_status(url: str, status: int, reason: Optional[str] = None) -> "FetchError":
        return FetchError(
            f"error-fetch-4000 Error loading XRD file: {status} {reason or ''}".rstrip(),
            url,
            status,
        )

    @staticmethod
    def unreachable(url: str, detail: str = "") -> "FetchError":
        return FetchError(
            f"error-fetch-4001 Error loading XRD file: {url} {detail}".rstrip(), url
        )


class Fetcher(Protocol):
    async def fetch(self, url: str, headers: Dict[str, str]) -> str:
        """Return the body of `url`, raising FetchError on failure."""
        ...


class AiohttpFetcher:
    """Fetches documents with an aiohttp ClientSession, following redirects."""

    def __init__(self, session: ClientSession, timeout: Optional[float] = None):
        self.session = session
        self.timeout = timeout

    async def fetch(self, url: str, headers: Dict[str, str]) -> str:
        kwargs: Dict[str, Any] = {}
        # Without a timeout the session default applies.
        if self.timeout:
            kwargs["timeout"] = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with self.session.get(
                url, headers=headers, allow_redirects=True, **kwargs
            ) as resp:
                if resp.status != 200:
                    raise FetchError.bad_status(url, resp.status, resp.reason)
                return await resp.text()
        except FetchError:
            raise
        except asyncio.TimeoutError as e:
            raise FetchError.unreachable(url, "timed out") from e
        except aiohttp.ClientError as e:
            raise FetchError.unreachable(url, type(e).__name__) from e
        except UnicodeDecodeError as e:
            raise FetchError.unreachable(url, "undecodable body") from e
