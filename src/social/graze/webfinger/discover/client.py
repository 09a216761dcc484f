"""WebFinger discovery client.

Resolves identifiers such as `user@example.org` or `acct:user@example.org` to
their JRD/XRD document.

Discovery proceeds in order, stopping at the first step that yields a
document:

1. WebFinger (RFC 7033): https://{host}/.well-known/webfinger?resource={id}
2. host-meta (RFC 6415): https://{host}/.well-known/host-meta, then http://
3. LRDD: the host-meta "lrdd" link template with {uri} replaced by the
   identifier, over HTTPS and then HTTP

Results are Reaction objects and errors are reported in `Reaction.error`;
`WebFinger.finger` does not raise for discovery failures.
"""

import logging
import re
from typing import Optional, Tuple, Union
from urllib.parse import quote_plus, urlsplit

import sentry_sdk

from social.graze.webfinger.discover.cache import DEFAULT_TTL, FetchCache, cache_key
from social.graze.webfinger.discover.fetch import (
    DEFAULT_USER_AGENT,
    FetchError,
    Fetcher,
    request_headers,
)
from social.graze.webfinger.discover.reaction import (
    OPENID_PROVIDER_REL,
    DiscoveryError,
    ErrorCode,
    Reaction,
)
from social.graze.webfinger.xrd.detect import DataFormat, SourceKind
from social.graze.webfinger.xrd.errors import XrdException
from social.graze.webfinger.xrd.factory import create_loader

logger = logging.getLogger(__name__)

SCHEME_PATTERN = re.compile(r"^([a-zA-Z+]+):")

# Schemes whose host is the part after the last "@".
ACCOUNT_SCHEMES = ("acct", "mailto", "xmpp")

LRDD_REL = "lrdd"
LRDD_TYPE = "application/xrd+xml"

# Host-meta links copied into every result.
HOST_META_MERGE_RELS = (OPENID_PROVIDER_REL,)


def parse_identifier(url: str) -> Tuple[str, Optional[str]]:
    """Normalize an identifier and extract its host.

    Identifiers without a scheme get `acct:` prepended. The host is None
    when it cannot be determined.

    Args:
        url: Identifier with or without scheme

    Returns:
        Tuple of the normalized identifier and its host
    """
    match = SCHEME_PATTERN.match(url)
    if match is None:
        identifier = "acct:" + url
        scheme = "acct"
    else:
        identifier = url
        scheme = match.group(1)

    host: Optional[str] = None
    if scheme.lower() in ACCOUNT_SCHEMES:
        if "@" in identifier:
            host = identifier.rsplit("@", 1)[1]
    else:
        try:
            host = urlsplit(identifier).hostname
        except ValueError:
            host = None

    if not host:
        return identifier, None
    return identifier, host


def is_https(url: str) -> bool:
    return url[:8] == "https://"


def to_http(url: str) -> str:
    return "http://" + url[8:]


class WebFinger:
    """
    WebFinger client with host-meta/LRDD fallback.

    Args:
        fetcher: Fetch capability used for every request
        cache: Optional fetch cache; documents are fetched directly without it
        fallback_to_http: Retry the WebFinger request over plain HTTP when the
            HTTPS one fails. RFC 7033 forbids this, it is only meant for local
            testing.
        cache_ttl: Seconds fetched documents stay cached
        user_agent: User-Agent header sent with every request
    """

    def __init__(
        self,
        fetcher: Fetcher,
        cache: Optional[FetchCache] = None,
        fallback_to_http: bool = False,
        cache_ttl: int = DEFAULT_TTL,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.fetcher = fetcher
        self.cache = cache
        self.fallback_to_http = fallback_to_http
        self.cache_ttl = cache_ttl
        self.headers = request_headers(user_agent)

    async def finger(self, url: str) -> Reaction:
        """Discover the document describing an identifier.

        Args:
            url: Identifier, with or without scheme ("acct:" is assumed)

        Returns:
            Reaction with the resolved document; `error` is set when
            discovery failed or the document is about another subject
        """
        identifier, host = parse_identifier(url)
        if host is None:
            logger.info("finger: identifier %r not supported", url)
            return Reaction(url=identifier, error=DiscoveryError.not_supported(identifier))

        react = await self.load_webfinger(identifier, host)
        if react.error is None or react.error.code == ErrorCode.describe:
            return react

        logger.info(
            "finger: webfinger failed for %s, falling back to host-meta: %s",
            identifier,
            react.error,
        )

        host_meta = await self.load_host_meta(host)
        if host_meta.error is not None:
            return host_meta

        react = await self.load_lrdd(identifier, host, host_meta)
        if react.error is not None and react.error.code == ErrorCode.no_lrdd:
            react.error = DiscoveryError.nothing(react.error)

        return react

    async def load_webfinger(self, identifier: str, host: str) -> Reaction:
        """Load the WebFinger JRD for an identifier from its host."""
        user_url = (
            f"https://{host}/.well-known/webfinger?resource={quote_plus(identifier)}"
        )

        react = await self.load_xrd_cached(user_url, DataFormat.json)

        if self.fallback_to_http and react.error is not None and is_https(user_url):
            logger.info("load_webfinger: retrying %s over http", user_url)
            react = await self.load_xrd_cached(to_http(user_url), DataFormat.json)
            react.secure = False

        if react.error is not None:
            return react

        self.verify_describes(react, identifier)
        return react

    async def load_host_meta(self, host: str) -> Reaction:
        """Load the host's .well-known/host-meta document.

        host-meta has no subject (RFC 6415 section 3.1), so it is not checked
        with `describes`. A document only found over HTTP is not secure.
        """
        react = await self.load_xrd_cached(f"https://{host}/.well-known/host-meta")
        if react.error is None:
            return react

        react = await self.load_xrd_cached(f"http://{host}/.well-known/host-meta")
        react.secure = False
        if react.error is None:
            return react

        react.error = DiscoveryError.no_host_meta(host, react.error)
        return react

    async def load_lrdd(self, identifier: str, host: str, host_meta: Reaction) -> Reaction:
        """Load the identifier's document through the host-meta LRDD template."""
        link = host_meta.get(LRDD_REL, LRDD_TYPE)
        if link is None or not link.template:
            react = Reaction(url=identifier, error=DiscoveryError.no_lrdd_link(host))
            self.merge_host_meta(react, host_meta)
            return react

        user_url = link.template.replace("{uri}", quote_plus(identifier))

        react = await self.load_xrd_cached(user_url)
        if react.error is not None and is_https(user_url):
            logger.info("load_lrdd: retrying %s over http", user_url)
            user_url = to_http(user_url)
            react = await self.load_xrd_cached(user_url)

        if react.error is not None:
            react.error = DiscoveryError.no_lrdd(react.error)
            self.merge_host_meta(react, host_meta)
            return react

        if not is_https(user_url):
            react.secure = False
        self.verify_describes(react, identifier)
        self.merge_host_meta(react, host_meta)
        return react

    def merge_host_meta(self, react: Reaction, host_meta: Reaction) -> None:
        """Append relevant host-meta links and combine the secure flags."""
        for link in host_meta.links:
            if link.rel in HOST_META_MERGE_RELS:
                react.links.append(link)
        react.secure = react.secure and host_meta.secure

    def verify_describes(self, react: Reaction, account: str) -> None:
        """Flag a document that is not about `account`; the data is kept."""
        if not react.describes(account):
            react.error = DiscoveryError.does_not_describe(account, react.subject)
            react.secure = False

    async def load_xrd_cached(
        self, url: str, data_format: Union[DataFormat, None] = None
    ) -> Reaction:
        """Fetch `url` through the cache and load it into a new Reaction."""
        react = Reaction(url=url)
        try:
            content = await self.fetch_cached(url)
            loader = create_loader(react, content, data_format, SourceKind.literal)
            loader.load(content)
        except (FetchError, XrdException) as e:
            logger.debug("load_xrd_cached: %s failed: %s", url, e)
            react.error = DiscoveryError.not_found(url, e)
        except Exception as e:
            sentry_sdk.capture_exception(e)
            logger.exception("load_xrd_cached: unexpected error loading %s", url)
            react.error = DiscoveryError.not_found(url, e)
        return react

    async def fetch_cached(self, url: str) -> str:
        if self.cache is None:
            return await self.fetch(url)

        async def fetch_fn() -> str:
            return await self.fetch(url)

        return await self.cache.get_or_fetch(cache_key(url), self.cache_ttl, fetch_fn)

    async def fetch(self, url: str) -> str:
        logger.debug("fetch: GET %s", url)
        return await self.fetcher.fetch(url, dict(self.headers))
