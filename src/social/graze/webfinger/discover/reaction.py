"""Discovery results.

A Reaction is the document the discovery engine ended up with, together with
where it came from, whether the whole chain was fetched over HTTPS, and the
error that stopped discovery, if any. Discovery never raises; callers inspect
`Reaction.error` instead.
"""

from enum import IntEnum
from typing import Dict, Optional

from pydantic import ConfigDict

from social.graze.webfinger.xrd.model import Document, Link

OPENID_PROVIDER_REL = "http://specs.openid.net/auth/2.0/provider"

# Short names for relations commonly found in WebFinger documents.
SHORT_RELS: Dict[str, str] = {
    "openid": OPENID_PROVIDER_REL,
    "profile": "http://webfinger.net/rel/profile-page",
    "avatar": "http://webfinger.net/rel/avatar",
    "hcard": "http://microformats.org/profile/hcard",
    "blog": "http://specs.openid.net/auth/2.0/blog",
    "updates": "http://schemas.google.com/g/2010#updates-from",
    "contacts": "http://portablecontacts.net/spec/1.0",
    "activity_outbox": "https://www.w3.org/ns/activitystreams#outbox",
}


class ErrorCode(IntEnum):
    """Discovery failure categories."""

    not_supported = 1
    not_found = 2
    no_host_meta = 3
    no_lrdd_link = 4
    no_lrdd = 5
    describe = 6
    nothing = 7


class DiscoveryError(Exception):
    """
    A discovery step failed.

    `cause` holds the lower level error (fetch or codec failure, or the
    discovery error of an earlier step) and is also chained as `__cause__`.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.code = code
        self.cause = cause
        self.__cause__ = cause

    @property
    def is_fatal(self) -> bool:
        return self.code != ErrorCode.describe

    @staticmethod
    def not_supported(identifier: str) -> "DiscoveryError":
        return DiscoveryError(
            f"error-discovery-5000 Identifier not supported: {identifier}",
            ErrorCode.not_supported,
        )

    @staticmethod
    def not_found(url: str, cause: BaseException) -> "DiscoveryError":
        return DiscoveryError(
            f"error-discovery-5001 Error loading XRD file: {url}",
            ErrorCode.not_found,
            cause,
        )

    @staticmethod
    def no_host_meta(host: str, cause: Optional[BaseException]) -> "DiscoveryError":
        return DiscoveryError(
            f"error-discovery-5002 No .well-known/host-meta file found on {host}",
            ErrorCode.no_host_meta,
            cause,
        )

    @staticmethod
    def no_lrdd_link(host: str) -> "DiscoveryError":
        return DiscoveryError(
            f"error-discovery-5003 No lrdd link in host-meta for {host}",
            ErrorCode.no_lrdd_link,
        )

    @staticmethod
    def no_lrdd(cause: Optional[BaseException]) -> "DiscoveryError":
        return DiscoveryError(
            "error-discovery-5004 LRDD file not found", ErrorCode.no_lrdd, cause
        )

    @staticmethod
    def does_not_describe(account: str, subject: Optional[str]) -> "DiscoveryError":
        return DiscoveryError(
            f'error-discovery-5005 Webfinger file is not about "{account}" but "{subject}"',
            ErrorCode.describe,
        )

    @staticmethod
    def nothing(cause: Optional[BaseException]) -> "DiscoveryError":
        return DiscoveryError(
            "error-discovery-5006 No webfinger data found", ErrorCode.nothing, cause
        )


class Reaction(Document):
    """
    The outcome of fingering an identifier.

    Attributes:
        url: URL the document was loaded from (the identifier itself when
            discovery stopped before any fetch)
        secure: True when every document in the chain came over HTTPS and
            the result describes the requested identifier
        error: The error that ended discovery, None on success
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    url: Optional[str] = None
    secure: bool = True
    error: Optional[DiscoveryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def short(self, name: str) -> Optional[Link]:
        """Return the first link for a short relation name such as "openid"."""
        rel = SHORT_RELS.get(name)
        if rel is None:
            return None
        return self.get(rel)

    def short_href(self, name: str) -> Optional[str]:
        link = self.short(name)
        if link is None:
            return None
        return link.href

    @property
    def openid(self) -> Optional[str]:
        return self.short_href("openid")

    @property
    def profile(self) -> Optional[str]:
        return self.short_href("profile")
