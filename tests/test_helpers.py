"""
Common testing utilities for the WebFinger tests.

Provides sample JRD/XRD documents, document builders and a scripted fetcher
that stands in for the network in discovery tests.
"""

from typing import Dict, List, Tuple, Union

from social.graze.webfinger.discover.fetch import FetchError
from social.graze.webfinger.xrd.model import Document


JRD_PROFILE = """{
    "subject": "acct:tchevengour@mamot.fr",
    "aliases": ["https://mamot.fr/@tchevengour", "https://mamot.fr/users/tchevengour"],
    "links": [
        {"rel": "http://webfinger.net/rel/profile-page", "type": "text/html", "href": "https://mamot.fr/@tchevengour"},
        {"rel": "salmon", "href": "https://mamot.fr/api/salmon/8828"}
    ],
    "properties": {"p1": "v1", "p2": "v2"}
}"""

XRD_PROFILE = """<?xml version="1.0" encoding="UTF-8"?>
<XRD xmlns="http://docs.oasis-open.org/ns/xri/xrd-1.0" xml:id="profile">
  <Expires>2030-01-01T00:00:00Z</Expires>
  <Subject>acct:bob@example.org</Subject>
  <Alias>https://example.org/~bob</Alias>
  <Alias>https://example.org/users/bob</Alias>
  <Property name="http://example.org/prop/one">one</Property>
  <Property name="http://example.org/prop/one">uno</Property>
  <Link rel="http://webfinger.net/rel/profile-page" type="text/html" href="https://example.org/~bob">
    <Title xml:lang="en">Profile</Title>
    <Title>Profil</Title>
    <Property name="http://example.org/prop/link">link value</Property>
  </Link>
  <Link rel="lrdd" type="application/xrd+xml" template="https://example.org/lrdd?uri={uri}"/>
</XRD>
"""

OPENID_LINK = '<Link rel="http://specs.openid.net/auth/2.0/provider" href="https://example.org/openid"/>'

LRDD_LINK = '<Link rel="lrdd" type="application/xrd+xml" template="https://example.org/lrdd?uri={uri}"/>'


def xrd(*children: str, namespace: str = "http://docs.oasis-open.org/ns/xri/xrd-1.0") -> str:
    """Wrap element strings in an XRD document."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<XRD xmlns="{namespace}">\n'
        + "\n".join(children)
        + "\n</XRD>\n"
    )


def user_xrd(subject: str) -> str:
    return xrd(
        f"<Subject>{subject}</Subject>",
        '<Link rel="http://webfinger.net/rel/profile-page" href="https://example.org/bob"/>',
    )


def user_jrd(subject: str, *aliases: str) -> str:
    aliases_json = ", ".join(f'"{alias}"' for alias in aliases)
    return (
        f'{{"subject": "{subject}", "aliases": [{aliases_json}], '
        '"links": [{"rel": "http://webfinger.net/rel/profile-page", '
        '"href": "https://example.org/bob"}]}'
    )


def link_rels(document: Document) -> List[str]:
    return [link.rel for link in document.links]


class ScriptedFetcher:
    """Fetcher returning canned bodies per URL; unknown URLs fail with a 404."""

    def __init__(self, responses: Dict[str, Union[str, Exception]]):
        self.responses = responses
        self.calls: List[Tuple[str, Dict[str, str]]] = []

    @property
    def urls(self) -> List[str]:
        return [url for url, _ in self.calls]

    async def fetch(self, url: str, headers: Dict[str, str]) -> str:
        self.calls.append((url, headers))
        response = self.responses.get(url)
        if response is None:
            raise FetchError.bad_status(url, 404, "Not Found")
        if isinstance(response, Exception):
            raise response
        return response
