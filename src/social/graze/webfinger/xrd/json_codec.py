"""JRD (JSON Resource Descriptor) loader and serializer.

Implements the JSON profile used by WebFinger, RFC 7033 section 4.4.
"""

from datetime import datetime, timezone
import json
import logging
from typing import Any, Dict, List, Optional

from social.graze.webfinger.xrd.detect import DataFormat
from social.graze.webfinger.xrd.errors import LoadingError
from social.graze.webfinger.xrd.loader import Loader
from social.graze.webfinger.xrd.model import NO_LANGUAGE, Document, Link, Property

logger = logging.getLogger(__name__)

LINK_ATTRIBUTES = ("rel", "type", "href", "template")

# Title key for titles without a language, read back as "".
UNDEFINED_LANGUAGE = "und"

EXPIRES_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def parse_expires(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Raises:
        LoadingError: if the value is not a timestamp
    """
    try:
        parsed = datetime.fromisoformat(str(value).strip())
    except ValueError as e:
        raise LoadingError.bad_expires(str(value)) from e
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_expires(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(EXPIRES_FORMAT)


def stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


class JsonLoader(Loader):
    data_format = DataFormat.json

    def load_from_file(self, path: str) -> Document:
        try:
            with open(path, encoding="utf-8") as fd:
                content = fd.read()
        except (OSError, ValueError) as e:
            raise LoadingError.unreadable_file("JRD", path) from e
        return self.load_from_string(content)

    def load_from_string(self, content: str) -> Document:
        if content is None or content == "":
            raise LoadingError.empty("JRD")

        try:
            parsed = json.loads(content)
        except ValueError as e:
            raise LoadingError.syntax("JRD", str(e)) from e

        if not isinstance(parsed, dict):
            raise LoadingError.syntax(
                "JRD", f"expected an object, got {type(parsed).__name__}"
            )
        return self.build(parsed)

    def build(self, parsed: Dict[str, Any]) -> Document:
        document = self.document

        if parsed.get("subject") is not None:
            document.subject = stringify(parsed["subject"])

        aliases = parsed.get("aliases") or []
        if not isinstance(aliases, list):
            raise LoadingError.syntax("JRD", "aliases must be an array")
        for alias in aliases:
            document.aliases.append(stringify(alias))

        links = parsed.get("links") or []
        if not isinstance(links, list):
            raise LoadingError.syntax("JRD", "links must be an array")
        for json_link in links:
            document.links.append(self.build_link(json_link))

        self.build_properties(document.properties, parsed)

        if parsed.get("expires") is not None:
            document.expires = parse_expires(parsed["expires"])

        return document

    def build_properties(self, store: List[Property], parsed: Dict[str, Any]) -> None:
        """Append the `properties` object of `parsed` to `store`.

        Used for both document and link properties so the two parse the same
        way.
        """
        properties = parsed.get("properties")
        if not properties:
            return

        if not isinstance(properties, dict):
            raise LoadingError.syntax("JRD", "properties must be an object")

        for key, value in properties.items():
            if key == "":
                raise LoadingError.syntax("JRD", "property types must not be empty")
            store.append(Property(key, None if value is None else stringify(value)))

    def build_link(self, json_link: Dict[str, Any]) -> Link:
        if not isinstance(json_link, dict):
            raise LoadingError.syntax("JRD", "links must be objects")

        link = Link()
        for attr in LINK_ATTRIBUTES:
            if json_link.get(attr) is None:
                continue
            value = stringify(json_link[attr])
            if attr == "href":
                self.validate_href(value)
            link[attr] = value

        titles = json_link.get("titles") or {}
        if not isinstance(titles, dict):
            raise LoadingError.syntax("JRD", "titles must be an object")
        for lang, title in titles.items():
            if lang == UNDEFINED_LANGUAGE:
                lang = ""
            if lang not in link.titles:
                link.titles[lang] = stringify(title)

        self.build_properties(link.properties, json_link)
        return link

    def validate_href(self, href: str) -> None:
        """Hook for link target validation. Targets are accepted as-is."""


class JsonSerializer:
    data_format = DataFormat.json

    def __init__(self, document: Document) -> None:
        self.document = document

    def to_dict(self) -> Dict[str, Any]:
        document = self.document
        jrd: Dict[str, Any] = {}

        if document.subject is not None:
            jrd["subject"] = document.subject
        if document.aliases:
            jrd["aliases"] = list(document.aliases)
        if document.expires is not None:
            jrd["expires"] = format_expires(document.expires)
        if document.properties:
            jrd["properties"] = self.properties_dict(document.properties)
        if document.links:
            jrd["links"] = [self.link_dict(link) for link in document.links]

        return jrd

    def properties_dict(self, properties: List[Property]) -> Dict[str, Optional[str]]:
        # Later properties of the same type win, JSON objects have unique keys.
        return {prop.type: prop.value for prop in properties}

    def link_dict(self, link: Link) -> Dict[str, Any]:
        jrd_link: Dict[str, Any] = {}
        for attr in ("rel", "type", "href"):
            if link[attr] is not None:
                jrd_link[attr] = link[attr]
        if link.href is None and link.template is not None:
            jrd_link["template"] = link.template
        if link.titles:
            jrd_link["titles"] = {
                self.title_key(lang): title for lang, title in link.titles.items()
            }
        if link.properties:
            jrd_link["properties"] = self.properties_dict(link.properties)
        return jrd_link

    def title_key(self, lang: str) -> str:
        if lang in ("", NO_LANGUAGE):
            return UNDEFINED_LANGUAGE
        return lang

    def serialize(self) -> str:
        return json.dumps(self.to_dict())

    def __str__(self) -> str:
        return self.serialize()
