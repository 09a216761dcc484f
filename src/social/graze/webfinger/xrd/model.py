"""XRD/JRD document model.

A single in-memory representation shared by both wire formats. Documents are
produced by a loader in one build pass and then read by the discovery engine
or written back out by a serializer.
"""

from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from social.graze.webfinger.xrd.errors import UnknownField

# Title key used by XRD for titles without xml:lang.
NO_LANGUAGE = "none"


class FieldAccess:
    """Whitelisted `obj["name"]` access to a model's public fields."""

    access_fields: ClassVar[Tuple[str, ...]] = ()

    def _check_field(self, key: str) -> None:
        if key not in self.access_fields:
            raise UnknownField.for_field(type(self).__name__, key)

    def __getitem__(self, key: str) -> Any:
        self._check_field(key)
        return getattr(self, key)

    def __setitem__(self, key: str, value: Any) -> None:
        self._check_field(key)
        setattr(self, key, value)


def filter_properties(
    properties: List["Property"], type: Optional[str] = None
) -> List["Property"]:
    if type is None:
        return list(properties)
    return [prop for prop in properties if prop.type == type]


class Property(FieldAccess, BaseModel):
    """
    A typed key/value pair attached to a document or a link.

    Properties are immutable; several properties may share a type.
    """

    model_config = ConfigDict(frozen=True)

    access_fields: ClassVar[Tuple[str, ...]] = ("type", "value")

    type: str = Field(min_length=1)
    value: Optional[str] = None

    def __init__(self, type: str, value: Optional[str] = None, **data: Any) -> None:
        super().__init__(type=type, value=value, **data)


class Link(FieldAccess, BaseModel):
    """
    A link to a related resource.

    Only one of `href` and `template` is meant to be populated; use
    `Link.create(..., is_template=True)` to place the target in `template`.
    `titles` maps a language tag to a title, the empty string meaning "no
    language".
    """

    model_config = ConfigDict(validate_assignment=True)

    access_fields: ClassVar[Tuple[str, ...]] = ("rel", "type", "href", "template")

    rel: Optional[str] = None
    type: Optional[str] = None
    href: Optional[str] = None
    template: Optional[str] = None
    titles: Dict[str, str] = Field(default_factory=dict)
    properties: List[Property] = Field(default_factory=list)

    @classmethod
    def create(
        cls,
        rel: Optional[str] = None,
        href: Optional[str] = None,
        type: Optional[str] = None,
        is_template: bool = False,
    ) -> "Link":
        if is_template:
            return cls(rel=rel, type=type, template=href)
        return cls(rel=rel, type=type, href=href)

    def get_title(self, lang: Optional[str] = None) -> Optional[str]:
        """
        Return the title for `lang`.

        Falls back to the title without a language, then to the first title
        that was added. Returns None when the link has no titles.
        """
        if len(self.titles) == 0:
            return None
        first = next(iter(self.titles.values()))
        if lang is None:
            return first
        if lang in self.titles:
            return self.titles[lang]
        if "" in self.titles:
            return self.titles[""]
        return first

    def set_title(self, lang: str, title: str) -> None:
        self.titles[lang] = title

    def get_properties(self, type: Optional[str] = None) -> List[Property]:
        return filter_properties(self.properties, type)


class Document(BaseModel):
    """
    An XRD (XML) or JRD (JSON) resource descriptor.

    Links and properties keep the order in which they were loaded and are
    never de-duplicated.
    """

    subject: Optional[str] = None
    aliases: List[str] = Field(default_factory=list)
    expires: Optional[datetime] = None
    id: Optional[str] = None
    properties: List[Property] = Field(default_factory=list)
    links: List[Link] = Field(default_factory=list)

    def __iter__(self) -> Iterator[Link]:  # type: ignore[override]
        return iter(self.links)

    def describes(self, uri: str) -> bool:
        """Check whether the document is about `uri` (its subject or one of its aliases)."""
        if self.subject == uri:
            return True
        return uri in self.aliases

    def get_all(
        self, rel: str, type: Optional[str] = None, type_fallback: bool = True
    ) -> List[Link]:
        """
        Return all links with relation `rel`.

        When `type` is given only links of that type are returned; if there
        are none and `type_fallback` is set, links of that relation without
        any type are returned instead.
        """
        links = [link for link in self.links if link.rel == rel]
        if type is None:
            return links

        typed = [link for link in links if link.type == type]
        if typed or not type_fallback:
            return typed
        return [link for link in links if link.type is None]

    def get(
        self, rel: str, type: Optional[str] = None, type_fallback: bool = True
    ) -> Optional[Link]:
        return next(iter(self.get_all(rel, type, type_fallback)), None)

    def get_properties(self, type: Optional[str] = None) -> List[Property]:
        return filter_properties(self.properties, type)

    def property_value(self, type: str) -> Optional[str]:
        prop = next(iter(self.get_properties(type)), None)
        if prop is None:
            return None
        return prop.value

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires is None:
            return False
        if now is None:
            now = datetime.now(timezone.utc)
        return self.expires < now

    def to(self, data_format: Any) -> str:
        # Imported here, the serializers import this module.
        from social.graze.webfinger.xrd.serializer import serialize

        return serialize(self, data_format)
