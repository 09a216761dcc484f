"""Loader base class.

A loader reads one document source (a literal string or a file) in one wire
format and builds a Document from it. Each loader instance is bound to the
document it populates.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
from typing import Any, List, Optional

from social.graze.webfinger.xrd.detect import DataFormat, SourceKind
from social.graze.webfinger.xrd.errors import TypeMismatch, UnknownType
from social.graze.webfinger.xrd.model import Document

logger = logging.getLogger(__name__)


@dataclass
class SkippedProperty:
    """A property that was left out of a link because it could not be built."""

    link_rel: Optional[str]
    reason: str


class Loader(ABC):
    """
    Base class for format specific loaders.

    Subclasses parse raw input in `load_from_string`/`load_from_file` and
    translate the parsed structure in `build`. Every entry point returns the
    bound document.
    """

    data_format: DataFormat

    def __init__(
        self,
        document: Optional[Document] = None,
        source_kind: SourceKind = SourceKind.literal,
    ) -> None:
        self._document: Optional[Document] = None
        self.document = document if document is not None else Document()
        self.source_kind = source_kind
        self.skipped: List[SkippedProperty] = []

    @property
    def document(self) -> Document:
        assert self._document is not None
        return self._document

    @document.setter
    def document(self, value: Any) -> None:
        if not isinstance(value, Document):
            raise TypeMismatch.for_value("document", "a Document", value)
        # The document type is fixed by the first binding.
        if self._document is not None and not isinstance(value, type(self._document)):
            raise TypeMismatch.for_value(
                "document", f"a {type(self._document).__name__}", value
            )
        self._document = value

    @property
    def source_kind(self) -> SourceKind:
        return self._source_kind

    @source_kind.setter
    def source_kind(self, value: Any) -> None:
        if isinstance(value, bool) or value not in tuple(SourceKind):
            raise UnknownType.wrong_source_type(repr(value))
        self._source_kind = SourceKind(value)

    def load(self, source: str) -> Document:
        """Load `source` according to the loader's source kind."""
        if self.source_kind == SourceKind.file:
            return self.load_from_file(source)
        return self.load_from_string(source)

    @abstractmethod
    def load_from_string(self, content: str) -> Document:
        pass

    @abstractmethod
    def load_from_file(self, path: str) -> Document:
        pass

    @abstractmethod
    def build(self, parsed: Any) -> Document:
        pass

    def skip_property(self, link_rel: Optional[str], reason: str) -> None:
        logger.warning("Skipping property of link %r: %s", link_rel, reason)
        self.skipped.append(SkippedProperty(link_rel=link_rel, reason=reason))
