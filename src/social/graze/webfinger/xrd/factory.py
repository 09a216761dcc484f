"""Loader selection.

Picks the loader class for an explicit or detected wire format and binds it
to the target document.
"""

import logging
from typing import Dict, Optional, Tuple, Type, Union

from social.graze.webfinger.xrd.detect import (
    DataFormat,
    SourceKind,
    detect_file_format,
    detect_format,
)
from social.graze.webfinger.xrd.errors import (
    LoaderException,
    UnknownFormat,
    UnknownType,
    UnsupportedLoader,
)
from social.graze.webfinger.xrd.json_codec import JsonLoader
from social.graze.webfinger.xrd.loader import Loader
from social.graze.webfinger.xrd.model import Document
from social.graze.webfinger.xrd.serializer import parse_data_format
from social.graze.webfinger.xrd.xml_codec import XmlLoader

logger = logging.getLogger(__name__)

LOADERS: Dict[DataFormat, Type[Loader]] = {
    DataFormat.json: JsonLoader,
    DataFormat.xml: XmlLoader,
}


class LoaderFactory:
    """
    Creates loaders for document sources.

    When no format is given it is detected from the source. With no source
    kind either, the source is first tried as a literal document and only then
    as a file path, so a string that is a valid document is never looked up on
    disk.
    """

    def __init__(self, loaders: Optional[Dict[DataFormat, Type[Loader]]] = None):
        self.loaders = dict(LOADERS if loaders is None else loaders)

    def create(
        self,
        document: Document,
        source: str,
        data_format: Union[DataFormat, str, None] = None,
        source_kind: Optional[SourceKind] = None,
    ) -> Loader:
        """
        Create a loader bound to `document` for `source`.

        Raises:
            UnsupportedLoader: if there is no loader for the format
            UnknownType: if the format has to be detected and detection fails
            FileOpenError: if a file source cannot be read for detection
        """
        if data_format is None:
            data_format, source_kind = self.guess_data_format(source, source_kind)
        elif source_kind is None:
            source_kind = SourceKind.literal

        try:
            loader_class = self.loaders[parse_data_format(data_format)]
        except KeyError as e:
            raise UnsupportedLoader.for_format(data_format) from e

        return loader_class(document, source_kind)

    def guess_data_format(
        self, source: str, source_kind: Optional[SourceKind] = None
    ) -> Tuple[DataFormat, SourceKind]:
        """
        Detect the format of `source` for the given source kind.

        Raises:
            UnknownType: if the format cannot be detected
            FileOpenError: if `source_kind` is file and the file cannot be read
        """
        if source_kind == SourceKind.literal:
            try:
                return detect_format(source), SourceKind.literal
            except UnknownFormat as e:
                raise UnknownType.wrong_source_type("(literal)") from e

        if source_kind == SourceKind.file:
            try:
                return detect_file_format(source), SourceKind.file
            except UnknownFormat as e:
                raise UnknownType.wrong_source_type("(file)") from e

        if source_kind is not None:
            raise UnknownType.wrong_source_type(repr(source_kind))

        try:
            return detect_format(source), SourceKind.literal
        except UnknownFormat:
            logger.debug("Source is not a literal document, trying it as a file")

        try:
            return detect_file_format(source), SourceKind.file
        except LoaderException as e:
            raise UnknownType.wrong_source_type() from e


def create_loader(
    document: Document,
    source: str,
    data_format: Union[DataFormat, str, None] = None,
    source_kind: Optional[SourceKind] = None,
) -> Loader:
    return LoaderFactory().create(document, source, data_format, source_kind)


def load_document(
    source: str,
    data_format: Union[DataFormat, str, None] = None,
    source_kind: Optional[SourceKind] = None,
) -> Document:
    """Load a new Document from a literal or a file."""
    document = Document()
    return create_loader(document, source, data_format, source_kind).load(source)
