"""
XRD / JRD Documents

This package reads and writes resource descriptors in both of their wire
formats and normalizes them into a single document model.

Key Components:
- model.py: Document, Link and Property
- detect.py: JSON/XML detection from content
- loader.py: Loader base class bound to a target document
- factory.py: Loader selection by explicit or detected format
- json_codec.py: JRD loader and serializer (RFC 7033)
- xml_codec.py: XRD 1.0 loader and serializer
- serializer.py: Serializer selection by format
- errors.py: Codec exceptions

Typical use:
    document = load_document(content)            # detects the format
    document = load_document(content, "json")    # explicit format
    text = serialize(document, DataFormat.xml)
"""

from social.graze.webfinger.xrd.detect import DataFormat, SourceKind
from social.graze.webfinger.xrd.factory import LoaderFactory, create_loader, load_document
from social.graze.webfinger.xrd.model import Document, Link, Property
from social.graze.webfinger.xrd.serializer import serialize

__all__ = [
    "DataFormat",
    "Document",
    "Link",
    "LoaderFactory",
    "Property",
    "SourceKind",
    "create_loader",
    "load_document",
    "serialize",
]
