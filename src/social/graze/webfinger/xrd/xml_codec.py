"""XRD 1.0 (Extensible Resource Descriptor) loader and serializer.

See http://docs.oasis-open.org/xri/xrd/v1.0/xrd-1.0.html. Documents are
checked structurally (root element and namespace); XSD validation is not
performed.
"""

import logging
from typing import List, Optional, Union
import xml.etree.ElementTree as ET

from social.graze.webfinger.xrd.detect import DataFormat
from social.graze.webfinger.xrd.errors import LoadingError, MissingRequiredAttribute
from social.graze.webfinger.xrd.json_codec import format_expires, parse_expires
from social.graze.webfinger.xrd.loader import Loader
from social.graze.webfinger.xrd.model import NO_LANGUAGE, Document, Link, Property

logger = logging.getLogger(__name__)

NS_XRD = "http://docs.oasis-open.org/ns/xri/xrd-1.0"
NS_XML = "http://www.w3.org/XML/1998/namespace"
NS_XSI = "http://www.w3.org/2001/XMLSchema-instance"

XML_ID = f"{{{NS_XML}}}id"
XML_LANG = f"{{{NS_XML}}}lang"
XSI_NIL = f"{{{NS_XSI}}}nil"

LINK_ATTRIBUTES = ("rel", "href", "type", "template")


def split_tag(tag: str) -> tuple[Optional[str], str]:
    """Split a Clark notation tag into (namespace, local name)."""
    if tag[:1] == "{":
        namespace, local = tag[1:].split("}", 1)
        return namespace, local
    return None, tag


def element_text(element: ET.Element) -> str:
    return "".join(element.itertext())


class XmlLoader(Loader):
    data_format = DataFormat.xml

    def load_from_file(self, path: str) -> Document:
        try:
            with open(path, "rb") as fd:
                content = fd.read()
        except (OSError, ValueError) as e:
            raise LoadingError.unreadable_file("XRD", path) from e
        return self.build(self.parse(content))

    def load_from_string(self, content: str) -> Document:
        return self.build(self.parse(content))

    def parse(self, content: Union[str, bytes]) -> ET.Element:
        """Parse raw XML and check that it is an XRD document.

        Raises:
            LoadingError: on empty input, malformed XML or a non-XRD root
        """
        if content is None or len(content) == 0:
            raise LoadingError.empty("XRD")

        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise LoadingError.syntax("XRD", str(e)) from e

        namespace, local = split_tag(root.tag)
        if local != "XRD":
            raise LoadingError.bad_root(f"root element is {local!r}, expected 'XRD'")
        if namespace != NS_XRD:
            raise LoadingError.bad_namespace(namespace or "")
        return root

    def build(self, parsed: ET.Element) -> Document:
        document = self.document

        for element in parsed:
            _, name = split_tag(element.tag)
            if name == "Subject":
                document.subject = element_text(element).strip()
            elif name == "Alias":
                document.aliases.append(element_text(element).strip())
            elif name == "Expires":
                document.expires = parse_expires(element_text(element))
            elif name == "Link":
                document.links.append(self.build_link(element))
            elif name == "Property":
                document.properties.append(self.build_property(element))

        xml_id = parsed.get(XML_ID)
        if xml_id:
            document.id = xml_id

        return document

    def build_link(self, x_link: ET.Element) -> Link:
        link = Link()
        for attr in LINK_ATTRIBUTES:
            value = x_link.get(attr)
            if value:
                link[attr] = value

        for element in x_link:
            _, name = split_tag(element.tag)
            if name == "Title":
                link.titles.update(self.build_title(element))
            elif name == "Property":
                try:
                    link.properties.append(self.build_property(element))
                except MissingRequiredAttribute as e:
                    self.skip_property(link.rel, str(e))

        return link

    def build_title(self, x_title: ET.Element) -> dict[str, str]:
        lang = x_title.get(XML_LANG) or NO_LANGUAGE
        return {lang: element_text(x_title)}

    def build_property(self, x_property: ET.Element) -> Property:
        """Build a Property from its element.

        The type comes from the `name` attribute, or from the XRD 1.0 `type`
        attribute when `name` is missing.

        Raises:
            MissingRequiredAttribute: if the element has neither
        """
        name = x_property.get("name") or x_property.get("type")
        if not name:
            raise MissingRequiredAttribute.for_element("Property", "name")

        if x_property.get(XSI_NIL) == "true":
            return Property(name, None)
        return Property(name, element_text(x_property))


class XmlSerializer:
    data_format = DataFormat.xml

    def __init__(self, document: Document) -> None:
        self.document = document

    def to_element(self) -> ET.Element:
        document = self.document
        root = ET.Element("XRD", {"xmlns": NS_XRD})
        if document.id:
            root.set(XML_ID, document.id)

        if document.expires is not None:
            ET.SubElement(root, "Expires").text = format_expires(document.expires)
        if document.subject is not None:
            ET.SubElement(root, "Subject").text = document.subject
        for alias in document.aliases:
            ET.SubElement(root, "Alias").text = alias
        self.write_properties(root, document.properties)
        for link in document.links:
            self.write_link(root, link)

        return root

    def write_link(self, parent: ET.Element, link: Link) -> None:
        x_link = ET.SubElement(parent, "Link")
        for attr in ("rel", "type", "href"):
            if link[attr] is not None:
                x_link.set(attr, link[attr])
        if link.href is None and link.template is not None:
            x_link.set("template", link.template)

        for lang, title in link.titles.items():
            x_title = ET.SubElement(x_link, "Title")
            if lang and lang != NO_LANGUAGE:
                x_title.set(XML_LANG, lang)
            x_title.text = title

        self.write_properties(x_link, link.properties)

    def write_properties(self, parent: ET.Element, properties: List[Property]) -> None:
        for prop in properties:
            x_property = ET.SubElement(parent, "Property", {"type": prop.type})
            if prop.value is None:
                x_property.set(XSI_NIL, "true")
            else:
                x_property.text = prop.value

    def serialize(self) -> str:
        root = self.to_element()
        ET.indent(root)
        body = ET.tostring(root, encoding="unicode")
        return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"

    def __str__(self) -> str:
        return self.serialize()
