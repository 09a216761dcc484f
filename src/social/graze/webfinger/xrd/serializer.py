from typing import Dict, Type, Union

from social.graze.webfinger.xrd.detect import DataFormat
from social.graze.webfinger.xrd.errors import SerializeError
from social.graze.webfinger.xrd.json_codec import JsonSerializer
from social.graze.webfinger.xrd.model import Document
from social.graze.webfinger.xrd.xml_codec import XmlSerializer

SERIALIZERS: Dict[DataFormat, Type[Union[JsonSerializer, XmlSerializer]]] = {
    DataFormat.json: JsonSerializer,
    DataFormat.xml: XmlSerializer,
}


def parse_data_format(data_format: Union[DataFormat, str]) -> DataFormat:
    """Turn a DataFormat or a format name ("json", "xml") into a DataFormat.

    Raises:
        KeyError: if the name is not a known format
    """
    if isinstance(data_format, DataFormat):
        return data_format
    if isinstance(data_format, str):
        return DataFormat[data_format.strip().lower()]
    raise KeyError(data_format)


def serialize(document: Document, data_format: Union[DataFormat, str]) -> str:
    """Serialize `document` to JRD or XRD text.

    Raises:
        SerializeError: if there is no serializer for the format
    """
    try:
        serializer_class = SERIALIZERS[parse_data_format(data_format)]
    except KeyError as e:
        raise SerializeError.no_serializer(data_format) from e
    return serializer_class(document).serialize()
