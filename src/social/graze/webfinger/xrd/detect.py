"""Wire format detection for XRD/JRD sources.

Detection looks at the content itself, never at file names or HTTP headers.
"""

from enum import IntEnum

from social.graze.webfinger.xrd.errors import FileOpenError, UnknownFormat

# Number of bytes read from a file to decide on its format.
FILE_PREFIX_SIZE = 10


class DataFormat(IntEnum):
    """Supported document wire formats."""

    json = 1
    xml = 2


class SourceKind(IntEnum):
    """Whether a loader source is the document itself or a path to it."""

    literal = 0
    file = 1


def detect_format(content: str) -> DataFormat:
    """Detect the format of a literal document.

    JSON documents start with `{`, XML documents with an `<?xml` declaration.
    Leading whitespace and a byte order mark are ignored.

    Raises:
        UnknownFormat: if the content is neither
    """
    stripped = content.lstrip("\ufeff \t\r\n")
    if stripped.startswith("{"):
        return DataFormat.json
    if stripped.startswith("<?xml"):
        return DataFormat.xml
    raise UnknownFormat.detection_failed()


def detect_file_format(path: str) -> DataFormat:
    """Detect the format of a document stored in a file.

    Raises:
        FileOpenError: if the file does not exist or cannot be read
        UnknownFormat: if the file content is neither JSON nor XML
    """
    try:
        with open(path, "rb") as fd:
            prefix = fd.read(FILE_PREFIX_SIZE)
    except FileNotFoundError as e:
        raise FileOpenError.missing(path) from e
    except (OSError, ValueError) as e:
        raise FileOpenError.unreadable(path) from e
    return detect_format(prefix.decode("utf-8", errors="ignore"))
