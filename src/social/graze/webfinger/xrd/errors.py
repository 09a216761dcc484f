"""XRD/JRD codec exceptions.

Every error raised while detecting, loading or serializing a document derives
from XrdException. Loader failures additionally carry a LoaderErrorCode so
callers that only care about the category can switch on it.
"""

from enum import IntEnum
from typing import Optional


class LoaderErrorCode(IntEnum):
    """Loader failure categories."""

    document_namespace = 100
    document_root = 101
    loading_error = 102
    unsupported_loader = 103
    opening_file_error = 104
    unknown_type = 105
    property_error = 106
    type_error = 107


class XrdException(Exception):
    """Base class for all codec errors."""


class LoaderException(XrdException):
    """
    Raised when a document cannot be detected, read or built.

    Subclasses narrow the failure down; the `code` attribute mirrors the
    subclass for callers that prefer to switch on a value.
    """

    code: LoaderErrorCode = LoaderErrorCode.loading_error

    def __init__(self, message: str, code: Optional[LoaderErrorCode] = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class UnknownFormat(LoaderException):
    """The content is neither JSON nor XML."""

    code = LoaderErrorCode.unknown_type

    @staticmethod
    def detection_failed() -> "UnknownFormat":
        return UnknownFormat("error-xrd-loader-1000 Detecting file type failed")


class UnknownType(UnknownFormat):
    """The format of a source could not be established for its source kind."""

    @staticmethod
    def wrong_source_type(detail: str = "") -> "UnknownType":
        return UnknownType(f"error-xrd-loader-1001 Wrong source type {detail}".rstrip())


class FileOpenError(LoaderException):
    code = LoaderErrorCode.opening_file_error

    @staticmethod
    def missing(path: str) -> "FileOpenError":
        return FileOpenError(
            f"error-xrd-loader-1002 Error loading XRD file: File does not exist: {path}"
        )

    @staticmethod
    def unreadable(path: str) -> "FileOpenError":
        return FileOpenError(
            f"error-xrd-loader-1003 Cannot open file to determine type: {path}"
        )


class LoadingError(LoaderException):
    """Raw input could not be parsed or does not have the expected shape."""

    code = LoaderErrorCode.loading_error

    @staticmethod
    def empty(kind: str) -> "LoadingError":
        return LoadingError(f"error-xrd-loader-1004 Error loading {kind}: string empty")

    @staticmethod
    def unreadable_file(kind: str, path: str) -> "LoadingError":
        return LoadingError(
            f"error-xrd-loader-1005 Error loading {kind} file: {path}"
        )

    @staticmethod
    def syntax(kind: str, detail: str) -> "LoadingError":
        return LoadingError(f"error-xrd-loader-1006 Error loading {kind}: {detail}")

    @staticmethod
    def bad_root(detail: str) -> "LoadingError":
        return LoadingError(
            f"error-xrd-loader-1007 Error loading XRD: {detail}",
            LoaderErrorCode.document_root,
        )

    @staticmethod
    def bad_namespace(namespace: str) -> "LoadingError":
        return LoadingError(
            f"error-xrd-loader-1008 Error loading XRD: unexpected namespace {namespace!r}",
            LoaderErrorCode.document_namespace,
        )

    @staticmethod
    def bad_expires(value: str) -> "LoadingError":
        return LoadingError(
            f"error-xrd-loader-1009 Error loading expiry date: {value!r}"
        )


class UnsupportedLoader(LoaderException):
    code = LoaderErrorCode.unsupported_loader

    @staticmethod
    def for_format(data_format: object) -> "UnsupportedLoader":
        return UnsupportedLoader(
            f"error-xrd-loader-1010 No loader for format {data_format!r}"
        )


class TypeMismatch(LoaderException):
    code = LoaderErrorCode.type_error

    @staticmethod
    def for_value(field: str, expected: str, value: object) -> "TypeMismatch":
        return TypeMismatch(
            f"error-xrd-loader-1011 {field} must be {expected}, "
            f"got {type(value).__name__}"
        )


class MissingRequiredAttribute(LoaderException):
    code = LoaderErrorCode.property_error

    @staticmethod
    def for_element(element: str, attribute: str) -> "MissingRequiredAttribute":
        return MissingRequiredAttribute(
            f"error-xrd-loader-1012 The {attribute!r} attribute is required "
            f"on {element} elements"
        )


class SerializeError(XrdException):
    @staticmethod
    def no_serializer(data_format: object) -> "SerializeError":
        return SerializeError(
            f"error-xrd-serializer-2000 No serializer for format {data_format!r}"
        )


class UnknownField(XrdException, AttributeError):
    """Dynamic access to a field the element does not define."""

    @staticmethod
    def for_field(element: str, field: str) -> "UnknownField":
        return UnknownField(
            f"error-xrd-model-3000 {element} has no field {field!r}"
        )
