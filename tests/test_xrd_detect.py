"""
Unit tests for wire format detection in social.graze.webfinger.xrd.detect
"""

import pytest

from social.graze.webfinger.xrd.detect import (
    DataFormat,
    SourceKind,
    detect_file_format,
    detect_format,
)
from social.graze.webfinger.xrd.errors import (
    FileOpenError,
    LoaderErrorCode,
    UnknownFormat,
)


class TestDetectFormat:
    """Test suite for detect_format."""

    def test_enum_values(self):
        assert DataFormat.json == 1
        assert DataFormat.xml == 2
        assert SourceKind.literal == 0
        assert SourceKind.file == 1

    def test_json(self, jrd_profile):
        assert detect_format(jrd_profile) == DataFormat.json

    def test_xml(self, xrd_profile):
        assert detect_format(xrd_profile) == DataFormat.xml

    def test_leading_whitespace(self):
        assert detect_format('\n\t  {"subject": "x"}') == DataFormat.json
        assert detect_format("\r\n<?xml version='1.0'?><XRD/>") == DataFormat.xml

    def test_byte_order_mark(self):
        assert detect_format('\ufeff{"subject": "x"}') == DataFormat.json

    @pytest.mark.parametrize(
        "content",
        [
            "",
            "   ",
            "<XRD xmlns='http://docs.oasis-open.org/ns/xri/xrd-1.0'/>",
            "[1, 2]",
            "<?php echo 1;",
            "subject: acct:bob@example.org",
        ],
    )
    def test_unknown(self, content):
        """Test content that is neither JSON nor an XML document is rejected."""
        with pytest.raises(UnknownFormat) as exc_info:
            detect_format(content)
        assert exc_info.value.code == LoaderErrorCode.unknown_type


class TestDetectFileFormat:
    """Test suite for detect_file_format."""

    def test_json_file(self, jrd_file):
        assert detect_file_format(jrd_file) == DataFormat.json

    def test_xml_file(self, xrd_file):
        assert detect_file_format(xrd_file) == DataFormat.xml

    def test_unknown_file(self, text_file):
        with pytest.raises(UnknownFormat):
            detect_file_format(text_file)

    def test_missing_file(self, missing_file):
        with pytest.raises(FileOpenError) as exc_info:
            detect_file_format(missing_file)
        assert "does not exist" in str(exc_info.value)
        assert exc_info.value.code == LoaderErrorCode.opening_file_error

    def test_directory(self, tmp_path):
        """Test a path that cannot be read as a file."""
        with pytest.raises(FileOpenError):
            detect_file_format(str(tmp_path))
