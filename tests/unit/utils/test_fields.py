"""Tests for typed dictionary field extraction."""

from __future__ import annotations

import pytest

pytestmark = [pytest.mark.unit, pytest.mark.core]

from acorn.utils.exceptions import (
    InvalidUtf8Error,
    InvalidValueError,
    MissingFieldError,
    WrongTypeError,
)
from acorn.utils.fields import (
    get_non_negative_int,
    get_optional_int,
    get_optional_utf8,
    get_required_bytes,
    get_required_dict,
    get_required_int,
    get_required_list,
    get_required_utf8,
    utf8_list,
)


class TestRequiredUtf8:
    """Tests for get_required_utf8."""

    def test_returns_text(self):
        assert get_required_utf8({b"name": b"ubuntu.iso"}, b"name") == "ubuntu.iso"

    def test_accepts_str_key(self):
        assert get_required_utf8({b"created by": b"mktorrent"}, "created by") == "mktorrent"

    def test_missing_key(self):
        with pytest.raises(MissingFieldError) as exc_info:
            get_required_utf8({}, b"announce")
        assert exc_info.value.field == "announce"

    def test_wrong_type(self):
        with pytest.raises(WrongTypeError) as exc_info:
            get_required_utf8({b"announce": 42}, b"announce")
        assert exc_info.value.field == "announce"
        assert exc_info.value.expected == "byte string"

    def test_invalid_utf8(self):
        with pytest.raises(InvalidUtf8Error) as exc_info:
            get_required_utf8({b"name": b"\xff\xfe"}, b"name")
        assert exc_info.value.field == "name"

    def test_non_ascii_text(self):
        assert get_required_utf8({b"name": "żółw".encode()}, b"name") == "żółw"


class TestOptionalUtf8:
    """Tests for get_optional_utf8."""

    def test_absent_is_none(self):
        assert get_optional_utf8({}, b"comment") is None

    def test_wrong_type_is_none(self):
        """A wrong-typed optional value is treated as absent."""
        assert get_optional_utf8({b"comment": [b"a"]}, b"comment") is None
        assert get_optional_utf8({b"comment": 7}, b"comment") is None

    def test_present(self):
        assert get_optional_utf8({b"comment": b"hello"}, b"comment") == "hello"

    def test_invalid_utf8_still_raises(self):
        with pytest.raises(InvalidUtf8Error):
            get_optional_utf8({b"comment": b"\xc3\x28"}, b"comment")


class TestIntegers:
    """Tests for integer helpers."""

    def test_required_int(self):
        assert get_required_int({b"interval": 1800}, b"interval") == 1800

    def test_required_int_missing(self):
        with pytest.raises(MissingFieldError):
            get_required_int({}, b"interval")

    def test_required_int_wrong_type(self):
        with pytest.raises(WrongTypeError) as exc_info:
            get_required_int({b"interval": b"1800"}, b"interval")
        assert exc_info.value.expected == "integer"

    def test_optional_int_absent(self):
        assert get_optional_int({}, b"complete") is None

    def test_optional_int_wrong_type_raises(self):
        with pytest.raises(WrongTypeError):
            get_optional_int({b"creation date": b"yesterday"}, b"creation date")

    def test_non_negative_rejects_negative(self):
        with pytest.raises(InvalidValueError) as exc_info:
            get_non_negative_int({b"length": -1}, b"length")
        assert exc_info.value.value == -1

    def test_non_negative_accepts_zero(self):
        assert get_non_negative_int({b"length": 0}, b"length") == 0

    def test_non_negative_optional_absent(self):
        assert get_non_negative_int({}, b"length", required=False) is None


class TestContainers:
    """Tests for bytes, dict and list helpers."""

    def test_required_bytes(self):
        assert get_required_bytes({b"pieces": b"\x00" * 20}, b"pieces") == b"\x00" * 20

    def test_required_bytes_wrong_type(self):
        with pytest.raises(WrongTypeError):
            get_required_bytes({b"pieces": 5}, b"pieces")

    def test_required_dict(self):
        assert get_required_dict({b"info": {}}, b"info") == {}

    def test_required_dict_wrong_type(self):
        with pytest.raises(WrongTypeError) as exc_info:
            get_required_dict({b"info": []}, b"info")
        assert exc_info.value.expected == "dictionary"

    def test_required_dict_missing(self):
        with pytest.raises(MissingFieldError):
            get_required_dict({}, b"info")

    def test_required_list(self):
        assert get_required_list({b"path": [b"a"]}, b"path") == [b"a"]

    def test_utf8_list(self):
        assert utf8_list([b"dir", b"file.txt"], "path") == ["dir", "file.txt"]

    def test_utf8_list_rejects_non_bytes(self):
        with pytest.raises(WrongTypeError):
            utf8_list([b"dir", 3], "path")

    def test_utf8_list_rejects_invalid_utf8(self):
        with pytest.raises(InvalidUtf8Error):
            utf8_list([b"\xff"], "path")
