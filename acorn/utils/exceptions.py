"""Exception hierarchy for acorn.

Every decode path raises exactly one of the ``DecodeError`` subclasses below;
callers can catch the whole family or a specific kind.
"""

from __future__ import annotations

from typing import Any


class AcornError(Exception):
    """Base exception for all acorn errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize acorn error."""
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ValidationError(AcornError):
    """Data validation errors."""


class ConfigurationError(ValidationError):
    """Configuration validation errors."""


class DecodeError(ValidationError):
    """A metainfo document or tracker response failed to decode."""


class BencodeError(DecodeError):
    """The raw bytes are not a well-formed bencoded value."""


class MissingFieldError(DecodeError):
    """A required dictionary key is absent."""

    def __init__(self, field: str):
        """Initialize missing field error."""
        super().__init__(f"Missing field '{field}'", {"field": field})
        self.field = field


class WrongTypeError(DecodeError):
    """A value is present but of the wrong bencode type."""

    def __init__(self, field: str, expected: str):
        """Initialize wrong type error."""
        super().__init__(
            f"Field '{field}' must be a {expected}",
            {"field": field, "expected": expected},
        )
        self.field = field
        self.expected = expected


class InvalidUtf8Error(DecodeError):
    """A byte string that must be text is not valid UTF-8."""

    def __init__(self, field: str):
        """Initialize invalid UTF-8 error."""
        super().__init__(
            f"Field '{field}' must be a valid UTF-8 string", {"field": field}
        )
        self.field = field


class InvalidValueError(DecodeError):
    """An integer is outside the range its field allows."""

    def __init__(self, field: str, value: Any, reason: str):
        """Initialize invalid value error."""
        super().__init__(
            f"Field '{field}' has invalid value {value!r}: {reason}",
            {"field": field, "value": value},
        )
        self.field = field
        self.value = value


class MalformedStructureError(DecodeError):
    """A container has a shape the format does not allow."""

    def __init__(self, context: str, message: str | None = None):
        """Initialize malformed structure error."""
        super().__init__(message or f"Malformed '{context}'", {"context": context})
        self.context = context


class MalformedAnnounceListError(MalformedStructureError):
    """``announce-list`` is not a list of lists of strings."""

    def __init__(self, reason: str):
        """Initialize malformed announce-list error."""
        super().__init__("announce-list", f"Malformed 'announce-list': {reason}")


class ConflictingFieldsError(MalformedStructureError):
    """Exactly one of two mutually exclusive keys must be present."""

    def __init__(self, first: str, second: str):
        """Initialize conflicting fields error."""
        super().__init__(
            f"{first}/{second}",
            f"Exactly one of '{first}' or '{second}' must be present (not both or none)",
        )
        self.fields = (first, second)


class UnsupportedEncodingError(DecodeError):
    """The metainfo ``encoding`` key names something other than UTF-8."""

    def __init__(self, encoding: str):
        """Initialize unsupported encoding error."""
        super().__init__(
            f"Only UTF-8 encoding is supported; encountered '{encoding}'",
            {"encoding": encoding},
        )
        self.encoding = encoding


class TrailingDataError(DecodeError):
    """Bytes remain after the single top-level value."""

    def __init__(self, remaining: int):
        """Initialize trailing data error."""
        super().__init__(
            f"Erroneous data after the top-level value ({remaining} trailing bytes)",
            {"remaining": remaining},
        )
        self.remaining = remaining


class InvalidCompactLengthError(DecodeError):
    """A compact peer string is not a whole number of records."""

    def __init__(self, expected_multiple: int, actual: int):
        """Initialize invalid compact length error."""
        super().__init__(
            f"Incomplete compact peer list: length {actual} is not divisible "
            f"by {expected_multiple}",
            {"expected_multiple": expected_multiple, "actual": actual},
        )
        self.expected_multiple = expected_multiple
        self.actual = actual


class InvalidIpAddressError(DecodeError):
    """A peer ``ip`` value is not a parseable IPv4 or IPv6 address."""

    def __init__(self, raw: str):
        """Initialize invalid IP address error."""
        super().__init__(f"Invalid IP address: {raw!r}", {"raw": raw})
        self.raw = raw


class TorrentFileError(AcornError):
    """A torrent file could not be read from storage."""


class EncodeError(AcornError):
    """A value tree could not be bencoded."""


class InfoHashError(EncodeError):
    """The canonical info dictionary could not be encoded.

    Only raised when an internal invariant is broken, never for bad input.
    """


class NetworkError(AcornError):
    """Network-related errors."""


class TrackerError(NetworkError):
    """Tracker communication errors."""


class TrackerFailureError(TrackerError):
    """The tracker answered with a ``failure reason``."""

    def __init__(self, reason: str):
        """Initialize tracker failure error."""
        super().__init__(f"Tracker failure: {reason}", {"reason": reason})
        self.reason = reason
