"""Typed lookups over decoded bencode dictionaries.

Each helper folds "missing key", "wrong type" and "invalid encoding" into the
``DecodeError`` family so the model decoders read as a flat list of fields.
"""

from __future__ import annotations

from typing import Any

from acorn.utils.exceptions import (
    InvalidUtf8Error,
    InvalidValueError,
    MissingFieldError,
    WrongTypeError,
)

Key = bytes | str


def _key_bytes(key: Key) -> bytes:
    return key.encode("utf-8") if isinstance(key, str) else key


def _key_name(key: Key) -> str:
    return key if isinstance(key, str) else key.decode("utf-8", errors="replace")


def _is_int(value: Any) -> bool:
    # bool is an int subclass but never comes out of the bencode decoder
    return isinstance(value, int) and not isinstance(value, bool)


def _to_utf8(value: bytes, key: Key) -> str:
    try:
        return value.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidUtf8Error(_key_name(key)) from e


def get_required_utf8(d: dict[bytes, Any], key: Key) -> str:
    """Return ``d[key]`` decoded as UTF-8 text.

    Raises:
        MissingFieldError: ``key`` is absent.
        WrongTypeError: the value is not a byte string.
        InvalidUtf8Error: the bytes are not valid UTF-8.

    """
    raw = _key_bytes(key)
    if raw not in d:
        raise MissingFieldError(_key_name(key))
    value = d[raw]
    if not isinstance(value, bytes):
        raise WrongTypeError(_key_name(key), "byte string")
    return _to_utf8(value, key)


def get_optional_utf8(d: dict[bytes, Any], key: Key) -> str | None:
    """Return ``d[key]`` as text, or ``None`` if absent or not a byte string.

    A present byte string that is not valid UTF-8 still raises
    ``InvalidUtf8Error``.
    """
    value = d.get(_key_bytes(key))
    if not isinstance(value, bytes):
        return None
    return _to_utf8(value, key)


def get_required_bytes(d: dict[bytes, Any], key: Key) -> bytes:
    """Return ``d[key]`` as raw bytes."""
    raw = _key_bytes(key)
    if raw not in d:
        raise MissingFieldError(_key_name(key))
    value = d[raw]
    if not isinstance(value, bytes):
        raise WrongTypeError(_key_name(key), "byte string")
    return value


def get_required_int(d: dict[bytes, Any], key: Key) -> int:
    """Return ``d[key]`` as an integer."""
    raw = _key_bytes(key)
    if raw not in d:
        raise MissingFieldError(_key_name(key))
    value = d[raw]
    if not _is_int(value):
        raise WrongTypeError(_key_name(key), "integer")
    return value


def get_optional_int(d: dict[bytes, Any], key: Key) -> int | None:
    """Return ``d[key]`` as an integer, or ``None`` if absent.

    Unlike ``get_optional_utf8``, a present value of the wrong type is an
    error.
    """
    if _key_bytes(key) not in d:
        return None
    return get_required_int(d, key)


def get_non_negative_int(d: dict[bytes, Any], key: Key, *, required: bool = True) -> int | None:
    """Return ``d[key]`` as an integer that must not be negative."""
    value = get_required_int(d, key) if required else get_optional_int(d, key)
    if value is not None and value < 0:
        raise InvalidValueError(_key_name(key), value, "must not be negative")
    return value


def get_required_dict(d: dict[bytes, Any], key: Key) -> dict[bytes, Any]:
    """Return ``d[key]`` as a dictionary."""
    raw = _key_bytes(key)
    if raw not in d:
        raise MissingFieldError(_key_name(key))
    value = d[raw]
    if not isinstance(value, dict):
        raise WrongTypeError(_key_name(key), "dictionary")
    return value


def get_required_list(d: dict[bytes, Any], key: Key) -> list[Any]:
    """Return ``d[key]`` as a list."""
    raw = _key_bytes(key)
    if raw not in d:
        raise MissingFieldError(_key_name(key))
    value = d[raw]
    if not isinstance(value, list):
        raise WrongTypeError(_key_name(key), "list")
    return value


def utf8_list(values: Any, field: str) -> list[str]:
    """Decode a list of byte strings such as a file ``path``."""
    if not isinstance(values, list):
        raise WrongTypeError(field, "list")
    result = []
    for item in values:
        if not isinstance(item, bytes):
            raise WrongTypeError(field, "list of byte strings")
        result.append(_to_utf8(item, field))
    return result


__all__ = [
    "get_non_negative_int",
    "get_optional_int",
    "get_optional_utf8",
    "get_required_bytes",
    "get_required_dict",
    "get_required_int",
    "get_required_list",
    "get_required_utf8",
    "utf8_list",
]
