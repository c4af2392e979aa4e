"""Generic bencode value model.

Thin adapter over the ``bencode.py`` distribution (``bencodepy``). Values are
plain Python objects: ``int``, ``bytes``, ``list`` and ``dict`` with ``bytes``
keys. The typed decoders in this package only ever see this value tree.
"""

from __future__ import annotations

import re
from typing import Any, Union

import bencodepy

from acorn.utils.exceptions import BencodeError, EncodeError, TrailingDataError

BencodeValue = Union[int, bytes, list, dict]

# i<digits>e with no sign other than '-', no leading zeros and no "-0"
_INTEGER_PATTERN = re.compile(rb"i(0|-?[1-9][0-9]*)e")
_STRING_LENGTH_PATTERN = re.compile(rb"(0|[1-9][0-9]*):")


class _StrictDecoder(bencodepy.BencodeDecoder):
    """Decoder that rejects non-canonical integers and truncated strings."""

    def decode_int(self, x: bytes, f: int, **kwargs: Any) -> tuple[int, int]:
        match = _INTEGER_PATTERN.match(x, f)
        if match is None:
            msg = f"Non-canonical integer at offset {f}"
            raise ValueError(msg)
        return int(match.group(1)), match.end()

    def decode_string(self, x: bytes, f: int, kind: str = "value", **kwargs: Any) -> tuple[bytes, int]:
        match = _STRING_LENGTH_PATTERN.match(x, f)
        if match is None:
            msg = f"Invalid byte string length at offset {f}"
            raise ValueError(msg)
        start = match.end()
        end = start + int(match.group(1))
        if end > len(x):
            msg = f"Truncated byte string at offset {f}"
            raise ValueError(msg)
        return bytes(x[start:end]), end


_DECODER = _StrictDecoder()


def parse(data: bytes) -> tuple[BencodeValue, bytes]:
    """Parse one value from the front of ``data``.

    Returns:
        The decoded value and the unconsumed suffix of ``data``.

    Raises:
        BencodeError: If ``data`` does not start with a well-formed value.

    """
    if not data:
        msg = "Empty input: expected a bencoded value"
        raise BencodeError(msg)
    try:
        value, end = _DECODER.decode_func[data[0:1]](data, 0)
    except (IndexError, KeyError, TypeError, ValueError, bencodepy.BencodeDecodeError) as e:
        msg = f"Not a valid bencoded value: {e}"
        raise BencodeError(msg) from e
    return value, data[end:]


def decode(data: bytes) -> BencodeValue:
    """Decode ``data`` as exactly one bencoded value."""
    value, remaining = parse(data)
    if remaining:
        raise TrailingDataError(len(remaining))
    return value


def encode(value: Any) -> bytes:
    """Encode a value tree; dictionary keys are emitted in sorted byte order.

    Raises:
        EncodeError: If the tree holds a type bencode cannot represent.

    """
    try:
        return bencodepy.encode(value)
    except Exception as e:
        msg = f"Cannot bencode value of type {type(value).__name__}: {e}"
        raise EncodeError(msg) from e


__all__ = ["BencodeValue", "decode", "encode", "parse"]
