"""Metainfo (.torrent) document model.

This module turns a decoded bencode tree into validated, immutable
``Metainfo`` / ``Info`` / ``FileEntry`` models and re-encodes ``Info`` in
canonical form to compute the info-hash required by the BitTorrent protocol.

Unknown keys are ignored at every level so that documents carrying extension
keys still decode. Because the info-hash is computed from a faithful
re-serialization of the known ``Info`` fields rather than the source bytes,
an ``Info`` dictionary with extension keys hashes differently from the raw
dictionary.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from acorn.core.bencode import decode as bdecode
from acorn.core.bencode import encode as bencode
from acorn.utils.exceptions import (
    ConflictingFieldsError,
    EncodeError,
    InfoHashError,
    MalformedAnnounceListError,
    TorrentFileError,
    UnsupportedEncodingError,
    WrongTypeError,
)
from acorn.utils.fields import (
    get_non_negative_int,
    get_optional_int,
    get_optional_utf8,
    get_required_bytes,
    get_required_dict,
    get_required_list,
    get_required_utf8,
    utf8_list,
)
from acorn.utils.logging_config import get_logger

logger = get_logger(__name__)

PIECE_HASH_LENGTH = 20


class FileEntry(BaseModel):
    """One file of a multi-file torrent."""

    length: int = Field(..., ge=0, description="File length in bytes")
    path: tuple[str, ...] = Field(..., description="Path segments, in order")

    model_config = {"frozen": True}

    @classmethod
    def decode(cls, value: Any) -> FileEntry:
        """Build a ``FileEntry`` from one element of ``info.files``."""
        if not isinstance(value, dict):
            raise WrongTypeError("files", "list of dictionaries")
        length = get_non_negative_int(value, b"length")
        path = tuple(utf8_list(get_required_list(value, b"path"), "path"))
        return cls(length=length, path=path)

    def to_bencode(self) -> dict[bytes, Any]:
        """Return the canonical bencode dictionary for this entry."""
        return {
            b"length": self.length,
            b"path": [segment.encode("utf-8") for segment in self.path],
        }


class Info(BaseModel):
    """The hashed ``info`` dictionary of a metainfo document."""

    name: str = Field(..., description="Suggested display or file name")
    piece_size: int = Field(..., ge=0, description="Bytes per piece")
    pieces: bytes = Field(..., description="Concatenated 20-byte piece hashes")
    private: bool | None = Field(None, description="Private flag (BEP 27)")
    source: str | None = Field(None, description="Source tag set by private trackers")

    # Mutually exclusive: single-file vs multi-file torrents
    length: int | None = Field(None, ge=0, description="Single-file length")
    files: tuple[FileEntry, ...] | None = Field(None, description="Multi-file entries")

    model_config = {"frozen": True}

    @classmethod
    def decode(cls, d: dict[bytes, Any]) -> Info:
        """Build an ``Info`` from the decoded ``info`` dictionary.

        Raises:
            DecodeError: On any missing, mistyped or conflicting field.

        """
        name = get_required_utf8(d, b"name")
        piece_size = get_non_negative_int(d, b"piece length")
        pieces = get_required_bytes(d, b"pieces")

        private_flag = get_optional_int(d, b"private")
        private = None if private_flag is None else private_flag != 0
        source = get_optional_utf8(d, b"source")

        length = get_non_negative_int(d, b"length", required=False)

        files = None
        if b"files" in d:
            raw_files = d[b"files"]
            if not isinstance(raw_files, list):
                raise WrongTypeError("files", "list")
            files = tuple(FileEntry.decode(entry) for entry in raw_files)

        if (length is None) == (files is None):
            raise ConflictingFieldsError("length", "files")

        return cls(
            name=name,
            piece_size=piece_size,
            pieces=pieces,
            private=private,
            source=source,
            length=length,
            files=files,
        )

    def total_piece_count(self) -> int:
        """Number of whole 20-byte hashes in ``pieces``."""
        return len(self.pieces) // PIECE_HASH_LENGTH

    def total_piece_size_bytes(self) -> int:
        """Bytes covered by all pieces at the nominal piece size."""
        return self.piece_size * self.total_piece_count()

    def metainfo_total_size_bytes(self) -> int:
        """Total payload size declared by the metainfo."""
        if self.files is not None:
            return sum(entry.length for entry in self.files)
        if self.length is not None:
            return self.length
        return 0

    def piece_hash(self, index: int) -> bytes:
        """Return the SHA-1 hash for a specific piece."""
        if index < 0 or index >= self.total_piece_count():
            msg = f"Invalid piece index: {index}"
            raise IndexError(msg)
        start = index * PIECE_HASH_LENGTH
        return self.pieces[start : start + PIECE_HASH_LENGTH]

    def to_bencode(self) -> dict[bytes, Any]:
        """Return the canonical ``info`` dictionary.

        Only known keys are emitted; ``private`` and ``source`` only when they
        were present in the source document.
        """
        d: dict[bytes, Any] = {}
        if self.files is not None:
            d[b"files"] = [entry.to_bencode() for entry in self.files]
        else:
            d[b"length"] = self.length
        d[b"name"] = self.name.encode("utf-8")
        d[b"piece length"] = self.piece_size
        d[b"pieces"] = self.pieces
        if self.private is not None:
            d[b"private"] = int(self.private)
        if self.source is not None:
            d[b"source"] = self.source.encode("utf-8")
        return d

    def canonical_encode(self) -> bytes:
        """Bencode ``to_bencode()`` with keys in byte-lexicographic order."""
        try:
            return bencode(self.to_bencode())
        except EncodeError as e:
            msg = f"Failed to encode info dictionary for '{self.name}': {e.message}"
            raise InfoHashError(msg) from e

    def compute_info_hash(self) -> bytes:
        """Return the raw 20-byte SHA-1 info-hash."""
        return hashlib.sha1(self.canonical_encode()).digest()  # nosec - BEP 3 requires SHA-1


def _decode_announce_list(value: Any) -> tuple[tuple[str, ...], ...]:
    if not isinstance(value, list):
        msg = "expected a list of tiers"
        raise MalformedAnnounceListError(msg)
    tiers = []
    for tier in value:
        if not isinstance(tier, list):
            msg = "every tier must be a list"
            raise MalformedAnnounceListError(msg)
        urls = []
        for url in tier:
            if not isinstance(url, bytes):
                msg = "every tracker URL must be a byte string"
                raise MalformedAnnounceListError(msg)
            try:
                urls.append(url.decode("utf-8"))
            except UnicodeDecodeError as e:
                msg = "tracker URL is not valid UTF-8"
                raise MalformedAnnounceListError(msg) from e
        tiers.append(tuple(urls))
    return tuple(tiers)


class Metainfo(BaseModel):
    """A decoded ``.torrent`` metainfo document."""

    announce: str = Field(..., description="Primary tracker URL")
    announce_list: tuple[tuple[str, ...], ...] | None = Field(
        None, description="Tiers of fallback tracker URLs (BEP 12)"
    )
    comment: str | None = Field(None, description="Free-form comment")
    created_by: str | None = Field(None, description="Creating program")
    created_on: int | None = Field(None, description="Creation time, seconds since epoch")
    encoding: str | None = Field(None, description="String encoding, always UTF-8")
    info: Info

    model_config = {"frozen": True}

    @classmethod
    def decode(cls, data: bytes) -> Metainfo:
        """Decode a complete metainfo document.

        Args:
            data: Raw ``.torrent`` bytes

        Returns:
            Validated Metainfo

        Raises:
            DecodeError: If the bytes are not exactly one valid metainfo
                dictionary.

        """
        root = bdecode(data)
        if not isinstance(root, dict):
            raise WrongTypeError("metainfo", "dictionary")
        metainfo = cls.from_dict(root)
        logger.debug(
            "Decoded metainfo '%s' (%d pieces, %d bytes)",
            metainfo.info.name,
            metainfo.info.total_piece_count(),
            metainfo.info.metainfo_total_size_bytes(),
        )
        return metainfo

    @classmethod
    def from_dict(cls, d: dict[bytes, Any]) -> Metainfo:
        """Build a ``Metainfo`` from an already decoded root dictionary."""
        announce = get_required_utf8(d, b"announce")

        announce_list = None
        if b"announce-list" in d:
            announce_list = _decode_announce_list(d[b"announce-list"])

        comment = get_optional_utf8(d, b"comment")
        created_by = get_optional_utf8(d, b"created by")
        created_on = get_optional_int(d, b"creation date")

        encoding = get_optional_utf8(d, b"encoding")
        if encoding is not None and encoding.lower() != "utf-8":
            raise UnsupportedEncodingError(encoding)

        info = Info.decode(get_required_dict(d, b"info"))

        return cls(
            announce=announce,
            announce_list=announce_list,
            comment=comment,
            created_by=created_by,
            created_on=created_on,
            encoding=encoding,
            info=info,
        )

    @classmethod
    def from_path(cls, path: str | Path) -> Metainfo:
        """Read and decode a ``.torrent`` file."""
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            msg = f"Failed to read torrent file: {path}"
            raise TorrentFileError(msg, {"path": str(path)}) from e
        logger.info("Parsing torrent file: %s", path)
        return cls.decode(data)

    def trackers(self) -> list[str]:
        """All tracker URLs, announce-list tiers first, without duplicates."""
        urls: list[str] = []
        for tier in self.announce_list or ():
            for url in tier:
                if url not in urls:
                    urls.append(url)
        if self.announce not in urls:
            urls.append(self.announce)
        return urls


__all__ = ["FileEntry", "Info", "Metainfo", "PIECE_HASH_LENGTH"]
