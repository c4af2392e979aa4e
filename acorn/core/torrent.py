"""Runtime state for one torrent.

A ``Torrent`` wraps an immutable ``Metainfo`` with the identifiers and
transfer counters needed to announce to a tracker.
"""

from __future__ import annotations

import secrets
from pathlib import Path

from acorn.config.config import get_network_config
from acorn.core.metainfo import Metainfo
from acorn.utils.logging_config import get_logger

logger = get_logger(__name__)

PEER_ID_LENGTH = 20
DEFAULT_PEER_ID_PREFIX = "-AC0100-"


def generate_peer_id(prefix: str = DEFAULT_PEER_ID_PREFIX) -> bytes:
    """Generate a 20-byte peer ID: client prefix followed by random bytes."""
    prefix_bytes = prefix.encode("utf-8")[:PEER_ID_LENGTH]
    return prefix_bytes + secrets.token_bytes(PEER_ID_LENGTH - len(prefix_bytes))


def percent_encode(data: bytes) -> str:
    """Percent-encode every byte except ASCII letters and digits."""
    return "".join(
        chr(b) if chr(b).isascii() and chr(b).isalnum() else f"%{b:02X}"
        for b in data
    )


class Torrent:
    """A metainfo document plus derived identifiers and transfer counters."""

    def __init__(
        self,
        metainfo: Metainfo,
        peer_id: bytes | None = None,
        peer_id_prefix: str | None = None,
    ):
        """Initialize the torrent, computing the info-hash once.

        Args:
            metainfo: Decoded metainfo document
            peer_id: Explicit 20-byte peer ID; generated when omitted
            peer_id_prefix: Client prefix used when generating a peer ID;
                defaults to the configured ``network.peer_id_prefix``

        """
        if peer_id is not None and len(peer_id) != PEER_ID_LENGTH:
            msg = f"peer_id must be {PEER_ID_LENGTH} bytes, got {len(peer_id)}"
            raise ValueError(msg)

        self.metainfo = metainfo
        self._info_hash = metainfo.info.compute_info_hash()
        if peer_id is None:
            if peer_id_prefix is None:
                peer_id_prefix = get_network_config().peer_id_prefix
            peer_id = generate_peer_id(peer_id_prefix)
        self._peer_id = peer_id

        self.uploaded = 0
        self.downloaded = 0
        self.left = metainfo.info.metainfo_total_size_bytes()

        logger.debug(
            "Torrent '%s' ready, info hash %s", metainfo.info.name, self._info_hash.hex()
        )

    @classmethod
    def from_path(cls, path: str | Path, **kwargs) -> Torrent:
        """Load a ``.torrent`` file and wrap it."""
        return cls(Metainfo.from_path(path), **kwargs)

    @property
    def info_hash(self) -> bytes:
        """Raw 20-byte info-hash."""
        return self._info_hash

    @property
    def info_hash_hex(self) -> str:
        """Info-hash as 40 lowercase hex characters."""
        return self._info_hash.hex()

    @property
    def encoded_info_hash(self) -> str:
        """Info-hash percent-encoded for a tracker query string."""
        return percent_encode(self._info_hash)

    @property
    def peer_id(self) -> bytes:
        """Raw 20-byte peer ID sent to trackers."""
        return self._peer_id

    @property
    def encoded_peer_id(self) -> str:
        """Peer ID percent-encoded for a tracker query string."""
        return percent_encode(self._peer_id)

    @property
    def name(self) -> str:
        """Suggested name from the info dictionary."""
        return self.metainfo.info.name

    @property
    def total_size(self) -> int:
        """Total payload size in bytes."""
        return self.metainfo.info.metainfo_total_size_bytes()

    def update_progress(self, downloaded: int, uploaded: int) -> None:
        """Record transfer totals and recompute the bytes left."""
        if downloaded < 0 or uploaded < 0:
            msg = "Transfer counters must not be negative"
            raise ValueError(msg)
        self.downloaded = downloaded
        self.uploaded = uploaded
        self.left = max(0, self.total_size - downloaded)

    def mark_completed(self) -> None:
        """Record the whole payload as downloaded."""
        self.downloaded = self.total_size
        self.left = 0

    def __repr__(self) -> str:
        return f"Torrent(name={self.name!r}, info_hash={self.info_hash_hex})"


__all__ = ["DEFAULT_PEER_ID_PREFIX", "Torrent", "generate_peer_id", "percent_encode"]
