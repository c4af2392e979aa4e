"""Core BitTorrent metainfo handling.

This module contains:
- Bencode value adapter (parsing/encoding)
- Metainfo document model and info-hash computation
- Torrent session value
"""

from __future__ import annotations

from acorn.core.bencode import decode, encode, parse
from acorn.core.metainfo import FileEntry, Info, Metainfo
from acorn.core.torrent import Torrent, generate_peer_id

__all__ = [
    "FileEntry",
    "Info",
    "Metainfo",
    "Torrent",
    "decode",
    "encode",
    "generate_peer_id",
    "parse",
]
