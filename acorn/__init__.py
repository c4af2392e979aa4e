"""acorn - BitTorrent metainfo and tracker response decoding."""

from __future__ import annotations

from acorn.core.metainfo import FileEntry, Info, Metainfo
from acorn.core.torrent import Torrent
from acorn.discovery.tracker import Peer, TrackerResponse

__version__ = "0.1.0"

__all__ = [
    "FileEntry",
    "Info",
    "Metainfo",
    "Peer",
    "Torrent",
    "TrackerResponse",
    "__version__",
]
