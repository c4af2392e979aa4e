"""Tracker discovery: announce responses and the HTTP announce client."""

from __future__ import annotations

from acorn.discovery.tracker import (
    AnnounceEvent,
    AsyncTrackerClient,
    Peer,
    TrackerResponse,
    build_announce_url,
    parse_compact_ipv4_peers,
    parse_compact_ipv6_peers,
)

__all__ = [
    "AnnounceEvent",
    "AsyncTrackerClient",
    "Peer",
    "TrackerResponse",
    "build_announce_url",
    "parse_compact_ipv4_peers",
    "parse_compact_ipv6_peers",
]
