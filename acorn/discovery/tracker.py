"""Tracker announce responses and the HTTP announce client.

This module decodes a tracker's bencoded announce reply into a typed
``TrackerResponse``. Trackers return peers either as a list of dictionaries
or in the compact binary form:

- ``peers``: 6 bytes per IPv4 peer (4-byte address, 2-byte port)
- ``peers6``: 18 bytes per IPv6 peer (16-byte address, 2-byte port)

All multi-byte values are big-endian. IPv6 peers always follow the peers
from the ``peers`` key.
"""

from __future__ import annotations

import asyncio
import ipaddress
import urllib.parse
from enum import Enum
from ipaddress import IPv4Address, IPv6Address
from typing import Any

import aiohttp
from pydantic import BaseModel, Field

from acorn.core.bencode import decode as bdecode
from acorn.core.torrent import Torrent
from acorn.models import NetworkConfig
from acorn.utils.exceptions import (
    InvalidCompactLengthError,
    InvalidIpAddressError,
    InvalidValueError,
    MissingFieldError,
    TrackerError,
    TrackerFailureError,
    WrongTypeError,
)
from acorn.utils.fields import (
    get_optional_int,
    get_optional_utf8,
    get_required_int,
    get_required_utf8,
)
from acorn.utils.logging_config import get_logger

logger = get_logger(__name__)

COMPACT_IPV4_PEER_LENGTH = 6
COMPACT_IPV6_PEER_LENGTH = 18
MAX_PORT = 0xFFFF


class Peer(BaseModel):
    """A peer returned by a tracker."""

    ip: IPv4Address | IPv6Address = Field(..., description="Peer IP address")
    peer_id: str = Field(default="", description="Peer ID, empty for compact peers")
    port: int = Field(..., ge=0, le=MAX_PORT, description="Peer port number")

    model_config = {"frozen": True}

    @classmethod
    def decode(cls, value: Any) -> Peer:
        """Build a ``Peer`` from one dictionary of a non-compact peer list."""
        if not isinstance(value, dict):
            raise WrongTypeError("peers", "list of dictionaries")

        raw_ip = get_required_utf8(value, b"ip")
        try:
            ip = ipaddress.ip_address(raw_ip)
        except ValueError as e:
            raise InvalidIpAddressError(raw_ip) from e

        peer_id = get_required_utf8(value, b"peer id")

        port = get_required_int(value, b"port")
        if not 0 <= port <= MAX_PORT:
            raise InvalidValueError("port", port, "must fit in 16 bits")

        return cls(ip=ip, peer_id=peer_id, port=port)

    def __str__(self) -> str:
        """Return ``host:port``, bracketing IPv6 hosts."""
        if self.ip.version == 6:
            return f"[{self.ip}]:{self.port}"
        return f"{self.ip}:{self.port}"


def _parse_compact_peers(data: bytes, record_length: int) -> list[Peer]:
    if len(data) % record_length != 0:
        raise InvalidCompactLengthError(record_length, len(data))

    address_length = record_length - 2
    peers = []
    for start in range(0, len(data), record_length):
        record = data[start : start + record_length]
        ip = ipaddress.ip_address(record[:address_length])
        port = int.from_bytes(record[address_length:], byteorder="big")
        peers.append(Peer(ip=ip, peer_id="", port=port))
    return peers


def parse_compact_ipv4_peers(data: bytes) -> list[Peer]:
    """Decode the compact IPv4 peer format (6 bytes per peer)."""
    return _parse_compact_peers(data, COMPACT_IPV4_PEER_LENGTH)


def parse_compact_ipv6_peers(data: bytes) -> list[Peer]:
    """Decode the compact IPv6 peer format (18 bytes per peer)."""
    return _parse_compact_peers(data, COMPACT_IPV6_PEER_LENGTH)


class TrackerResponse(BaseModel):
    """A decoded tracker announce response."""

    peers: list[Peer] = Field(default_factory=list, description="List of peers")
    interval: int = Field(..., description="Minimum re-announce delay in seconds")
    complete: int | None = Field(None, description="Number of seeders")
    incomplete: int | None = Field(None, description="Number of leechers")
    min_interval: int | None = Field(None, description="Hard minimum announce interval")
    tracker_id: str | None = Field(None, description="Tracker ID to echo back")
    warning_message: str | None = Field(None, description="Warning message")

    model_config = {"frozen": True}

    @classmethod
    def decode(cls, data: bytes) -> TrackerResponse:
        """Decode a raw announce response body.

        Raises:
            TrackerFailureError: The tracker reported a ``failure reason``.
            DecodeError: The body is not a valid announce response.

        """
        root = bdecode(data)
        if not isinstance(root, dict):
            raise WrongTypeError("tracker response", "dictionary")
        return cls.from_dict(root)

    @classmethod
    def from_dict(cls, d: dict[bytes, Any]) -> TrackerResponse:
        """Build a ``TrackerResponse`` from an already decoded dictionary."""
        if b"failure reason" in d:
            reason = get_optional_utf8(d, b"failure reason") or "unknown"
            raise TrackerFailureError(reason)

        interval = get_required_int(d, b"interval")
        complete = get_optional_int(d, b"complete")
        incomplete = get_optional_int(d, b"incomplete")

        if b"peers" not in d:
            raise MissingFieldError("peers")
        peers_value = d[b"peers"]
        if isinstance(peers_value, list):
            peers = [Peer.decode(entry) for entry in peers_value]
        elif isinstance(peers_value, bytes):
            peers = parse_compact_ipv4_peers(peers_value)
        else:
            raise WrongTypeError("peers", "list or byte string")

        if b"peers6" in d:
            peers6_value = d[b"peers6"]
            if not isinstance(peers6_value, bytes):
                raise WrongTypeError("peers6", "byte string")
            peers.extend(parse_compact_ipv6_peers(peers6_value))

        response = cls(
            peers=peers,
            interval=interval,
            complete=complete,
            incomplete=incomplete,
            min_interval=get_optional_int(d, b"min interval"),
            tracker_id=get_optional_utf8(d, b"tracker id"),
            warning_message=get_optional_utf8(d, b"warning message"),
        )
        if response.warning_message:
            logger.warning("Tracker warning: %s", response.warning_message)
        logger.debug(
            "Decoded tracker response: %d peers, interval %ds",
            len(response.peers),
            response.interval,
        )
        return response


class AnnounceEvent(str, Enum):
    """Announce ``event`` values; regular periodic announces send none."""

    STARTED = "started"
    COMPLETED = "completed"
    STOPPED = "stopped"


def build_announce_url(
    torrent: Torrent,
    port: int,
    event: AnnounceEvent | None = None,
    ip: str | None = None,
    announce_url: str | None = None,
) -> str:
    """Build the complete tracker GET URL for an announce.

    Args:
        torrent: Torrent being announced
        port: Client listening port
        event: Optional announce event
        ip: Optional address to report instead of the request source
        announce_url: Tracker URL, defaults to the metainfo ``announce``

    Returns:
        Complete tracker URL with query parameters

    """
    base_url = announce_url or torrent.metainfo.announce

    # Binary values are pre-encoded; urlencode would re-escape the '%'
    query = f"info_hash={torrent.encoded_info_hash}&peer_id={torrent.encoded_peer_id}"

    params: dict[str, str] = {
        "port": str(port),
        "uploaded": str(torrent.uploaded),
        "downloaded": str(torrent.downloaded),
        "left": str(torrent.left),
        "compact": "1",
    }
    if ip:
        params["ip"] = ip
    if event is not None:
        params["event"] = AnnounceEvent(event).value

    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{query}&{urllib.parse.urlencode(params)}"


class AsyncTrackerClient:
    """Async client that announces torrents to HTTP trackers."""

    def __init__(self, network_config: NetworkConfig | None = None):
        """Initialize the async tracker client.

        Args:
            network_config: Network settings; defaults are used when omitted

        """
        self.config = network_config or NetworkConfig()
        self.session: aiohttp.ClientSession | None = None

    async def start(self) -> None:
        """Open the HTTP session."""
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.tracker_timeout),
                headers={"User-Agent": self.config.user_agent},
            )
            logger.debug("Tracker client started")

    async def stop(self) -> None:
        """Close the HTTP session."""
        if self.session is not None:
            await self.session.close()
            self.session = None
            logger.debug("Tracker client stopped")

    async def __aenter__(self) -> AsyncTrackerClient:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    async def announce(
        self,
        torrent: Torrent,
        event: AnnounceEvent | None = None,
        announce_url: str | None = None,
    ) -> TrackerResponse:
        """Announce ``torrent`` and decode the tracker's reply.

        Raises:
            TrackerError: On transport failures or a non-200 status.
            DecodeError: If the reply body is malformed.

        """
        url = build_announce_url(
            torrent,
            port=self.config.listen_port,
            event=event,
            ip=self.config.announce_ip,
            announce_url=announce_url,
        )
        logger.info(
            "Announcing '%s' to %s (event=%s)",
            torrent.name,
            announce_url or torrent.metainfo.announce,
            AnnounceEvent(event).value if event else "none",
        )
        body = await self._make_request(url)
        return TrackerResponse.decode(body)

    async def _make_request(self, url: str) -> bytes:
        """Make async HTTP GET request to tracker."""
        if self.session is None:
            msg = "HTTP session not initialized"
            raise RuntimeError(msg)
        try:
            async with self.session.get(url) as response:
                if response.status != 200:
                    msg = f"HTTP {response.status}: {response.reason}"
                    raise TrackerError(msg, {"status": response.status})
                return await response.read()
        except aiohttp.ClientError as e:
            msg = f"Network error: {e}"
            raise TrackerError(msg) from e
        except asyncio.TimeoutError as e:
            msg = "Tracker request timed out"
            raise TrackerError(msg) from e


__all__ = [
    "AnnounceEvent",
    "AsyncTrackerClient",
    "Peer",
    "TrackerResponse",
    "build_announce_url",
    "parse_compact_ipv4_peers",
    "parse_compact_ipv6_peers",
]
