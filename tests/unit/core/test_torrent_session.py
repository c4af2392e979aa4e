"""Tests for the Torrent runtime wrapper."""

from __future__ import annotations

import pytest

pytestmark = [pytest.mark.unit, pytest.mark.core]

from acorn.config import set_config
from acorn.core.bencode import encode
from acorn.core.metainfo import Metainfo
from acorn.core.torrent import (
    DEFAULT_PEER_ID_PREFIX,
    Torrent,
    generate_peer_id,
    percent_encode,
)
from acorn.models import Config, NetworkConfig
from acorn.utils.exceptions import TorrentFileError


@pytest.fixture
def metainfo(metainfo_dict):
    return Metainfo.decode(encode(metainfo_dict))


@pytest.fixture(autouse=True)
def default_config():
    """Use built-in defaults instead of any acorn.toml or ACORN_* variables."""
    set_config(Config())


class TestPeerId:
    """Test cases for peer ID generation."""

    def test_default_prefix(self):
        peer_id = generate_peer_id()
        assert len(peer_id) == 20
        assert peer_id.startswith(DEFAULT_PEER_ID_PREFIX.encode())

    def test_custom_prefix(self):
        peer_id = generate_peer_id("-XX0001-")
        assert peer_id.startswith(b"-XX0001-")
        assert len(peer_id) == 20

    def test_overlong_prefix_is_truncated(self):
        assert generate_peer_id("A" * 30) == b"A" * 20

    def test_ids_are_random(self):
        assert generate_peer_id() != generate_peer_id()


class TestPercentEncode:
    """Test cases for percent_encode."""

    def test_alphanumerics_unchanged(self):
        assert percent_encode(b"abcXYZ019") == "abcXYZ019"

    def test_other_bytes_escaped(self):
        assert percent_encode(b"\x00\xff-._~ ") == "%00%FF%2D%2E%5F%7E%20"

    def test_high_bytes_are_not_treated_as_letters(self):
        """Latin-1 letters are outside ASCII and must be escaped."""
        assert percent_encode(b"\xe9") == "%E9"


class TestTorrent:
    """Test cases for Torrent."""

    def test_info_hash_matches_metainfo(self, metainfo):
        torrent = Torrent(metainfo)
        assert torrent.info_hash == metainfo.info.compute_info_hash()
        assert torrent.info_hash_hex == torrent.info_hash.hex()
        assert torrent.encoded_info_hash == percent_encode(torrent.info_hash)

    def test_initial_counters(self, metainfo):
        torrent = Torrent(metainfo)
        assert torrent.uploaded == 0
        assert torrent.downloaded == 0
        assert torrent.left == 12345
        assert torrent.total_size == 12345
        assert torrent.name == "test_file.txt"

    def test_explicit_peer_id(self, metainfo):
        peer_id = b"-TS0001-abcdefghijkl"
        torrent = Torrent(metainfo, peer_id=peer_id)
        assert torrent.peer_id == peer_id
        assert torrent.encoded_peer_id == "%2DTS0001%2Dabcdefghijkl"

    def test_peer_id_prefix(self, metainfo):
        torrent = Torrent(metainfo, peer_id_prefix="-ZZ9999-")
        assert torrent.peer_id.startswith(b"-ZZ9999-")

    def test_bad_peer_id_length(self, metainfo):
        with pytest.raises(ValueError, match="20 bytes"):
            Torrent(metainfo, peer_id=b"short")

    def test_update_progress(self, metainfo):
        torrent = Torrent(metainfo)
        torrent.update_progress(downloaded=1000, uploaded=50)
        assert torrent.downloaded == 1000
        assert torrent.uploaded == 50
        assert torrent.left == 11345

    def test_update_progress_clamps_left(self, metainfo):
        torrent = Torrent(metainfo)
        torrent.update_progress(downloaded=20000, uploaded=0)
        assert torrent.left == 0

    def test_update_progress_rejects_negative(self, metainfo):
        torrent = Torrent(metainfo)
        with pytest.raises(ValueError):
            torrent.update_progress(downloaded=-1, uploaded=0)

    def test_mark_completed(self, metainfo):
        torrent = Torrent(metainfo)
        torrent.mark_completed()
        assert torrent.left == 0
        assert torrent.downloaded == torrent.total_size

    def test_repr(self, metainfo):
        torrent = Torrent(metainfo)
        assert "test_file.txt" in repr(torrent)
        assert torrent.info_hash_hex in repr(torrent)

    def test_from_path(self, tmp_path, metainfo_dict):
        torrent_file = tmp_path / "session.torrent"
        torrent_file.write_bytes(encode(metainfo_dict))
        torrent = Torrent.from_path(torrent_file, peer_id=b"P" * 20)
        assert torrent.peer_id == b"P" * 20
        assert torrent.name == "test_file.txt"

    def test_from_path_missing(self, tmp_path):
        with pytest.raises(TorrentFileError):
            Torrent.from_path(tmp_path / "nope.torrent")


class TestConfiguredPeerIdPrefix:
    """Test cases for the configured peer ID prefix."""

    def test_default_config_prefix(self, metainfo):
        torrent = Torrent(metainfo)
        assert torrent.peer_id.startswith(DEFAULT_PEER_ID_PREFIX.encode())
        assert len(torrent.peer_id) == 20

    def test_configured_prefix_reaches_peer_id(self, metainfo):
        set_config(Config(network=NetworkConfig(peer_id_prefix="-QB4500-")))
        torrent = Torrent(metainfo)
        assert torrent.peer_id.startswith(b"-QB4500-")
        assert len(torrent.peer_id) == 20

    def test_configured_prefix_from_path(self, tmp_path, metainfo_dict):
        set_config(Config(network=NetworkConfig(peer_id_prefix="-TR3000-")))
        torrent_file = tmp_path / "configured.torrent"
        torrent_file.write_bytes(encode(metainfo_dict))
        assert Torrent.from_path(torrent_file).peer_id.startswith(b"-TR3000-")

    def test_explicit_prefix_overrides_config(self, metainfo):
        set_config(Config(network=NetworkConfig(peer_id_prefix="-QB4500-")))
        torrent = Torrent(metainfo, peer_id_prefix="-ZZ9999-")
        assert torrent.peer_id.startswith(b"-ZZ9999-")
