"""Pytest configuration and shared fixtures for acorn tests."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from acorn.config import reset_config


def pytest_configure(config):
    """Register all project markers to avoid warnings when ini isn't loaded."""
    markers = [
        ("unit", "marks tests as unit tests"),
        ("core", "marks tests as core functionality tests"),
        ("tracker", "marks tests as tracker tests"),
        ("config", "marks tests as configuration tests"),
        ("logging", "marks tests as logging tests"),
        ("property", "marks tests as property-based tests"),
    ]
    for name, desc in markers:
        config.addinivalue_line("markers", f"{name}: {desc}")


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Clean up logging handlers after each test to prevent closed file errors."""
    yield
    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        logger = logging.getLogger(logger_name)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)


@pytest.fixture(autouse=True)
def cleanup_global_config():
    """Drop the global configuration between tests."""
    yield
    reset_config()


@pytest.fixture
def single_file_info() -> dict[bytes, Any]:
    """Decoded ``info`` dictionary of a single-file torrent."""
    return {
        b"name": b"test_file.txt",
        b"length": 12345,
        b"piece length": 16384,
        b"pieces": b"x" * 40,
    }


@pytest.fixture
def multi_file_info() -> dict[bytes, Any]:
    """Decoded ``info`` dictionary of a multi-file torrent."""
    return {
        b"name": b"TestDirectory",
        b"piece length": 32768,
        b"pieces": b"y" * 60,
        b"files": [
            {b"length": 100, b"path": [b"file1.txt"]},
            {b"length": 250, b"path": [b"subdir", b"file2.txt"]},
        ],
    }


@pytest.fixture
def metainfo_dict(single_file_info) -> dict[bytes, Any]:
    """Decoded root dictionary of a minimal valid metainfo document."""
    return {
        b"announce": b"http://tracker.example.com:6969/announce",
        b"info": single_file_info,
    }
