"""Shared utilities and infrastructure.

This module contains common utilities used throughout the application.
"""

from __future__ import annotations

from acorn.utils.exceptions import (
    AcornError,
    ConfigurationError,
    DecodeError,
    TrackerError,
    ValidationError,
)
from acorn.utils.logging_config import get_logger, setup_logging

__all__ = [
    "AcornError",
    "ConfigurationError",
    "DecodeError",
    "TrackerError",
    "ValidationError",
    "get_logger",
    "setup_logging",
]
