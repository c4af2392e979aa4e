"""Configuration management.

This module handles configuration loading and validation.
"""

from __future__ import annotations

from acorn.config.config import (
    Config,
    ConfigManager,
    get_config,
    get_network_config,
    get_observability_config,
    init_config,
    reset_config,
    set_config,
)

__all__ = [
    "Config",
    "ConfigManager",
    "get_config",
    "get_network_config",
    "get_observability_config",
    "init_config",
    "reset_config",
    "set_config",
]
