"""Pydantic configuration models for acorn.

Provides validated settings for the announce client and logging.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class NetworkConfig(BaseModel):
    """Network configuration used when announcing to trackers."""

    listen_port: int = Field(
        default=6881,
        ge=1,
        le=65535,
        description="Port reported to trackers",
    )
    announce_ip: str | None = Field(
        None,
        description="Optional IP address reported to trackers",
    )
    tracker_timeout: float = Field(
        default=30.0,
        gt=0.0,
        le=600.0,
        description="Tracker request timeout in seconds",
    )
    user_agent: str = Field(
        default="acorn/0.1.0",
        description="HTTP User-Agent sent to trackers",
    )
    peer_id_prefix: str = Field(
        default="-AC0100-",
        description="Azureus-style client prefix of generated peer IDs",
    )

    @field_validator("peer_id_prefix")
    @classmethod
    def validate_peer_id_prefix(cls, v: str) -> str:
        """Peer IDs are 20 bytes, so the prefix must leave room for randomness."""
        if not v or len(v.encode("utf-8")) > 20:
            msg = "peer_id_prefix must be between 1 and 20 bytes"
            raise ValueError(msg)
        return v


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Log level")
    log_file: str | None = Field(None, description="Log file path")
    structured_logging: bool = Field(
        default=False,
        description="Write JSON records to the log file",
    )
    log_correlation_id: bool = Field(
        default=True,
        description="Include correlation IDs",
    )


class Config(BaseModel):
    """Main configuration model."""

    network: NetworkConfig = Field(
        default_factory=NetworkConfig,
        description="Network configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )
