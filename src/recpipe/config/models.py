"""Configuration data models.

This module defines dataclasses for recpipe configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ToolPathsConfig:
    """Explicit paths to external tools (None = search PATH)."""

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class ServerConfig:
    """Connection settings for the recording server API."""

    url: str = "http://localhost:8888"
    """Base URL of the EPGStation instance."""

    timeout_seconds: float = 30.0
    """Connect/read timeout for individual HTTP operations (1-3600)."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.url.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        if not 1 <= self.timeout_seconds <= 3600:
            raise ValueError(
                f"timeout_seconds must be between 1 and 3600, "
                f"got {self.timeout_seconds}"
            )


@dataclass
class EncoderConfig:
    """Settings for probing and encoding."""

    probe_timeout_seconds: float = 60.0
    """Upper bound for a single ffprobe run."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.probe_timeout_seconds <= 0:
            raise ValueError(
                f"probe_timeout_seconds must be positive, "
                f"got {self.probe_timeout_seconds}"
            )


@dataclass
class ProgressConfig:
    """Settings for progress channels created by the CLI."""

    capacity: int = 16
    """Number of snapshots buffered before new ones are dropped."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {self.capacity}")


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class RecPipeConfig:
    """Top-level recpipe configuration."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    encoder: EncoderConfig = field(default_factory=EncoderConfig)
    progress: ProgressConfig = field(default_factory=ProgressConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
