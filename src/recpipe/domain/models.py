"""Domain models for recpipe.

Probe results are transient and live for a single encode call. Progress
snapshots are immutable so they can be handed to a receiver without the
producer keeping a reference.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NewType

from .enums import CodecType

RecordId = NewType("RecordId", int)
"""Server-assigned identifier of a recording entry."""

VideoFileId = NewType("VideoFileId", int)
"""Server-assigned identifier of a file attached to a recording."""


@dataclass(frozen=True)
class StreamInfo:
    """One elementary stream in a source file."""

    index: int
    """0-based position of the stream in the probe output."""

    codec_type: CodecType

    channels: int | None = None
    """Channel count, only meaningful for audio streams."""


@dataclass(frozen=True)
class MediaDescription:
    """Probed metadata of a source file."""

    duration_seconds: float | None
    """Container duration, None when absent or unparsable."""

    streams: tuple[StreamInfo, ...] = ()

    def __post_init__(self) -> None:
        if self.duration_seconds is not None and self.duration_seconds < 0:
            raise ValueError(
                f"duration_seconds must be non-negative, got {self.duration_seconds}"
            )

    @property
    def audio_streams(self) -> tuple[StreamInfo, ...]:
        """Audio streams in index order."""
        return tuple(s for s in self.streams if s.codec_type is CodecType.AUDIO)


@dataclass(frozen=True)
class EncodeProgress:
    """Point-in-time snapshot of transcode progress, in whole seconds."""

    current_secs: int
    total_secs: int

    @property
    def fraction(self) -> float:
        """Completed fraction in [0.0, 1.0], 0.0 when the total is unknown."""
        if self.total_secs <= 0:
            return 0.0
        return min(1.0, self.current_secs / self.total_secs)


@dataclass(frozen=True)
class TransferProgress:
    """Point-in-time snapshot of byte transfer progress."""

    current_bytes: int
    total_bytes: int

    @property
    def fraction(self) -> float:
        """Completed fraction in [0.0, 1.0], 0.0 for an empty transfer."""
        if self.total_bytes <= 0:
            return 0.0
        return min(1.0, self.current_bytes / self.total_bytes)
