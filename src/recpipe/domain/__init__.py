"""Domain models and enums for recpipe.

This package contains core domain types shared by the encoder and the
transfer client:

- Probe results: MediaDescription, StreamInfo
- Progress snapshots: EncodeProgress, TransferProgress
- Identifiers: RecordId, VideoFileId
- Domain enums: CodecType

Usage:
    from recpipe.domain import MediaDescription, StreamInfo, CodecType
"""

from .enums import CodecType
from .models import (
    EncodeProgress,
    MediaDescription,
    RecordId,
    StreamInfo,
    TransferProgress,
    VideoFileId,
)

__all__ = [
    # Models
    "EncodeProgress",
    "MediaDescription",
    "RecordId",
    "StreamInfo",
    "TransferProgress",
    "VideoFileId",
    # Enums
    "CodecType",
]
