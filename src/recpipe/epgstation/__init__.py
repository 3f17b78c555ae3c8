"""EPGStation recording server client.

This package provides the async API client used to list recordings and to
download and upload their video files.
"""

from recpipe.epgstation.client import EPGStationClient
from recpipe.epgstation.models import (
    Record,
    RecordedEndpointResponse,
    RecordedQuery,
    VideoFile,
    VideoFileProperty,
)

__all__ = [
    "EPGStationClient",
    "Record",
    "RecordedEndpointResponse",
    "RecordedQuery",
    "VideoFile",
    "VideoFileProperty",
]
