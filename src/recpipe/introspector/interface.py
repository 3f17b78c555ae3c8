"""MediaProbe interface for source metadata extraction."""

from pathlib import Path
from typing import Protocol

from recpipe.domain.models import MediaDescription


class MediaProbe(Protocol):
    """Protocol for media probing implementations.

    Implementations return the container duration and per-stream
    classification for a source file. Tests substitute fakes so no real
    subprocess is started.
    """

    async def probe(self, path: Path) -> MediaDescription:
        """Extract metadata from a video file.

        Args:
            path: Path to the video file.

        Returns:
            MediaDescription of the file.

        Raises:
            MediaProbeError: If the file cannot be probed.
        """
        ...
