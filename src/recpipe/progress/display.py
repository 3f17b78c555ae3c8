"""Terminal rendering of progress snapshots for CLI commands."""

from __future__ import annotations

import sys
from typing import TextIO

from recpipe.core.formatting import format_duration, format_file_size
from recpipe.domain.models import EncodeProgress, TransferProgress
from recpipe.progress.channel import ProgressChannel


def format_progress(value: EncodeProgress | TransferProgress) -> str:
    """Render a snapshot as a one-line status.

    Args:
        value: Encode or transfer snapshot.

    Returns:
        Text such as "42.0% (0:01:03 / 0:02:30)".
    """
    percent = value.fraction * 100
    if isinstance(value, EncodeProgress):
        current = format_duration(value.current_secs)
        total = format_duration(value.total_secs)
    else:
        current = format_file_size(value.current_bytes)
        total = format_file_size(value.total_bytes)
    return f"{percent:5.1f}% ({current} / {total})"


class StderrProgressDisplay:
    """Writes in-place progress lines to stderr.

    Reads snapshots from a ProgressChannel until it is closed. A slow
    terminal only causes the producer to drop snapshots, never to wait.
    """

    def __init__(
        self,
        label: str,
        enabled: bool = True,
        stream: TextIO | None = None,
    ) -> None:
        """Initialize the display.

        Args:
            label: Prefix shown before the progress text.
            enabled: If False, snapshots are consumed silently (JSON mode).
            stream: Output stream, defaults to sys.stderr.
        """
        self.label = label
        self.enabled = enabled
        self._stream = stream
        self.last: EncodeProgress | TransferProgress | None = None

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    async def consume(
        self, channel: ProgressChannel[EncodeProgress | TransferProgress]
    ) -> None:
        """Render every snapshot received until the channel closes."""
        async for value in channel:
            self.last = value
            if self.enabled:
                self.stream.write(f"\r{self.label}: {format_progress(value)}")
                self.stream.flush()
        if self.enabled and self.last is not None:
            self.stream.write("\n")
            self.stream.flush()
