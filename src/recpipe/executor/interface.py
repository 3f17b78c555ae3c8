"""Encoder capability interfaces.

The orchestrator talks to the encoder only through these protocols so that
tests can substitute fakes without starting real processes.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Protocol

from recpipe.tools.ffmpeg_progress import FFmpegProgress


class EncodeProcess(Protocol):
    """A running encoder process."""

    stderr_tail: list[str]
    """Most recent stderr lines, for error reporting."""

    def progress(self) -> AsyncGenerator[FFmpegProgress, None]:
        """Finite, non-restartable sequence of parsed progress blocks.

        Ends when the encoder closes its progress output, or when the
        consumer closes the generator.
        """
        ...

    async def wait(self) -> int:
        """Wait for the process to exit and return its exit status."""
        ...

    async def kill(self) -> None:
        """Terminate and reap the process if it is still running."""
        ...


class EncoderRunner(Protocol):
    """Starts encoder processes."""

    async def start(self, args: list[str]) -> EncodeProcess:
        """Launch the encoder with the given arguments.

        Args:
            args: Arguments following the executable.

        Returns:
            Handle to the running process.

        Raises:
            EncoderSpawnError: If the process cannot be started.
        """
        ...
