"""asyncio subprocess runner for ffmpeg.

ffmpeg writes ``-progress`` blocks to stdout, which are parsed lazily as the
orchestrator iterates. stderr is drained concurrently into a bounded tail so
a chatty encoder cannot fill the pipe and stall.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections import deque
from collections.abc import AsyncGenerator
from pathlib import Path

from recpipe.exceptions import EncoderSpawnError
from recpipe.tools.detection import ToolNotFoundError, require_tool
from recpipe.tools.ffmpeg_progress import FFmpegProgress, ProgressBlockReader

logger = logging.getLogger(__name__)

# StreamReader line limit; ffmpeg error lines on corrupt input can be long
_STREAM_LIMIT = 1024 * 1024


class FFmpegProcess:
    """Handle to a running ffmpeg child process."""

    STDERR_TAIL_LINES: int = 20

    def __init__(self, process: asyncio.subprocess.Process) -> None:
        self._process = process
        self._stderr: deque[str] = deque(maxlen=self.STDERR_TAIL_LINES)
        self._stderr_task = asyncio.create_task(self._drain_stderr())

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def stderr_tail(self) -> list[str]:
        return list(self._stderr)

    async def _drain_stderr(self) -> None:
        stream = self._process.stderr
        if stream is None:
            return
        try:
            async for raw in stream:
                line = raw.decode("utf-8", errors="replace").rstrip()
                if line:
                    self._stderr.append(line)
        except (ValueError, OSError) as e:
            # Pipe closed or an over-long line; the exit status still decides
            logger.debug("Stderr reader stopped: %s", e)

    async def progress(self) -> AsyncGenerator[FFmpegProgress, None]:
        """Yield progress blocks until ffmpeg closes stdout."""
        stream = self._process.stdout
        if stream is None:
            return
        reader = ProgressBlockReader()
        async for raw in stream:
            block = reader.feed(raw.decode("utf-8", errors="replace"))
            if block is not None:
                yield block

    async def wait(self) -> int:
        """Wait for exit, then for the stderr reader to finish."""
        returncode = await self._process.wait()
        if not self._stderr_task.cancelled():
            await self._stderr_task
        return returncode

    async def kill(self) -> None:
        """Kill and reap ffmpeg if it is still running."""
        if self._process.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                self._process.kill()
            await self._process.wait()
            logger.debug("Killed ffmpeg process %d", self._process.pid)
        if not self._stderr_task.done():
            self._stderr_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._stderr_task


class FFmpegRunner:
    """Starts ffmpeg as an asyncio subprocess."""

    def __init__(self, ffmpeg_path: Path | None = None) -> None:
        """Initialize the runner.

        Args:
            ffmpeg_path: Optional explicit path to ffmpeg. If not provided,
                ffmpeg is looked up on PATH when first needed.
        """
        self._configured_path = ffmpeg_path
        self._tool_path: Path | None = None

    @property
    def tool_path(self) -> Path:
        """Get path to ffmpeg, verifying availability.

        Raises:
            EncoderSpawnError: If ffmpeg is not available.
        """
        if self._tool_path is None:
            try:
                self._tool_path = require_tool("ffmpeg", self._configured_path)
            except ToolNotFoundError as e:
                raise EncoderSpawnError(str(e)) from e
        return self._tool_path

    async def start(self, args: list[str]) -> FFmpegProcess:
        """Launch ffmpeg.

        Raises:
            EncoderSpawnError: If ffmpeg is missing or cannot be executed.
        """
        cmd = [str(self.tool_path), *args]
        logger.debug("Executing command: %s", " ".join(cmd))
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                limit=_STREAM_LIMIT,
            )
        except OSError as e:
            raise EncoderSpawnError(f"Failed to start ffmpeg: {e}") from e
        return FFmpegProcess(process)
