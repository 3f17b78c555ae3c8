"""FFprobe-based implementation of the MediaProbe protocol."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from recpipe.domain.models import MediaDescription
from recpipe.exceptions import MediaProbeError
from recpipe.introspector.parsers import parse_ffprobe_output
from recpipe.tools.detection import ToolNotFoundError, require_tool

logger = logging.getLogger(__name__)

# Large analysis window; broadcast recordings often have odd headers and a
# small probe risks misdetecting streams.
ANALYZE_DURATION = "100M"
PROBE_SIZE = "100M"


class FFprobeProbe:
    """ffprobe-based implementation of the MediaProbe protocol.

    Runs ffprobe as an asyncio subprocess and parses its JSON output.
    """

    DEFAULT_TIMEOUT: float = 60.0

    def __init__(
        self,
        ffprobe_path: Path | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the probe.

        Args:
            ffprobe_path: Optional explicit path to ffprobe. If not provided,
                ffprobe is looked up on PATH when first needed.
            timeout: Seconds before a probe is abandoned.
        """
        self._configured_path = ffprobe_path
        self._tool_path: Path | None = None
        self._timeout = timeout if timeout is not None else self.DEFAULT_TIMEOUT

    @property
    def tool_path(self) -> Path:
        """Get path to ffprobe, verifying availability.

        Raises:
            MediaProbeError: If ffprobe is not available.
        """
        if self._tool_path is None:
            try:
                self._tool_path = require_tool("ffprobe", self._configured_path)
            except ToolNotFoundError as e:
                raise MediaProbeError(str(e)) from e
        return self._tool_path

    def build_command(self, path: Path) -> list[str]:
        """Build the ffprobe argument list for a source file."""
        return [
            str(self.tool_path),
            "-v",
            "error",
            "-analyzeduration",
            ANALYZE_DURATION,
            "-probesize",
            PROBE_SIZE,
            "-print_format",
            "json",
            "-show_format",
            "-show_streams",
            str(path),
        ]

    async def probe(self, path: Path) -> MediaDescription:
        """Extract metadata from a video file.

        Args:
            path: Path to the video file.

        Returns:
            MediaDescription of the file.

        Raises:
            MediaProbeError: If the file cannot be probed.
        """
        if not path.exists():
            raise MediaProbeError(f"File not found: {path}")

        stdout = await self._run_ffprobe(path)
        try:
            data = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise MediaProbeError(f"Invalid ffprobe output for {path}: {e}") from e
        if not isinstance(data, dict):
            raise MediaProbeError(f"Invalid ffprobe output for {path}")

        try:
            description = parse_ffprobe_output(data)
        except MediaProbeError as e:
            raise MediaProbeError(f"{e} ({path})") from e

        logger.debug(
            "Probed %s: duration=%s, %d streams",
            path,
            description.duration_seconds,
            len(description.streams),
        )
        return description

    async def _run_ffprobe(self, path: Path) -> str:
        """Run ffprobe and return its stdout.

        Raises:
            MediaProbeError: On spawn failure, timeout or non-zero exit.
        """
        cmd = self.build_command(path)
        logger.debug("Executing command: %s", " ".join(cmd))
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise MediaProbeError(f"Failed to start ffprobe: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self._timeout
            )
        except asyncio.TimeoutError as e:
            raise MediaProbeError(
                f"ffprobe timed out for {path} after {self._timeout}s"
            ) from e
        finally:
            if process.returncode is None:
                process.kill()
                await process.wait()

        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            reason = message or f"exit status {process.returncode}"
            raise MediaProbeError(f"ffprobe failed for {path}: {reason}")
        return stdout.decode("utf-8", errors="replace")
