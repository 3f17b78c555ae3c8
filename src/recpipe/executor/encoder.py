"""Transcode orchestration.

EncodeOrchestrator probes a source, selects the streams to keep, runs the
encoder and turns its progress output into EncodeProgress snapshots that are
offered to the caller's sink without ever waiting on it.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncGenerator
from pathlib import Path

from recpipe.config.models import RecPipeConfig
from recpipe.domain.models import EncodeProgress, MediaDescription
from recpipe.exceptions import EncoderProcessError, MissingDurationError
from recpipe.executor.command import build_encode_command
from recpipe.executor.ffmpeg_runner import FFmpegRunner
from recpipe.executor.interface import EncoderRunner
from recpipe.executor.stream_selection import select_stream_maps
from recpipe.introspector.ffprobe import FFprobeProbe
from recpipe.introspector.interface import MediaProbe
from recpipe.logging.context import operation_context
from recpipe.progress.channel import ProgressSink, try_deliver
from recpipe.tools.ffmpeg_progress import FFmpegProgress

logger = logging.getLogger(__name__)


def total_seconds(description: MediaDescription) -> int:
    """Progress denominator for an encode, in whole seconds.

    Raises:
        MissingDurationError: If the probe yielded no usable duration.
    """
    if description.duration_seconds is None:
        raise MissingDurationError(
            "Source duration is missing or unparsable; cannot track progress"
        )
    return int(description.duration_seconds)


class EncodeOrchestrator:
    """Drives ffprobe and ffmpeg for one source file per call.

    Calls share no mutable state, so several transcodes may run
    concurrently on the same instance.
    """

    def __init__(
        self,
        probe: MediaProbe | None = None,
        runner: EncoderRunner | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            probe: Media probe, defaults to FFprobeProbe on PATH.
            runner: Encoder runner, defaults to FFmpegRunner on PATH.
        """
        self._probe = probe if probe is not None else FFprobeProbe()
        self._runner = runner if runner is not None else FFmpegRunner()

    @classmethod
    def from_config(cls, config: RecPipeConfig) -> EncodeOrchestrator:
        """Create an orchestrator using configured tool paths and timeouts."""
        return cls(
            probe=FFprobeProbe(
                ffprobe_path=config.tools.ffprobe,
                timeout=config.encoder.probe_timeout_seconds,
            ),
            runner=FFmpegRunner(ffmpeg_path=config.tools.ffmpeg),
        )

    async def transcode(
        self,
        source: Path,
        target: Path,
        progress: ProgressSink[EncodeProgress] | None = None,
    ) -> None:
        """Transcode source into target.

        Probing, stream selection and the duration check all happen before
        the encoder is spawned. A partially written target is left in place
        on failure.

        Args:
            source: Readable source recording.
            target: Output path; its parent directory must be writable.
            progress: Optional non-blocking sink for EncodeProgress.

        Raises:
            MediaProbeError: If probing fails.
            StreamSelectionError: If an audio stream lacks a channel count.
            MissingDurationError: If the source duration is unusable.
            EncoderSpawnError: If ffmpeg cannot be started.
            EncoderProcessError: If ffmpeg exits unsuccessfully.
        """
        with operation_context("encode", source.name):
            description = await self._probe.probe(source)
            stream_maps = select_stream_maps(description)
            total_secs = total_seconds(description)

            args = build_encode_command(source, target, stream_maps)
            logger.info(
                "Encoding %s -> %s (%ds, maps: %s)",
                source,
                target,
                total_secs,
                " ".join(stream_maps),
            )

            process = await self._runner.start(args)
            try:
                try_deliver(progress, EncodeProgress(0, total_secs))
                await self._relay_progress(process.progress(), total_secs, progress)
                returncode = await process.wait()
            finally:
                # No-op after a normal exit; kills ffmpeg on error/cancel
                await process.kill()

            if returncode != 0:
                logger.error(
                    "Encoding %s failed with status %d", source, returncode
                )
                raise EncoderProcessError(returncode, process.stderr_tail)

            logger.info("Encoded %s", target)

    @staticmethod
    async def _relay_progress(
        updates: AsyncGenerator[FFmpegProgress, None],
        total_secs: int,
        progress: ProgressSink[EncodeProgress] | None,
    ) -> None:
        """Translate ffmpeg progress blocks into EncodeProgress snapshots.

        Blocks without a usable output time are skipped. The emitted value
        never decreases and never exceeds total_secs. Relaying stops at the
        block ffmpeg marks as its last.
        """
        current = 0
        async with contextlib.aclosing(updates):
            async for update in updates:
                out_time = update.out_time_seconds
                if out_time is None:
                    logger.debug("Progress block without out_time skipped")
                else:
                    current = min(max(int(out_time), current), total_secs)
                    try_deliver(progress, EncodeProgress(current, total_secs))
                if update.is_end:
                    logger.debug("ffmpeg reported end of progress at %ds", current)
                    break
