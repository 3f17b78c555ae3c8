"""Shared test fixtures for recpipe."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import pytest

from recpipe.config.loader import clear_config_cache
from recpipe.domain.enums import CodecType
from recpipe.domain.models import MediaDescription, StreamInfo
from recpipe.tools.ffmpeg_progress import FFmpegProgress


def make_description(
    duration: float | None = 125.4,
    streams: list[tuple[str, int | None]] | None = None,
) -> MediaDescription:
    """Build a MediaDescription from (codec_type, channels) pairs.

    Args:
        duration: Container duration in seconds.
        streams: Stream specs in index order; defaults to video + stereo.
    """
    if streams is None:
        streams = [("video", None), ("audio", 2)]
    return MediaDescription(
        duration_seconds=duration,
        streams=tuple(
            StreamInfo(
                index=i,
                codec_type=CodecType.from_ffprobe(kind),
                channels=channels,
            )
            for i, (kind, channels) in enumerate(streams)
        ),
    )


def ffprobe_json(
    duration: str | None = "125.4",
    streams: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Build ffprobe -show_format -show_streams JSON."""
    if streams is None:
        streams = [
            {"index": 0, "codec_type": "video", "codec_name": "mpeg2video"},
            {"index": 1, "codec_type": "audio", "codec_name": "aac", "channels": 2},
        ]
    format_info: dict[str, Any] = {"format_name": "mpegts"}
    if duration is not None:
        format_info["duration"] = duration
    return {"streams": streams, "format": format_info}


class FakeProbe:
    """MediaProbe returning a fixed description (or raising)."""

    def __init__(
        self,
        description: MediaDescription | None = None,
        error: Exception | None = None,
    ) -> None:
        self.description = description or make_description()
        self.error = error
        self.calls: list[Path] = []

    async def probe(self, path: Path) -> MediaDescription:
        self.calls.append(path)
        if self.error is not None:
            raise self.error
        return self.description


class FakeProcess:
    """EncodeProcess replaying scripted progress blocks."""

    def __init__(
        self,
        out_times_us: list[int | None],
        returncode: int = 0,
        stderr_tail: list[str] | None = None,
        hang: bool = False,
        end_at: int | None = None,
    ) -> None:
        self.out_times_us = out_times_us
        self.end_at = end_at
        self.returncode = returncode
        self.stderr_tail = stderr_tail or []
        self.hang = hang
        self.killed = False
        self.waited = False
        self.blocks_consumed = 0
        self.progress_closed = False

    async def progress(self) -> AsyncGenerator[FFmpegProgress, None]:
        try:
            for i, out_time in enumerate(self.out_times_us):
                self.blocks_consumed += 1
                yield FFmpegProgress(out_time_us=out_time, is_end=i == self.end_at)
            if self.hang:
                await asyncio.Event().wait()
        finally:
            self.progress_closed = True

    async def wait(self) -> int:
        self.waited = True
        return self.returncode

    async def kill(self) -> None:
        if not self.waited:
            self.killed = True


class FakeRunner:
    """EncoderRunner handing out a FakeProcess."""

    def __init__(
        self,
        process: FakeProcess | None = None,
        spawn_error: Exception | None = None,
    ) -> None:
        self.process = process or FakeProcess([])
        self.spawn_error = spawn_error
        self.started: list[list[str]] = []

    async def start(self, args: list[str]) -> FakeProcess:
        self.started.append(args)
        if self.spawn_error is not None:
            raise self.spawn_error
        return self.process


class RecordingSink:
    """ProgressSink that records every accepted value."""

    def __init__(self, accept: bool = True) -> None:
        self.accept = accept
        self.values: list[Any] = []
        self.offered = 0

    def try_send(self, value: Any) -> bool:
        self.offered += 1
        if self.accept:
            self.values.append(value)
        return self.accept


@pytest.fixture(autouse=True)
def reset_config_cache():
    """Ensure cached configuration never leaks between tests."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def reset_root_logger():
    """Save and restore root logger state between tests."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers[:] = original_handlers
    root.setLevel(original_level)


@pytest.fixture
def description_factory():
    """Factory for MediaDescription objects (see make_description)."""
    return make_description


@pytest.fixture
def ffprobe_data_factory():
    """Factory for ffprobe JSON payloads (see ffprobe_json)."""
    return ffprobe_json


@pytest.fixture
def probe_factory():
    return FakeProbe


@pytest.fixture
def process_factory():
    return FakeProcess


@pytest.fixture
def runner_factory():
    return FakeRunner


@pytest.fixture
def recording_sink() -> RecordingSink:
    """Sink that accepts and records every snapshot."""
    return RecordingSink()


@pytest.fixture
def refusing_sink() -> RecordingSink:
    """Sink that rejects every snapshot, like a full channel."""
    return RecordingSink(accept=False)
