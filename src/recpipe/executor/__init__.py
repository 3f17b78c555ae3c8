"""Encoder orchestration for recpipe.

- EncodeOrchestrator: probe, select streams, run ffmpeg, report progress
- select_stream_maps / select_audio_maps: stream selection from probe data
- build_encode_command: the fixed ffmpeg option set
- EncoderRunner / EncodeProcess: encoder capability protocols
- FFmpegRunner: production runner using asyncio subprocesses
"""

from recpipe.executor.command import build_encode_command
from recpipe.executor.encoder import EncodeOrchestrator, total_seconds
from recpipe.executor.ffmpeg_runner import FFmpegProcess, FFmpegRunner
from recpipe.executor.interface import EncodeProcess, EncoderRunner
from recpipe.executor.stream_selection import (
    select_audio_maps,
    select_stream_maps,
)

__all__ = [
    "EncodeOrchestrator",
    "EncodeProcess",
    "EncoderRunner",
    "FFmpegProcess",
    "FFmpegRunner",
    "build_encode_command",
    "select_audio_maps",
    "select_stream_maps",
    "total_seconds",
]
