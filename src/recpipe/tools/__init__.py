"""External tool helpers: executable lookup and ffmpeg progress parsing."""

from recpipe.tools.detection import ToolNotFoundError, find_tool, require_tool
from recpipe.tools.ffmpeg_progress import (
    FFmpegProgress,
    ProgressBlockReader,
    parse_progress_line,
)

__all__ = [
    "FFmpegProgress",
    "ProgressBlockReader",
    "ToolNotFoundError",
    "find_tool",
    "parse_progress_line",
    "require_tool",
]
