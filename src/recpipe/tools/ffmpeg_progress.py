"""FFmpeg progress parsing utilities.

ffmpeg invoked with ``-progress pipe:1`` writes ``key=value`` lines to
stdout, grouped in blocks that end with ``progress=continue`` or
``progress=end``. This module turns that stream into FFmpegProgress
records.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class FFmpegProgress:
    """Parsed FFmpeg progress block."""

    frame: int | None = None
    fps: float | None = None
    bitrate: str | None = None
    total_size: int | None = None
    out_time_us: int | None = None  # Output time in microseconds
    speed: str | None = None
    is_end: bool = False  # True for the final "progress=end" block

    @property
    def out_time_seconds(self) -> float | None:
        """Get output time in seconds, None when unknown or negative."""
        if self.out_time_us is None or self.out_time_us < 0:
            return None
        return self.out_time_us / 1_000_000


# Keys whose values must convert cleanly (dropped on parse failure)
_INT_KEYS = frozenset(("frame", "total_size", "out_time_us"))
_FLOAT_KEYS = frozenset(("fps",))
_STR_KEYS = frozenset(("bitrate", "speed"))

# ffmpeg historically reports microseconds under the out_time_ms key as well
_KEY_ALIASES = {"out_time_ms": "out_time_us"}


def _convert_progress_value(key: str, value: str) -> int | float | str | None:
    """Convert a progress value to the appropriate type.

    Args:
        key: The field name.
        value: The string value to convert.

    Returns:
        Converted value, or None for "N/A" and unparsable numbers.
    """
    if value == "N/A":
        return None
    if key in _INT_KEYS:
        try:
            return int(value)
        except ValueError:
            return None
    if key in _FLOAT_KEYS:
        try:
            return float(value)
        except ValueError:
            return None
    return value


def parse_progress_line(line: str) -> dict[str, int | float | str]:
    """Parse a single line from FFmpeg progress output.

    Args:
        line: A line from FFmpeg's -progress output.

    Returns:
        Dictionary with the parsed key-value pair, or an empty dict if the
        line is not a recognised, parseable progress field.
    """
    line = line.strip()
    if "=" not in line:
        return {}

    key, _, value = line.partition("=")
    key = _KEY_ALIASES.get(key.strip(), key.strip())
    value = value.strip()

    if key == "progress":
        return {"progress": value}
    if key not in _INT_KEYS | _FLOAT_KEYS | _STR_KEYS:
        return {}

    converted = _convert_progress_value(key, value)
    if converted is None:
        return {}
    return {key: converted}


class ProgressBlockReader:
    """Incrementally assembles progress blocks from individual lines.

    Example:
        reader = ProgressBlockReader()
        for line in lines:
            if (progress := reader.feed(line)) is not None:
                handle(progress)
    """

    def __init__(self) -> None:
        self.pending: dict[str, int | float | str] = {}

    def feed(self, line: str) -> FFmpegProgress | None:
        """Consume one line.

        Returns:
            A completed FFmpegProgress when the line closes a block,
            otherwise None.
        """
        parsed = parse_progress_line(line)
        if not parsed:
            return None
        if "progress" in parsed:
            result = FFmpegProgress(is_end=parsed["progress"] == "end")
            for key, value in self.pending.items():
                setattr(result, key, value)
            self.pending = {}
            return result
        self.pending.update(parsed)
        return None
