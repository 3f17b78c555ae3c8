"""Pure parsing functions for ffprobe JSON output.

These functions transform ffprobe JSON data into recpipe domain objects.
All functions are pure (no I/O, no side effects) for easy testing.
"""

import logging
import math
from typing import Any

from recpipe.domain.enums import CodecType
from recpipe.domain.models import MediaDescription, StreamInfo
from recpipe.exceptions import MediaProbeError

logger = logging.getLogger(__name__)


def parse_duration(value: Any) -> float | None:
    """Parse duration string from ffprobe into seconds.

    Args:
        value: Duration from ffprobe (e.g., "3600.000") or None.

    Returns:
        Duration in seconds, or None if absent, unparsable, negative or
        not finite.
    """
    if value is None:
        return None
    try:
        duration = float(value)
    except (ValueError, TypeError):
        logger.warning("Unparsable container duration: %r", value)
        return None
    if not math.isfinite(duration):
        logger.warning("Non-finite container duration: %r", value)
        return None
    if duration < 0:
        logger.warning("Invalid negative container duration: %s", duration)
        return None
    return duration


def parse_channels(value: Any) -> int | None:
    """Parse an audio channel count.

    Returns:
        Non-negative channel count, or None if missing or not an integer.
    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        logger.warning("Expected int for channels, got %s", type(value).__name__)
        return None
    if value < 0:
        logger.warning("Invalid negative channels: %d", value)
        return None
    return value


def parse_stream(position: int, stream: dict[str, Any]) -> StreamInfo:
    """Parse a single ffprobe stream dict into a StreamInfo.

    Args:
        position: 0-based position of the stream in the probe output.
        stream: Stream dictionary from ffprobe JSON.

    Returns:
        StreamInfo domain object. Channels are only recorded for audio.
    """
    codec_type = CodecType.from_ffprobe(stream.get("codec_type"))
    channels = None
    if codec_type is CodecType.AUDIO:
        channels = parse_channels(stream.get("channels"))
    return StreamInfo(index=position, codec_type=codec_type, channels=channels)


def parse_ffprobe_output(data: dict[str, Any]) -> MediaDescription:
    """Convert ffprobe ``-show_format -show_streams`` JSON.

    Args:
        data: Parsed ffprobe JSON.

    Returns:
        MediaDescription with duration and streams in probe order.

    Raises:
        MediaProbeError: If the streams or format sections are missing or
            have the wrong shape.
    """
    streams = data.get("streams")
    if not isinstance(streams, list):
        raise MediaProbeError(
            "Missing 'streams' in ffprobe output. "
            "File may be corrupted or not a valid media file."
        )
    format_info = data.get("format")
    if not isinstance(format_info, dict):
        raise MediaProbeError(
            "Missing 'format' in ffprobe output. "
            "File may be corrupted or not a valid media file."
        )

    parsed: list[StreamInfo] = []
    for position, stream in enumerate(streams):
        if not isinstance(stream, dict):
            raise MediaProbeError(f"Malformed stream entry at position {position}")
        parsed.append(parse_stream(position, stream))

    return MediaDescription(
        duration_seconds=parse_duration(format_info.get("duration")),
        streams=tuple(parsed),
    )
