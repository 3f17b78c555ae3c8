"""Stream selection from probed media metadata.

Video and subtitle streams are mapped with fixed wildcard maps; audio
streams are mapped individually so that disabled (zero-channel) tracks can
be left out.
"""

from __future__ import annotations

from recpipe.domain.enums import CodecType
from recpipe.domain.models import MediaDescription
from recpipe.exceptions import StreamSelectionError

VIDEO_MAP = "0:v"
SUBTITLE_MAP = "0:s?"  # ? makes it optional if there are no subtitles


def select_audio_maps(description: MediaDescription) -> list[str]:
    """Choose the audio streams to keep.

    Streams are visited in index order. Zero-channel audio is a placeholder
    track and is skipped; every other audio stream is mapped by its
    absolute index.

    Args:
        description: Probed source metadata.

    Returns:
        Map specifiers such as ["0:1", "0:3"], in stream order.

    Raises:
        StreamSelectionError: If an audio stream has no channel count.
    """
    maps: list[str] = []
    for stream in description.streams:
        if stream.codec_type is not CodecType.AUDIO:
            continue
        if stream.channels is None:
            raise StreamSelectionError(
                stream.index,
                f"Audio stream {stream.index} has no channel count; "
                "probe output is malformed",
            )
        if stream.channels == 0:
            continue
        maps.append(f"0:{stream.index}")
    return maps


def select_stream_maps(description: MediaDescription) -> list[str]:
    """Build the complete ordered map list for the encoder.

    Returns:
        The video map, the optional subtitle map, then the audio maps.

    Raises:
        StreamSelectionError: If an audio stream has no channel count.
    """
    return [VIDEO_MAP, SUBTITLE_MAP, *select_audio_maps(description)]
