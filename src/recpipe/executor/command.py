"""FFmpeg command building for the fixed recording transcode.

Every recording gets the same option set: deinterlaced AV1 video at a
constant quality, with audio copied unchanged.
"""

from __future__ import annotations

from pathlib import Path

from recpipe.introspector.ffprobe import ANALYZE_DURATION, PROBE_SIZE

VIDEO_ENCODER = "libsvtav1"
VIDEO_CRF = "38"
DEINTERLACE_FILTER = "yadif=1"
AUDIO_BITSTREAM_FILTER = "aac_adtstoasc"
SUBTITLE_CODEC = "mov_text"


def build_input_args(source: Path) -> list[str]:
    """Build global and input options.

    Uses the same generous analysis window as the probe and tolerates
    unknown streams and truncated subtitle durations.
    """
    return [
        "-y",
        "-analyzeduration",
        ANALYZE_DURATION,
        "-probesize",
        PROBE_SIZE,
        "-ignore_unknown",
        "-fix_sub_duration",
        "-i",
        str(source),
    ]


def build_output_args(stream_maps: list[str]) -> list[str]:
    """Build codec, filter and stream-map options for the output file.

    Args:
        stream_maps: Map specifiers from select_stream_maps().
    """
    args: list[str] = []
    for stream_map in stream_maps:
        args.extend(["-map", stream_map])
    args.extend(
        [
            "-vcodec",
            VIDEO_ENCODER,
            "-crf",
            VIDEO_CRF,
            "-vf",
            DEINTERLACE_FILTER,
            "-bsf:a",
            AUDIO_BITSTREAM_FILTER,
            "-fflags",
            "+discardcorrupt",
            "-acodec",
            "copy",
            "-scodec",
            SUBTITLE_CODEC,
        ]
    )
    return args


def build_encode_command(
    source: Path,
    target: Path,
    stream_maps: list[str],
) -> list[str]:
    """Build the full ffmpeg argument list, without the executable.

    Progress is written to stdout in ``-progress`` key=value form; the
    periodic stats line on stderr is disabled.

    Args:
        source: Input file.
        target: Output file (overwritten).
        stream_maps: Map specifiers from select_stream_maps().

    Returns:
        Arguments to pass after the ffmpeg executable.
    """
    return [
        *build_input_args(source),
        *build_output_args(stream_maps),
        "-progress",
        "pipe:1",
        "-nostats",
        str(target),
    ]
