"""Domain enums for recpipe."""

from enum import Enum


class CodecType(Enum):
    """Elementary stream classification as reported by ffprobe."""

    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLE = "subtitle"
    UNKNOWN = "unknown"

    @classmethod
    def from_ffprobe(cls, value: str | None) -> "CodecType":
        """Map an ffprobe ``codec_type`` string to a CodecType.

        Anything other than video, audio or subtitle (data, attachment,
        missing) maps to UNKNOWN.
        """
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.casefold())
        except ValueError:
            return cls.UNKNOWN
