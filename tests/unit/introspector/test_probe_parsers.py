"""Unit tests for ffprobe output parsing."""

import pytest

from recpipe.domain.enums import CodecType
from recpipe.exceptions import MediaProbeError
from recpipe.introspector.parsers import (
    parse_channels,
    parse_duration,
    parse_ffprobe_output,
    parse_stream,
)


class TestParseDuration:
    """Tests for parse_duration function."""

    def test_none_returns_none(self):
        """Test that None input returns None."""
        assert parse_duration(None) is None

    def test_valid_float_string(self):
        """Test parsing valid float strings."""
        assert parse_duration("125.4") == 125.4

    def test_zero_duration(self):
        """Test parsing zero duration."""
        assert parse_duration("0") == 0.0

    def test_invalid_string_returns_none(self):
        """Test that invalid strings return None."""
        assert parse_duration("N/A") is None
        assert parse_duration("") is None

    def test_negative_returns_none(self):
        """Negative durations are treated as missing."""
        assert parse_duration("-1.5") is None

    def test_non_finite_returns_none(self):
        """NaN and infinity are treated as missing."""
        assert parse_duration("nan") is None
        assert parse_duration("inf") is None


class TestParseChannels:
    """Tests for parse_channels function."""

    def test_valid_count(self):
        assert parse_channels(6) == 6

    def test_zero_is_kept(self):
        """Zero channels is a real value, distinct from missing."""
        assert parse_channels(0) == 0

    def test_missing(self):
        assert parse_channels(None) is None

    def test_wrong_type(self):
        """Strings and bools are not channel counts."""
        assert parse_channels("2") is None
        assert parse_channels(True) is None

    def test_negative(self):
        assert parse_channels(-2) is None


class TestParseStream:
    """Tests for parse_stream function."""

    def test_audio_stream_keeps_channels(self):
        """Test parsing an audio stream."""
        stream = parse_stream(1, {"codec_type": "audio", "channels": 2})
        assert stream.index == 1
        assert stream.codec_type is CodecType.AUDIO
        assert stream.channels == 2

    def test_video_stream_ignores_channels(self):
        """Channels are only recorded for audio streams."""
        stream = parse_stream(0, {"codec_type": "video", "channels": 2})
        assert stream.codec_type is CodecType.VIDEO
        assert stream.channels is None

    def test_unknown_codec_type(self):
        """Data and attachment streams map to UNKNOWN."""
        assert parse_stream(3, {"codec_type": "data"}).codec_type is CodecType.UNKNOWN
        assert parse_stream(4, {}).codec_type is CodecType.UNKNOWN

    def test_audio_without_channels(self):
        """A missing channel count is preserved as None."""
        stream = parse_stream(2, {"codec_type": "audio"})
        assert stream.channels is None


class TestParseFFprobeOutput:
    """Tests for parse_ffprobe_output function."""

    def test_duration_and_streams(self, ffprobe_data_factory):
        """Test parsing a typical recording."""
        description = parse_ffprobe_output(ffprobe_data_factory())
        assert description.duration_seconds == 125.4
        assert [s.codec_type for s in description.streams] == [
            CodecType.VIDEO,
            CodecType.AUDIO,
        ]
        assert description.streams[1].channels == 2

    def test_index_is_position_in_list(self, ffprobe_data_factory):
        """Stream index follows probe order, not the reported index field."""
        data = ffprobe_data_factory(
            streams=[
                {"index": 7, "codec_type": "video"},
                {"index": 9, "codec_type": "audio", "channels": 2},
            ]
        )
        description = parse_ffprobe_output(data)
        assert [s.index for s in description.streams] == [0, 1]

    def test_missing_duration(self, ffprobe_data_factory):
        """A format section without duration yields None."""
        description = parse_ffprobe_output(ffprobe_data_factory(duration=None))
        assert description.duration_seconds is None

    def test_unparsable_duration(self, ffprobe_data_factory):
        description = parse_ffprobe_output(ffprobe_data_factory(duration="N/A"))
        assert description.duration_seconds is None

    def test_empty_stream_list(self, ffprobe_data_factory):
        description = parse_ffprobe_output(ffprobe_data_factory(streams=[]))
        assert description.streams == ()

    def test_missing_streams_raises(self):
        """Test that missing streams key raises MediaProbeError."""
        with pytest.raises(MediaProbeError, match="streams"):
            parse_ffprobe_output({"format": {"duration": "10"}})

    def test_missing_format_raises(self):
        """Test that missing format key raises MediaProbeError."""
        with pytest.raises(MediaProbeError, match="format"):
            parse_ffprobe_output({"streams": []})

    def test_malformed_stream_entry_raises(self):
        with pytest.raises(MediaProbeError, match="position 1"):
            parse_ffprobe_output(
                {"streams": [{"codec_type": "video"}, "audio"], "format": {}}
            )
