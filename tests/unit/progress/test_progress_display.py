"""Unit tests for terminal progress rendering."""

import io

import pytest

from recpipe.domain.models import EncodeProgress, TransferProgress
from recpipe.progress.channel import ProgressChannel
from recpipe.progress.display import StderrProgressDisplay, format_progress


class TestFormatProgress:
    """Tests for format_progress."""

    def test_encode_progress(self):
        assert format_progress(EncodeProgress(63, 150)) == " 42.0% (0:01:03 / 0:02:30)"

    def test_transfer_progress(self):
        text = format_progress(TransferProgress(512 * 1024, 1024 * 1024))
        assert text == " 50.0% (512.0 KB / 1.0 MB)"

    def test_zero_total(self):
        assert format_progress(TransferProgress(0, 0)) == "  0.0% (0 B / 0 B)"


@pytest.mark.asyncio
class TestStderrProgressDisplay:
    """Tests for StderrProgressDisplay.consume."""

    async def test_renders_each_value(self):
        stream = io.StringIO()
        channel: ProgressChannel[EncodeProgress] = ProgressChannel()
        channel.try_send(EncodeProgress(0, 10))
        channel.try_send(EncodeProgress(10, 10))
        channel.close()

        display = StderrProgressDisplay("Encoding", stream=stream)
        await display.consume(channel)

        output = stream.getvalue()
        assert output.count("\rEncoding: ") == 2
        assert "100.0%" in output
        assert output.endswith("\n")
        assert display.last == EncodeProgress(10, 10)

    async def test_disabled_consumes_silently(self):
        stream = io.StringIO()
        channel: ProgressChannel[EncodeProgress] = ProgressChannel()
        channel.try_send(EncodeProgress(5, 10))
        channel.close()

        display = StderrProgressDisplay("Encoding", enabled=False, stream=stream)
        await display.consume(channel)

        assert stream.getvalue() == ""
        assert display.last == EncodeProgress(5, 10)

    async def test_nothing_received(self):
        """No trailing newline when nothing was shown."""
        stream = io.StringIO()
        channel: ProgressChannel[EncodeProgress] = ProgressChannel()
        channel.close()
        await StderrProgressDisplay("Encoding", stream=stream).consume(channel)
        assert stream.getvalue() == ""
