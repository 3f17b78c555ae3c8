"""Unit tests for FFmpegRunner and FFmpegProcess.

A Python interpreter stands in for ffmpeg so that real pipes are exercised
without requiring ffmpeg to be installed.
"""

import asyncio
import sys
import textwrap
from pathlib import Path
from unittest.mock import patch

import pytest

from recpipe.exceptions import EncoderSpawnError
from recpipe.executor.ffmpeg_runner import FFmpegProcess, FFmpegRunner

PROGRESS_SCRIPT = textwrap.dedent(
    """
    import sys
    for t in (1000000, 2000000):
        print(f"frame={t // 40000}")
        print(f"out_time_us={t}")
        print("progress=continue")
    print("out_time_us=3000000")
    print("progress=end")
    sys.stdout.flush()
    for i in range(30):
        print(f"stderr line {i}", file=sys.stderr)
    sys.exit(3)
    """
)

NOISY_SCRIPT = textwrap.dedent(
    """
    import sys
    for i in range(20000):
        sys.stderr.write("x" * 100 + "\\n")
    print("out_time_us=5000000")
    print("progress=end")
    """
)


@pytest.fixture
def runner() -> FFmpegRunner:
    return FFmpegRunner(ffmpeg_path=Path(sys.executable))


async def _collect(process: FFmpegProcess) -> list:
    return [block async for block in process.progress()]


@pytest.mark.asyncio
class TestFFmpegProcess:
    """Tests for FFmpegProcess against a real child process."""

    async def test_progress_blocks_and_exit_status(self, runner: FFmpegRunner):
        """Should yield one block per progress= line and keep a stderr tail."""
        process = await runner.start(["-c", PROGRESS_SCRIPT])
        blocks = await asyncio.wait_for(_collect(process), timeout=10)
        returncode = await asyncio.wait_for(process.wait(), timeout=10)

        assert [b.out_time_us for b in blocks] == [1000000, 2000000, 3000000]
        assert [b.is_end for b in blocks] == [False, False, True]
        assert blocks[0].frame == 25
        assert returncode == 3
        assert len(process.stderr_tail) == FFmpegProcess.STDERR_TAIL_LINES
        assert process.stderr_tail[-1] == "stderr line 29"

    async def test_heavy_stderr_does_not_block(self, runner: FFmpegRunner):
        """Stderr is drained concurrently so the child never stalls."""
        process = await runner.start(["-c", NOISY_SCRIPT])
        blocks = await asyncio.wait_for(_collect(process), timeout=20)
        returncode = await asyncio.wait_for(process.wait(), timeout=20)

        assert returncode == 0
        assert blocks[-1].out_time_us == 5000000

    async def test_kill_running_process(self, runner: FFmpegRunner):
        process = await runner.start(["-c", "import time; time.sleep(30)"])
        await asyncio.wait_for(process.kill(), timeout=10)
        assert await process.wait() != 0

    async def test_kill_after_exit_is_noop(self, runner: FFmpegRunner):
        process = await runner.start(["-c", "pass"])
        assert await asyncio.wait_for(process.wait(), timeout=10) == 0
        await process.kill()


@pytest.mark.asyncio
class TestFFmpegRunnerStart:
    """Tests for FFmpegRunner.start failures."""

    async def test_missing_tool(self, tmp_path: Path):
        runner = FFmpegRunner(ffmpeg_path=tmp_path / "ffmpeg")
        with patch("recpipe.tools.detection.shutil.which", return_value=None):
            with pytest.raises(EncoderSpawnError, match="ffmpeg"):
                await runner.start(["-version"])

    async def test_not_executable(self, tmp_path: Path):
        """A configured path that cannot be executed is a spawn error."""
        fake = tmp_path / "ffmpeg"
        fake.write_text("not a program")
        fake.chmod(0o644)
        with pytest.raises(EncoderSpawnError, match="Failed to start ffmpeg"):
            await FFmpegRunner(ffmpeg_path=fake).start(["-version"])
