"""Helpers for running async operations from click commands."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any, TypeVar

import click

from recpipe.cli.exit_codes import ExitCode
from recpipe.progress.channel import ProgressChannel
from recpipe.progress.display import StderrProgressDisplay

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_command(main: Coroutine[Any, Any, T], action: str) -> T:
    """Run a command's coroutine to completion.

    On Ctrl+C asyncio.run() cancels the coroutine first, so ffmpeg is
    killed and transfers are closed before the command exits with
    ExitCode.INTERRUPTED.

    Args:
        main: The command's top-level coroutine.
        action: What the command does, e.g. "Download".
    """
    try:
        return asyncio.run(main)
    except KeyboardInterrupt:
        logger.info("%s interrupted by user", action)
        click.echo(f"\n{action} interrupted.", err=True)
        raise SystemExit(ExitCode.INTERRUPTED) from None


async def run_with_progress(
    operation: Callable[[ProgressChannel], Awaitable[T]],
    label: str,
    capacity: int,
    show: bool = True,
) -> T:
    """Run an operation while rendering its progress on stderr.

    The display runs as a separate task reading from a bounded channel; the
    channel is closed when the operation finishes, successfully or not, and
    the display is allowed to drain before returning.

    Args:
        operation: Coroutine factory receiving the progress channel.
        label: Prefix for the progress line.
        capacity: Channel capacity.
        show: If False, progress is consumed without output.

    Returns:
        Whatever the operation returns.
    """
    channel: ProgressChannel = ProgressChannel(capacity)
    display = StderrProgressDisplay(label, enabled=show)
    consumer = asyncio.create_task(display.consume(channel))
    try:
        return await operation(channel)
    finally:
        channel.close()
        await consumer
