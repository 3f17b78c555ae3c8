"""Non-blocking progress channel.

Producers (the encoder and the transfer client) only ever attempt a
non-blocking send. A snapshot that cannot be accepted immediately is
dropped: correctness of the underlying operation never depends on whether
a progress value is observed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Generic, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)

DEFAULT_CAPACITY = 16


class ProgressSink(Protocol[T_contra]):
    """Protocol for caller-owned progress receivers.

    Implementations must never block: ``try_send`` either accepts the value
    right away or reports that it was not accepted.
    """

    def try_send(self, value: T_contra) -> bool:
        """Offer a snapshot to the receiver.

        Args:
            value: Progress snapshot.

        Returns:
            True if the snapshot was accepted, False if it was dropped.
        """
        ...


def try_deliver(sink: ProgressSink[T] | None, value: T) -> None:
    """Offer a snapshot to a sink, discarding it if the sink is not ready.

    Args:
        sink: Progress receiver, or None when the caller wants no progress.
        value: Progress snapshot.
    """
    if sink is None:
        return
    if not sink.try_send(value):
        logger.debug("Progress snapshot dropped: %r", value)


class ProgressChannel(Generic[T]):
    """Bounded progress queue with drop-on-full sends.

    The receiver iterates with ``async for``; iteration ends once the
    channel is closed and every buffered snapshot has been read.

    Example:
        channel: ProgressChannel[TransferProgress] = ProgressChannel()
        consumer = asyncio.create_task(render(channel))
        try:
            await client.download_file(file_id, target, channel)
        finally:
            channel.close()
        await consumer
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        """Initialize the channel.

        Args:
            capacity: Maximum number of buffered snapshots (at least 1).

        Raises:
            ValueError: If capacity is less than 1.
        """
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._queue: asyncio.Queue[T] = asyncio.Queue(maxsize=capacity)
        self._closed = False
        self._closed_event = asyncio.Event()
        self.dropped = 0

    @property
    def closed(self) -> bool:
        """True once close() has been called."""
        return self._closed

    def try_send(self, value: T) -> bool:
        """Buffer a snapshot without waiting.

        Returns:
            False if the channel is full or closed.
        """
        if self._closed:
            self.dropped += 1
            return False
        try:
            self._queue.put_nowait(value)
        except asyncio.QueueFull:
            self.dropped += 1
            return False
        return True

    def close(self) -> None:
        """Stop accepting snapshots and wake any waiting receiver."""
        self._closed = True
        self._closed_event.set()

    async def receive(self) -> T | None:
        """Wait for the next snapshot.

        Returns:
            The next buffered snapshot, or None once the channel is closed
            and drained.
        """
        while True:
            if not self._queue.empty():
                return self._queue.get_nowait()
            if self._closed:
                return None
            getter = asyncio.ensure_future(self._queue.get())
            closer = asyncio.ensure_future(self._closed_event.wait())
            try:
                done, _ = await asyncio.wait(
                    {getter, closer}, return_when=asyncio.FIRST_COMPLETED
                )
            finally:
                closer.cancel()
                if not getter.done():
                    getter.cancel()
            if getter in done and not getter.cancelled():
                return getter.result()

    async def __aiter__(self) -> AsyncIterator[T]:
        while True:
            value = await self.receive()
            if value is None:
                return
            yield value


class LatestProgress(Generic[T]):
    """Single-slot sink where the newest snapshot replaces the previous one.

    Suitable for pollers that only care about the current value, such as a
    status endpoint or a periodic log line. Sends always succeed.
    """

    def __init__(self) -> None:
        self._value: T | None = None
        self.updates = 0

    def try_send(self, value: T) -> bool:
        """Replace the stored snapshot."""
        self._value = value
        self.updates += 1
        return True

    @property
    def value(self) -> T | None:
        """Most recent snapshot, or None if nothing was sent yet."""
        return self._value
