"""Best-effort progress delivery.

- ProgressSink: Protocol for non-blocking progress receivers
- ProgressChannel: Bounded queue that drops snapshots when full or closed
- LatestProgress: Single cell keeping only the most recent snapshot
- try_deliver: Send helper used by every producer
- StderrProgressDisplay: Terminal renderer consuming a ProgressChannel
"""

from recpipe.progress.channel import (
    LatestProgress,
    ProgressChannel,
    ProgressSink,
    try_deliver,
)
from recpipe.progress.display import StderrProgressDisplay

__all__ = [
    "LatestProgress",
    "ProgressChannel",
    "ProgressSink",
    "StderrProgressDisplay",
    "try_deliver",
]
