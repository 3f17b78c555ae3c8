"""Operation context for structured logging.

Provides context propagation for concurrent asyncio operations using
contextvars, enabling automatic injection of the operation kind and subject
(file id, path) into log records.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)
_subject: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "subject", default=None
)


@contextmanager
def operation_context(
    operation: str,
    subject: object | None = None,
) -> Generator[None, None, None]:
    """Context manager tagging log records with the running operation.

    Each asyncio task gets its own copy of the context, so concurrent
    downloads keep separate tags.

    Args:
        operation: Operation kind (e.g., "encode", "download").
        subject: What the operation works on (video file id, path).

    Example:
        with operation_context("download", video_file_id):
            logger.info("Starting download")  # tagged [download:42]
    """
    operation_token = _operation.set(operation)
    subject_token = _subject.set(str(subject) if subject is not None else None)
    try:
        yield
    finally:
        _operation.reset(operation_token)
        _subject.reset(subject_token)


def get_operation_context() -> tuple[str | None, str | None]:
    """Get current operation context.

    Returns:
        Tuple of (operation, subject), either may be None.
    """
    return _operation.get(), _subject.get()


class OperationContextFilter(logging.Filter):
    """Logging filter that injects operation context into log records.

    Adds operation and subject attributes for JSON output, and a compact
    op_tag like "[download:42] " for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        operation, subject = get_operation_context()

        record.operation = operation
        record.subject = subject

        if operation:
            if subject:
                record.op_tag = f"[{operation}:{subject}] "
            else:
                record.op_tag = f"[{operation}] "
        else:
            record.op_tag = ""

        return True  # Never filter out records
