"""Structured logging module for recpipe.

Provides configurable logging with JSON format support and file rotation.
Includes operation context support for concurrent encodes and transfers.
"""

from recpipe.logging.config import configure_logging
from recpipe.logging.context import (
    OperationContextFilter,
    get_operation_context,
    operation_context,
)
from recpipe.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "OperationContextFilter",
    "configure_logging",
    "get_operation_context",
    "operation_context",
]
