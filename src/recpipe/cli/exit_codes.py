"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (config, input)
    20-29: Target/file errors
    30-39: Tool/dependency errors
    40-49: Operation errors
    130: Interrupted by the user
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for recpipe CLI commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1

    # Validation errors (10-19)
    CONFIG_ERROR = 11
    INVALID_MEDIA = 12

    # Target/file errors (20-29)
    FILE_IO_ERROR = 21

    # Tool/dependency errors (30-39)
    TOOL_NOT_AVAILABLE = 30

    # Operation errors (40-49)
    ENCODE_FAILED = 40
    SERVER_UNREACHABLE = 41
    SERVER_ERROR = 42
    PROTOCOL_ERROR = 43

    # Interrupted (130, as for SIGINT; click uses 2 for usage errors)
    INTERRUPTED = 130
