"""Small shared helpers for recpipe."""

from recpipe.core.formatting import format_duration, format_file_size

__all__ = ["format_duration", "format_file_size"]
