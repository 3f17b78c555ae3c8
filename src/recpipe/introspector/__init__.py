"""Introspector module for recpipe.

This module provides media probing capabilities:

- MediaProbe: Protocol defining the probing interface
- FFprobeProbe: Production implementation using ffprobe
- parse_ffprobe_output: Pure conversion of ffprobe JSON to MediaDescription
- MediaProbeError: Exception for probing failures
"""

from recpipe.exceptions import MediaProbeError
from recpipe.introspector.ffprobe import FFprobeProbe
from recpipe.introspector.interface import MediaProbe
from recpipe.introspector.parsers import parse_ffprobe_output

__all__ = [
    "FFprobeProbe",
    "MediaProbe",
    "MediaProbeError",
    "parse_ffprobe_output",
]
