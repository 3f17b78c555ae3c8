"""Executable lookup for ffmpeg and ffprobe.

A configured path takes precedence; otherwise the tool is looked up on PATH.
"""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

_INSTALL_HINT = (
    "Install ffmpeg (which provides ffprobe) or configure the path via "
    "RECPIPE_{upper}_PATH or the [tools] section of ~/.recpipe/config.toml"
)


class ToolNotFoundError(Exception):
    """Raised when a required external tool cannot be located."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(
            f"Required tool not available: {tool_name}. "
            + _INSTALL_HINT.format(upper=tool_name.upper())
        )


def find_tool(name: str, configured_path: Path | None = None) -> Path | None:
    """Find a tool executable.

    Args:
        name: Tool name (e.g., "ffmpeg").
        configured_path: Optional configured path override.

    Returns:
        Path to tool executable, or None if not found.
    """
    if configured_path:
        if configured_path.is_file():
            return configured_path
        logger.warning(
            "Configured path for %s is not a file: %s", name, configured_path
        )

    which_result = shutil.which(name)
    if which_result:
        return Path(which_result)

    return None


def require_tool(name: str, configured_path: Path | None = None) -> Path:
    """Get path to a required tool, raising an error if not available.

    Raises:
        ToolNotFoundError: If the tool cannot be found.
    """
    path = find_tool(name, configured_path)
    if path is None:
        raise ToolNotFoundError(name)
    return path
