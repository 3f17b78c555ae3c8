"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to functions)
2. Environment variables (RECPIPE_*)
3. Config file (~/.recpipe/config.toml)
4. Default values

Environment variables:
- RECPIPE_CONFIG_PATH: Path to config file (overrides default location)
- RECPIPE_FFMPEG_PATH: Path to ffmpeg executable
- RECPIPE_FFPROBE_PATH: Path to ffprobe executable
- RECPIPE_SERVER_URL: Base URL of the recording server
- RECPIPE_SERVER_TIMEOUT: HTTP timeout in seconds
- RECPIPE_PROBE_TIMEOUT: ffprobe timeout in seconds
- RECPIPE_PROGRESS_CAPACITY: Buffered progress snapshots per operation
- RECPIPE_LOG_LEVEL / RECPIPE_LOG_FORMAT / RECPIPE_LOG_FILE: Logging
"""

from __future__ import annotations

import logging
import threading
import tomllib
from pathlib import Path
from typing import Any

from recpipe.config.env import EnvReader
from recpipe.config.models import (
    EncoderConfig,
    LoggingConfig,
    ProgressConfig,
    RecPipeConfig,
    ServerConfig,
    ToolPathsConfig,
)

logger = logging.getLogger(__name__)

# Default config location
DEFAULT_CONFIG_DIR = Path.home() / ".recpipe"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

_config_cache: RecPipeConfig | None = None
_config_lock = threading.Lock()


def get_default_config_path(env: EnvReader | None = None) -> Path:
    """Get the default config file path.

    Can be overridden by RECPIPE_CONFIG_PATH environment variable.
    """
    env = env or EnvReader()
    return env.get_path("RECPIPE_CONFIG_PATH", must_exist=False) or DEFAULT_CONFIG_FILE


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        path: Path to config file. If None, uses default location.

    Returns:
        Parsed configuration dict. Empty dict if file doesn't exist or
        cannot be parsed.
    """
    if path is None:
        path = get_default_config_path()

    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        config = tomllib.loads(path.read_text(encoding="utf-8"))
        logger.debug("Loaded config from %s", path)
        return config
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}


def _file_path(section: dict[str, Any], key: str) -> Path | None:
    value = section.get(key)
    return Path(value).expanduser() if value else None


def build_config(
    file_config: dict[str, Any],
    env: EnvReader,
    *,
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    server_url: str | None = None,
) -> RecPipeConfig:
    """Merge file values, environment variables and CLI overrides.

    Args:
        file_config: Parsed TOML content.
        env: Environment reader.
        ffmpeg_path: CLI override for ffmpeg path.
        ffprobe_path: CLI override for ffprobe path.
        server_url: CLI override for the server URL.

    Returns:
        RecPipeConfig with merged configuration.

    Raises:
        ValueError: If a merged value fails validation.
    """
    tools_file = file_config.get("tools", {})
    tools = ToolPathsConfig(
        ffmpeg=(
            ffmpeg_path
            or env.get_path("RECPIPE_FFMPEG_PATH")
            or _file_path(tools_file, "ffmpeg")
        ),
        ffprobe=(
            ffprobe_path
            or env.get_path("RECPIPE_FFPROBE_PATH")
            or _file_path(tools_file, "ffprobe")
        ),
    )

    server_file = file_config.get("server", {})
    server = ServerConfig(
        url=(
            server_url
            or env.get_str("RECPIPE_SERVER_URL")
            or server_file.get("url", ServerConfig.url)
        ),
        timeout_seconds=env.get_float(
            "RECPIPE_SERVER_TIMEOUT",
            float(server_file.get("timeout_seconds", ServerConfig.timeout_seconds)),
        ),
    )

    encoder_file = file_config.get("encoder", {})
    encoder = EncoderConfig(
        probe_timeout_seconds=env.get_float(
            "RECPIPE_PROBE_TIMEOUT",
            float(
                encoder_file.get(
                    "probe_timeout_seconds", EncoderConfig.probe_timeout_seconds
                )
            ),
        ),
    )

    progress_file = file_config.get("progress", {})
    progress = ProgressConfig(
        capacity=env.get_int(
            "RECPIPE_PROGRESS_CAPACITY",
            int(progress_file.get("capacity", ProgressConfig.capacity)),
        ),
    )

    logging_file = file_config.get("logging", {})
    logging_config = LoggingConfig(
        level=env.get_str("RECPIPE_LOG_LEVEL", logging_file.get("level", "info")),
        file=(
            env.get_path("RECPIPE_LOG_FILE", must_exist=False)
            or _file_path(logging_file, "file")
        ),
        format=env.get_str("RECPIPE_LOG_FORMAT", logging_file.get("format", "text")),
        include_stderr=env.get_bool(
            "RECPIPE_LOG_INCLUDE_STDERR",
            bool(logging_file.get("include_stderr", False)),
        ),
        max_bytes=int(logging_file.get("max_bytes", 10_485_760)),
        backup_count=int(logging_file.get("backup_count", 5)),
    )

    return RecPipeConfig(
        tools=tools,
        server=server,
        encoder=encoder,
        progress=progress,
        logging=logging_config,
    )


def get_config(
    config_path: Path | None = None,
    *,
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    server_url: str | None = None,
) -> RecPipeConfig:
    """Get recpipe configuration with full precedence handling.

    The result of a call without arguments is cached for the life of the
    process; calls with overrides always build a fresh config.

    Args:
        config_path: Path to config file (overrides RECPIPE_CONFIG_PATH).
        ffmpeg_path: CLI override for ffmpeg path.
        ffprobe_path: CLI override for ffprobe path.
        server_url: CLI override for the server URL.

    Returns:
        RecPipeConfig with merged configuration.
    """
    global _config_cache

    use_cache = not any((config_path, ffmpeg_path, ffprobe_path, server_url))
    if use_cache and _config_cache is not None:
        return _config_cache

    env = EnvReader()
    config = build_config(
        load_config_file(config_path or get_default_config_path(env)),
        env,
        ffmpeg_path=ffmpeg_path,
        ffprobe_path=ffprobe_path,
        server_url=server_url,
    )

    if use_cache:
        with _config_lock:
            _config_cache = config
    return config


def clear_config_cache() -> None:
    """Forget the cached configuration (used by tests)."""
    global _config_cache
    with _config_lock:
        _config_cache = None
