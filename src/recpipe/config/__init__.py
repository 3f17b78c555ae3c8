"""Configuration management for recpipe.

This module provides configuration loading with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (RECPIPE_*)
3. Config file (~/.recpipe/config.toml)
4. Default values (lowest priority)
"""

from recpipe.config.env import EnvReader
from recpipe.config.loader import (
    build_config,
    clear_config_cache,
    get_config,
    get_default_config_path,
    load_config_file,
)
from recpipe.config.models import (
    EncoderConfig,
    LoggingConfig,
    ProgressConfig,
    RecPipeConfig,
    ServerConfig,
    ToolPathsConfig,
)

__all__ = [
    # Models
    "EncoderConfig",
    "LoggingConfig",
    "ProgressConfig",
    "RecPipeConfig",
    "ServerConfig",
    "ToolPathsConfig",
    # Loader
    "EnvReader",
    "build_config",
    "clear_config_cache",
    "get_config",
    "get_default_config_path",
    "load_config_file",
]
