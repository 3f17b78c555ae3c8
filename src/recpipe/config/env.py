"""Typed access to RECPIPE_* environment variables.

EnvReader reads from an injectable mapping so the loader can be tested
without touching os.environ. A value that cannot be converted is logged
and treated as unset.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRUE_WORDS = frozenset(("1", "true", "yes", "on"))
_FALSE_WORDS = frozenset(("0", "false", "no", "off"))


def _parse_bool(value: str) -> bool:
    word = value.strip().casefold()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(value)


class EnvReader:
    """Environment variable reader with type conversion.

    Example:
        reader = EnvReader(env={"RECPIPE_SERVER_TIMEOUT": "5"})
        reader.get_float("RECPIPE_SERVER_TIMEOUT", 30.0)  # 5.0
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = os.environ if env is None else env

    def _convert(
        self,
        var: str,
        default: T | None,
        convert: Callable[[str], T],
        kind: str,
    ) -> T | None:
        raw = self._env.get(var)
        if raw is None:
            return default
        try:
            return convert(raw)
        except ValueError:
            logger.warning("Ignoring %s=%r: not a valid %s", var, raw, kind)
            return default

    def get_str(self, var: str, default: str | None = None) -> str | None:
        return self._env.get(var, default)

    def get_int(self, var: str, default: int | None = None) -> int | None:
        return self._convert(var, default, int, "integer")

    def get_float(self, var: str, default: float | None = None) -> float | None:
        return self._convert(var, default, float, "number")

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Read a switch such as RECPIPE_LOG_INCLUDE_STDERR.

        Accepts 1/0, true/false, yes/no and on/off in any case; anything
        else is logged and falls back to default.
        """
        return self._convert(var, default, _parse_bool, "boolean")

    def get_path(
        self, var: str, must_exist: bool = True, default: Path | None = None
    ) -> Path | None:
        """Read a filesystem path, expanding ``~``.

        With must_exist, a path that is not on disk is logged and the
        default is returned instead. Tool paths use this; log files and
        the config path do not.
        """
        raw = self._env.get(var)
        if raw is None:
            return default
        path = Path(raw).expanduser()
        if must_exist and not path.exists():
            logger.warning("Ignoring %s: %s does not exist", var, path)
            return default
        return path
