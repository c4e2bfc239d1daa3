"""Environment variable reader with dependency injection support.

All mpvcut variables share the ``MPVCUT_`` prefix; the reader adds it so
callers name settings by their short form (``reader.get_path("FFMPEG_PATH")``).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = "MPVCUT_"


class EnvReader:
    """Typed access to ``MPVCUT_*`` environment variables.

    Example:
        reader = EnvReader(env={"MPVCUT_LOG_LEVEL": "debug"})
        reader.get_str("LOG_LEVEL")  # "debug"
    """

    def __init__(
        self, env: Mapping[str, str] | None = None, prefix: str = ENV_PREFIX
    ) -> None:
        """Initialize the environment reader.

        Args:
            env: Optional mapping to use instead of os.environ.
            prefix: Prefix prepended to every variable name.
        """
        self._env: Mapping[str, str] = env if env is not None else os.environ
        self._prefix = prefix

    def name(self, var: str) -> str:
        """Return the full variable name for a short setting name."""
        return f"{self._prefix}{var}"

    def _raw(self, var: str) -> str | None:
        value = self._env.get(self.name(var))
        if value is None or value.strip() == "":
            return None
        return value.strip()

    def get_str(self, var: str, default: str | None = None) -> str | None:
        value = self._raw(var)
        return default if value is None else value

    def get_int(self, var: str, default: int | None = None) -> int | None:
        """Get an integer, logging a warning and using default if invalid."""
        value = self._raw(var)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid integer value for %s: %s", self.name(var), value)
            return default

    def get_float(self, var: str, default: float | None = None) -> float | None:
        """Get a float, logging a warning and using default if invalid."""
        value = self._raw(var)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            logger.warning("Invalid float value for %s: %s", self.name(var), value)
            return default

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Get a boolean. ``true``, ``1``, ``yes`` and ``on`` are true."""
        value = self._raw(var)
        if value is None:
            return default
        return value.lower() in ("true", "1", "yes", "on")

    def get_path(
        self, var: str, must_exist: bool = False, default: Path | None = None
    ) -> Path | None:
        """Get a path with tilde expansion.

        Args:
            var: Short setting name.
            must_exist: If True, a path that does not exist is ignored with
                a warning and ``default`` is returned.
            default: Value used when the variable is unset.

        Returns:
            Path object or default.
        """
        value = self._raw(var)
        if value is None:
            return default

        path = Path(value).expanduser()
        if must_exist and not path.exists():
            logger.warning(
                "Environment variable %s points to non-existent path: %s",
                self.name(var),
                value,
            )
            return default
        return path
