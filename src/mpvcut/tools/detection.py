"""External tool detection.

Tools are resolved from an explicitly configured path first and from PATH
second. No installation directories are hardcoded.
"""

import logging
import re
import shutil
import subprocess  # nosec B404 - needed to query tool versions
from dataclasses import dataclass
from pathlib import Path

from mpvcut.core.subprocess_utils import run_command
from mpvcut.exceptions import ToolNotFoundError

logger = logging.getLogger(__name__)

# Timeout for version queries
DETECTION_TIMEOUT = 10

INSTALL_HINTS: dict[str, str] = {
    "ffmpeg": "Install ffmpeg and ensure it is in your PATH, or set "
    "MPVCUT_FFMPEG_PATH.",
    "mpv": "Install mpv and ensure it is in your PATH, or set MPVCUT_MPV_PATH.",
}

_VERSION_PATTERN = re.compile(r"(?:ffmpeg version|mpv) v?(\d[\w.\-+]*)", re.IGNORECASE)


@dataclass(frozen=True)
class ToolInfo:
    """Result of locating an external tool."""

    name: str
    path: Path | None
    version: str | None = None

    @property
    def available(self) -> bool:
        return self.path is not None


def find_tool(name: str, configured_path: Path | None = None) -> Path | None:
    """Find a tool executable.

    Args:
        name: Tool name (e.g., "ffmpeg").
        configured_path: Optional configured path override.

    Returns:
        Path to tool executable, or None if not found.
    """
    if configured_path is not None:
        if configured_path.exists():
            return configured_path
        logger.warning(
            "Configured %s path does not exist: %s; falling back to PATH",
            name,
            configured_path,
        )

    which_result = shutil.which(name)
    if which_result:
        return Path(which_result)

    return None


def require_tool(name: str, configured_path: Path | None = None) -> Path:
    """Get path to a required tool, raising an error if not available.

    Raises:
        ToolNotFoundError: If the tool is not available.
    """
    path = find_tool(name, configured_path)
    if path is None:
        raise ToolNotFoundError(name, INSTALL_HINTS.get(name, ""))
    return path


def detect_tool(name: str, configured_path: Path | None = None) -> ToolInfo:
    """Locate a tool and query its version string.

    The version is best effort: a tool that is found but does not answer
    ``-version`` is still reported as available.
    """
    path = find_tool(name, configured_path)
    if path is None:
        return ToolInfo(name=name, path=None)

    flag = "--version" if name == "mpv" else "-version"
    try:
        stdout, _, returncode = run_command([path, flag], timeout=DETECTION_TIMEOUT)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning("Could not query %s version: %s", name, e)
        return ToolInfo(name=name, path=path)

    version = None
    if returncode == 0:
        match = _VERSION_PATTERN.search(stdout)
        if match:
            version = match.group(1)
    return ToolInfo(name=name, path=path, version=version)
