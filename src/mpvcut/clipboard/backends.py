"""Clipboard backends for JPEG images.

Each backend wraps one command line tool:

- osascript: macOS, reads the file into the clipboard as a JPEG picture.
- wl-copy: Wayland, takes the image on stdin.
- xclip: X11, reads the image from a file.
"""

import logging
import os
import shutil
import subprocess  # nosec B404 - only for SubprocessError
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

from mpvcut.core.subprocess_utils import CommandRunner, run_command
from mpvcut.exceptions import ToolNotFoundError

logger = logging.getLogger(__name__)

Which = Callable[[str], str | None]


@dataclass(frozen=True)
class ClipboardBackend:
    """A command that puts a JPEG file on the system clipboard."""

    name: str
    binary: str
    reads_stdin: bool = False

    def build_command(self, image: Path) -> list[str]:
        """Build the command line for copying ``image``."""
        if self.name == "osascript":
            script = (
                f'set the clipboard to (read (POSIX file "{image}") as JPEG picture)'
            )
            return [self.binary, "-e", script]
        if self.name == "wl-copy":
            return [self.binary, "--type", "image/jpeg"]
        return [
            self.binary, "-selection", "clipboard", "-t", "image/jpeg", "-i", str(image)
        ]

    def copy(self, image: Path, runner: CommandRunner = run_command) -> bool:
        """Copy ``image`` to the clipboard.

        Returns:
            True if the backend command succeeded.
        """
        cmd = self.build_command(image)
        try:
            input_bytes = image.read_bytes() if self.reads_stdin else None
            _, stderr, returncode = runner(cmd, input_bytes=input_bytes)
        except (OSError, subprocess.SubprocessError) as e:
            logger.error("%s failed: %s", self.name, e)
            return False
        if returncode != 0:
            logger.error(
                "%s exited with code %d",
                self.name,
                returncode,
                extra={"stderr": stderr},
            )
            return False
        return True


BACKENDS: dict[str, ClipboardBackend] = {
    "osascript": ClipboardBackend("osascript", "osascript"),
    "wl-copy": ClipboardBackend("wl-copy", "wl-copy", reads_stdin=True),
    "xclip": ClipboardBackend("xclip", "xclip"),
}


def _preferred_order(platform: str, env: Mapping[str, str]) -> list[str]:
    if platform == "darwin":
        return ["osascript", "wl-copy", "xclip"]
    if env.get("WAYLAND_DISPLAY"):
        return ["wl-copy", "xclip", "osascript"]
    return ["xclip", "wl-copy", "osascript"]


def select_backend(
    name: str = "auto",
    which: Which = shutil.which,
    platform: str | None = None,
    env: Mapping[str, str] | None = None,
) -> ClipboardBackend:
    """Pick the clipboard backend to use.

    Args:
        name: Backend name, or ``auto`` to pick the first available one for
            the current platform.
        which: Executable lookup, ``shutil.which`` by default.
        platform: Platform string; defaults to ``sys.platform``.
        env: Environment; defaults to ``os.environ``.

    Raises:
        ToolNotFoundError: If the requested (or any) backend is not installed.
    """
    if name != "auto":
        backend = BACKENDS[name]
        if which(backend.binary) is None:
            raise ToolNotFoundError(backend.binary)
        return backend

    order = _preferred_order(
        platform if platform is not None else sys.platform,
        env if env is not None else os.environ,
    )
    for candidate in order:
        backend = BACKENDS[candidate]
        if which(backend.binary) is not None:
            logger.debug("Selected clipboard backend %s", backend.name)
            return backend

    raise ToolNotFoundError(
        "clipboard", "Install wl-clipboard (Wayland) or xclip (X11)."
    )
