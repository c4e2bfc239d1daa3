"""Compressed screenshot of the current frame, copied to the clipboard.

The frame is saved as PNG by the player, compressed to JPEG with ffmpeg and
handed to a clipboard backend. Captures that stay above the size limit are
recompressed once at a lower resolution and quality.
"""

import logging
import random
import subprocess  # nosec B404 - only for SubprocessError
import time
from collections.abc import Callable
from pathlib import Path

from mpvcut.clipboard.backends import ClipboardBackend, select_backend
from mpvcut.config.models import ClipboardConfig
from mpvcut.core.formatting import format_command
from mpvcut.core.subprocess_utils import CommandRunner, run_command
from mpvcut.exceptions import PlayerCommandError, ToolNotFoundError
from mpvcut.executor.interface import cleanup_temp_file
from mpvcut.player.interface import PlayerHost
from mpvcut.player.osd import StatusReporter

logger = logging.getLogger(__name__)

# Time allowed for the player to write the screenshot file
SCREENSHOT_SETTLE_SECONDS = 0.1

FULL_SIZE = (1920, 1080)
REDUCED_SIZE = (1280, 720)

# Lowest quality the size-limited retry may drop to
RETRY_QUALITY_FLOOR = 70
RETRY_QUALITY_STEP = 15


def jpeg_qscale(quality: int) -> int:
    """Map a 1-100 JPEG quality to ffmpeg's 2-31 ``-q:v`` scale.

    Higher quality gives a lower qscale.

    Examples:
        >>> jpeg_qscale(100)
        2
        >>> jpeg_qscale(1)
        31
    """
    quality = max(1, min(100, quality))
    return round(2 + (100 - quality) * 29 / 99)


def scale_filter(max_width: int, max_height: int) -> str:
    """Filter that caps the frame size while keeping its aspect ratio."""
    return (
        f"scale='min({max_width},iw)':'min({max_height},ih)'"
        ":force_original_aspect_ratio=decrease"
    )


def temp_screenshot_paths(
    temp_directory: Path, now: float | None = None, rng: random.Random | None = None
) -> tuple[Path, Path]:
    """Unique (png, jpeg) temp file names for one capture."""
    timestamp = int(now if now is not None else time.time())
    suffix = (rng or random).randint(1000, 9999)  # nosec B311 - not for security
    stem = f"mpv_screenshot_{timestamp}_{suffix}"
    return temp_directory / f"{stem}.png", temp_directory / f"{stem}.jpg"


class ClipboardCapture:
    """Captures the current frame and puts a compressed JPEG on the clipboard.

    Args:
        player: The running player.
        reporter: OSD reporter.
        config: Clipboard settings.
        ffmpeg_path: Resolved ffmpeg executable.
        temp_directory: Where the temporary PNG and JPEG are written.
        runner: Subprocess runner.
        backend: Clipboard backend; selected from ``config`` when omitted.
        sleep: Sleep function used while waiting for the screenshot file.
    """

    def __init__(
        self,
        player: PlayerHost,
        reporter: StatusReporter,
        config: ClipboardConfig,
        ffmpeg_path: Path | None,
        temp_directory: Path,
        runner: CommandRunner = run_command,
        backend: ClipboardBackend | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.player = player
        self.reporter = reporter
        self.config = config
        self.ffmpeg_path = ffmpeg_path
        self.temp_directory = temp_directory
        self._runner = runner
        self._backend = backend
        self._sleep = sleep

    def build_compress_command(
        self, png: Path, jpeg: Path, size: tuple[int, int], quality: int
    ) -> list[str]:
        """Build the ffmpeg PNG to JPEG command."""
        return [
            str(self.ffmpeg_path),
            "-hide_banner",
            "-loglevel",
            "error",
            "-i",
            str(png),
            "-vf",
            scale_filter(*size),
            "-q:v",
            str(jpeg_qscale(quality)),
            "-y",
            str(jpeg),
        ]

    def _compress(
        self, png: Path, jpeg: Path, size: tuple[int, int], quality: int
    ) -> bool:
        cmd = self.build_compress_command(png, jpeg, size, quality)
        logger.info("Compressing with ffmpeg: %s", format_command(cmd))
        try:
            _, stderr, returncode = self._runner(cmd)
        except (OSError, subprocess.SubprocessError) as e:
            logger.error("ffmpeg execution failed: %s", e)
            return False
        if returncode != 0 or not jpeg.is_file():
            logger.error("ffmpeg error: %s", stderr.strip() or "unknown")
            return False
        return True

    def capture(self) -> int | None:
        """Capture, compress and copy the current frame.

        Returns:
            Size of the copied JPEG in KB, or None on failure.
        """
        if self.ffmpeg_path is None:
            self.reporter.error(
                "FFmpeg not found. Please install it and ensure it's in your PATH.",
                8,
            )
            return None

        backend = self._backend
        if backend is None:
            try:
                backend = select_backend(self.config.backend)
            except ToolNotFoundError as e:
                self.reporter.error(str(e))
                return None

        self.reporter.plain("\U0001f4f8 Capturing screenshot...", 2)
        png, jpeg = temp_screenshot_paths(self.temp_directory)
        try:
            return self._capture(backend, png, jpeg)
        finally:
            cleanup_temp_file(png)
            cleanup_temp_file(jpeg)

    def _capture(self, backend: ClipboardBackend, png: Path, jpeg: Path) -> int | None:
        try:
            self.player.command("screenshot-to-file", str(png), "video")
        except PlayerCommandError as e:
            logger.error("screenshot-to-file failed: %s", e.error)
            self.reporter.error("Failed to capture screenshot", 3)
            return None

        self._sleep(SCREENSHOT_SETTLE_SECONDS)
        if not png.is_file():
            self.reporter.error("Screenshot file not found", 3)
            return None
        logger.info("Screenshot captured: %s", png)

        quality = self.config.jpeg_quality
        if not self._compress(png, jpeg, FULL_SIZE, quality):
            self.reporter.error("Failed to compress screenshot", 3)
            return None

        size_kb = jpeg.stat().st_size // 1024
        logger.info("Compressed file size: %d KB", size_kb)

        if size_kb > self.config.max_size_kb:
            logger.info("File too large, reducing quality...")
            lower = max(RETRY_QUALITY_FLOOR, quality - RETRY_QUALITY_STEP)
            if self._compress(png, jpeg, REDUCED_SIZE, lower):
                size_kb = jpeg.stat().st_size // 1024
                logger.info("Re-compressed file size: %d KB", size_kb)

        logger.info("Copying to clipboard with %s", backend.name)
        if not backend.copy(jpeg, runner=self._runner):
            self.reporter.error("Failed to copy to clipboard", 3)
            return None

        self.reporter.success(f"Screenshot copied to clipboard ({size_kb} KB)", 3)
        return size_kb
