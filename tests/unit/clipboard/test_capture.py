"""Unit tests for the compressed clipboard screenshot."""

import random
from pathlib import Path

import pytest

from mpvcut.clipboard.backends import BACKENDS
from mpvcut.clipboard.capture import (
    ClipboardCapture,
    jpeg_qscale,
    scale_filter,
    temp_screenshot_paths,
)
from mpvcut.config.models import ClipboardConfig
from mpvcut.player.osd import StatusReporter

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def writes_screenshot(player):
    """Make the fake player write the PNG that screenshot-to-file names."""

    def write(*args):
        Path(args[1]).write_bytes(b"\x89PNG")

    player.on_command["screenshot-to-file"] = write
    return player


@pytest.fixture
def make_capture(player, runner, tmp_path: Path):
    def factory(**kwargs) -> ClipboardCapture:
        kwargs.setdefault("config", ClipboardConfig())
        kwargs.setdefault("ffmpeg_path", Path("/usr/bin/ffmpeg"))
        kwargs.setdefault("backend", BACKENDS["xclip"])
        return ClipboardCapture(
            player,
            StatusReporter(player),
            temp_directory=tmp_path,
            runner=kwargs.pop("runner", runner),
            sleep=lambda seconds: None,
            **kwargs,
        )

    return factory


# =============================================================================
# Helpers
# =============================================================================


class TestHelpers:
    """Tests for quality mapping, scaling and temp names."""

    @pytest.mark.parametrize(("quality", "qscale"), [(100, 2), (85, 6), (1, 31)])
    def test_jpeg_qscale(self, quality: int, qscale: int) -> None:
        """JPEG quality maps onto ffmpeg's 2-31 qscale range."""
        assert jpeg_qscale(quality) == qscale

    def test_higher_quality_lower_qscale(self) -> None:
        """A higher quality gives a lower (better) qscale."""
        assert jpeg_qscale(90) < jpeg_qscale(70)

    def test_scale_filter(self) -> None:
        """The scale filter caps the frame while keeping its aspect ratio."""
        assert scale_filter(1920, 1080) == (
            "scale='min(1920,iw)':'min(1080,ih)':force_original_aspect_ratio=decrease"
        )

    def test_temp_paths(self, tmp_path: Path) -> None:
        """Temp names carry the epoch and share a stem across PNG and JPEG."""
        png, jpeg = temp_screenshot_paths(
            tmp_path, now=1700000000, rng=random.Random(1)
        )
        assert png.parent == tmp_path
        assert png.name.startswith("mpv_screenshot_1700000000_")
        assert png.suffix == ".png"
        assert jpeg == png.with_suffix(".jpg")


# =============================================================================
# capture
# =============================================================================


class TestCapture:
    """Tests for ClipboardCapture.capture."""

    def test_success(
        self, make_capture, writes_screenshot, runner, tmp_path: Path
    ) -> None:
        """A capture compresses, copies, reports the size and removes temp files."""
        player = writes_screenshot
        size = make_capture().capture()

        assert size == 1
        screenshot = player.commands[0]
        assert screenshot[0] == "screenshot-to-file"
        assert screenshot[2] == "video"

        compress, copy = runner.calls
        assert compress[0] == "/usr/bin/ffmpeg"
        assert compress[compress.index("-q:v") + 1] == "6"
        assert "min(1920,iw)" in compress[compress.index("-vf") + 1]
        assert copy[0] == "xclip"

        assert player.has_message("Capturing screenshot...")
        assert player.has_message("Screenshot copied to clipboard (1 KB)")
        assert list(tmp_path.glob("mpv_screenshot_*")) == []

    def test_oversized_capture_recompressed(
        self, make_capture, writes_screenshot, tmp_path: Path
    ) -> None:
        """An oversized JPEG is recompressed once at 1280x720 and lower quality."""
        calls = []

        def shrinking(args, **kwargs):
            cmd = [str(arg) for arg in args]
            calls.append(cmd)
            if cmd[0].endswith("ffmpeg"):
                size = 400 if len(calls) == 1 else 120
                Path(cmd[-1]).write_bytes(b"\0" * size * 1024)
            return "", "", 0

        size = make_capture(runner=shrinking).capture()

        assert size == 120
        first, retry = calls[0], calls[1]
        assert "min(1920,iw)" in first[first.index("-vf") + 1]
        assert "min(1280,iw)" in retry[retry.index("-vf") + 1]
        assert retry[retry.index("-q:v") + 1] == str(jpeg_qscale(70))

    def test_missing_screenshot_file(self, make_capture, player, runner) -> None:
        """No screenshot file on disk aborts before running ffmpeg."""
        assert make_capture().capture() is None
        assert player.has_message("Screenshot file not found")
        assert runner.calls == []

    def test_screenshot_command_fails(self, make_capture, player) -> None:
        """A rejected screenshot-to-file command is reported."""
        player.failing_commands.add("screenshot-to-file")
        assert make_capture().capture() is None
        assert player.has_message("Failed to capture screenshot")

    def test_compress_failure(
        self, make_capture, writes_screenshot, runner, tmp_path: Path
    ) -> None:
        """An ffmpeg failure is reported and temp files are removed."""
        runner.results["ffmpeg"] = ("Invalid PNG signature", 1)
        assert make_capture().capture() is None
        assert writes_screenshot.has_message("Failed to compress screenshot")
        assert list(tmp_path.glob("mpv_screenshot_*")) == []

    def test_clipboard_failure(self, make_capture, writes_screenshot, runner) -> None:
        """A backend failure is reported."""
        runner.results["xclip"] = ("Can't open display", 1)
        assert make_capture().capture() is None
        assert writes_screenshot.has_message("Failed to copy to clipboard")

    def test_no_ffmpeg(self, make_capture, player) -> None:
        """Without ffmpeg nothing is sent to the player."""
        assert make_capture(ffmpeg_path=None).capture() is None
        assert player.has_message("FFmpeg not found.")
        assert player.commands == []
