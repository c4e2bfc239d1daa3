"""Unit tests for FFmpegFinalizeStage."""

from pathlib import Path

import pytest

from mpvcut.domain import OUTPUT_FORMATS
from mpvcut.executor.finalize import (
    GIF_FILTER_GRAPH,
    FFmpegFinalizeStage,
    FinalizeRequest,
)

MP4, MKV, WEBM, GIF = OUTPUT_FORMATS


@pytest.fixture
def stage(runner) -> FFmpegFinalizeStage:
    return FFmpegFinalizeStage(Path("/usr/bin/ffmpeg"), runner=runner)


class TestBuildCommand:
    """Tests for ffmpeg command construction."""

    def test_direct_copy_mp4(self, stage: FFmpegFinalizeStage) -> None:
        """A direct copy seeks, copies codecs and adds faststart for mp4."""
        request = FinalizeRequest(
            input_path="/videos/clip.mp4",
            output_path=Path("/videos/clip_01_10.00-15.50.mp4"),
            output_format=MP4,
            trim=(10.0, 15.5),
        )
        assert stage.build_command(request) == [
            "/usr/bin/ffmpeg",
            "-hide_banner",
            "-loglevel",
            "error",
            "-y",
            "-ss",
            "10",
            "-to",
            "15.5",
            "-i",
            "/videos/clip.mp4",
            "-c:v",
            "copy",
            "-c:a",
            "copy",
            "-movflags",
            "+faststart",
            "/videos/clip_01_10.00-15.50.mp4",
        ]

    def test_remux_intermediate_mkv(self, stage: FFmpegFinalizeStage) -> None:
        """Remuxing an mkv intermediate copies codecs without faststart."""
        request = FinalizeRequest(
            input_path="/tmp/mpvcut_intermediate.mkv",
            output_path=Path("/out/x.mkv"),
            output_format=MKV,
        )
        cmd = stage.build_command(request)
        assert "-ss" not in cmd
        assert "-movflags" not in cmd
        assert cmd[-3:] == ["-pix_fmt", "yuv420p", "/out/x.mkv"]

    def test_gif_uses_palette(self, stage: FFmpegFinalizeStage) -> None:
        """GIF output replaces codec copies with the palette filter."""
        request = FinalizeRequest(
            input_path="/tmp/mpvcut_intermediate.gif",
            output_path=Path("/out/x.gif"),
            output_format=GIF,
        )
        cmd = stage.build_command(request)
        assert cmd[cmd.index("-vf") + 1] == GIF_FILTER_GRAPH
        assert cmd[cmd.index("-loop") + 1] == "0"
        assert "copy" not in cmd


class TestRun:
    """Tests for running the finalize stage."""

    def test_success(self, stage: FFmpegFinalizeStage, tmp_path: Path) -> None:
        """A zero exit reports the output path."""
        output = tmp_path / "x.mp4"
        result = stage.run(
            FinalizeRequest("/videos/clip.mp4", output, MP4, trim=(0.0, 1.0))
        )
        assert result.success
        assert result.output_path == output

    def test_failure_carries_stderr(
        self, stage: FFmpegFinalizeStage, runner, tmp_path: Path
    ) -> None:
        """A non-zero exit carries the captured stderr."""
        runner.results["ffmpeg"] = ("Invalid data found when processing input", 1)
        result = stage.run(FinalizeRequest("/v.mp4", tmp_path / "x.mp4", MP4))
        assert not result.success
        assert result.message == "Invalid data found when processing input"
