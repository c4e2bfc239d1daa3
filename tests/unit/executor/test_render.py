"""Unit tests for MpvRenderStage."""

from pathlib import Path

import pytest

from mpvcut.domain import OUTPUT_FORMATS, TrackRef, TrackSelection
from mpvcut.executor.render import MpvRenderStage, RenderRequest, encoder_options

MP4, MKV, WEBM, GIF = OUTPUT_FORMATS

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def stage(runner) -> MpvRenderStage:
    return MpvRenderStage(Path("/usr/bin/mpv"), runner=runner)


@pytest.fixture
def intermediate(tmp_path: Path) -> Path:
    return tmp_path / "mpvcut_intermediate.mp4"


def _request(intermediate: Path, **overrides) -> RenderRequest:
    values = {
        "source": "/videos/clip.mp4",
        "start": 10.0,
        "end": 15.5,
        "output_format": MP4,
        "crf": 18,
        "tracks": TrackSelection(audio=TrackRef("1")),
        "intermediate": intermediate,
    }
    values.update(overrides)
    return RenderRequest(**values)


# =============================================================================
# encoder_options
# =============================================================================


class TestEncoderOptions:
    """Tests for per-codec encoder options."""

    def test_libx264(self) -> None:
        """libx264 gets CRF plus the fast-decode preset."""
        assert encoder_options("libx264", 18) == (
            "crf=18,preset=medium,profile=main,level=3.1,tune=fastdecode"
        )

    def test_vp9(self) -> None:
        """VP9 gets CRF, speed and row multithreading."""
        assert encoder_options("libvpx-vp9", 23) == "crf=23,speed=2,threads=4,row-mt=1"

    def test_gif_has_none(self) -> None:
        """GIF takes no encoder options."""
        assert encoder_options("gif", 23) is None


# =============================================================================
# build_command
# =============================================================================


class TestBuildCommand:
    """Tests for mpv command construction."""

    def test_no_subtitle_high_quality(
        self, stage: MpvRenderStage, intermediate: Path
    ) -> None:
        """The full mpv command for a cut without subtitles."""
        cmd = stage.build_command(_request(intermediate))
        assert cmd == [
            "/usr/bin/mpv",
            "/videos/clip.mp4",
            "--start=10",
            "--end=15.5",
            "--vo=lavc",
            f"--o={intermediate}",
            "--of=mp4",
            "--ovc=libx264",
            "--ovcopts=crf=18,preset=medium,profile=main,level=3.1,tune=fastdecode",
            "--no-ocopy-metadata",
            "--quiet",
            "--no-sub",
            "--oac=aac",
            "--aid=1",
            "--vf=format=yuv420p",
        ]

    def test_internal_subtitle(self, stage: MpvRenderStage, intermediate: Path) -> None:
        """An internal subtitle is selected by id and burned with the sub filter."""
        tracks = TrackSelection(subtitle=TrackRef("2"), audio=TrackRef("1"))
        cmd = stage.build_command(_request(intermediate, tracks=tracks))
        assert "--sid=2" in cmd
        assert "--sub-ass=yes" in cmd
        assert "--sub-ass-force-style=Fonts=true" in cmd
        assert "--no-sub" not in cmd
        assert cmd[-1] == "--vf=sub,format=yuv420p"

    def test_external_subtitle_with_delay(
        self, stage: MpvRenderStage, intermediate: Path
    ) -> None:
        """An external subtitle is loaded by file with its delay."""
        tracks = TrackSelection(subtitle=TrackRef("/videos/clip.srt", external=True))
        cmd = stage.build_command(
            _request(intermediate, tracks=tracks, sub_delay=-0.25)
        )
        assert "--sub-file=/videos/clip.srt" in cmd
        assert "--sub-delay=-0.25" in cmd
        assert not any(arg.startswith("--sid=") for arg in cmd)

    def test_virtual_subtitle_not_burned(
        self, stage: MpvRenderStage, intermediate: Path
    ) -> None:
        """A virtual subtitle falls back to --no-sub."""
        tracks = TrackSelection(
            subtitle=TrackRef("edl://x.srt", external=True, virtual=True)
        )
        cmd = stage.build_command(_request(intermediate, tracks=tracks))
        assert "--no-sub" in cmd
        assert not any("edl://" in arg for arg in cmd)

    def test_user_filters_follow_sub(
        self, stage: MpvRenderStage, intermediate: Path
    ) -> None:
        """User video filters sit between sub and the pixel format."""
        tracks = TrackSelection(subtitle=TrackRef("1"))
        cmd = stage.build_command(
            _request(intermediate, tracks=tracks, video_filters="crop=100:100")
        )
        assert cmd[-1] == "--vf=sub,crop=100:100,format=yuv420p"

    def test_gif_has_no_audio(self, stage: MpvRenderStage, tmp_path: Path) -> None:
        """GIF renders without audio or encoder options."""
        cmd = stage.build_command(
            _request(tmp_path / "mpvcut_intermediate.gif", output_format=GIF)
        )
        assert "--no-audio" in cmd
        unexpected = ("--oac=", "--aid=", "--ovcopts=")
        assert not any(arg.startswith(unexpected) for arg in cmd)

    def test_default_audio_when_none_selected(
        self, stage: MpvRenderStage, intermediate: Path
    ) -> None:
        """Without a selected audio track the default one is encoded."""
        cmd = stage.build_command(_request(intermediate, tracks=TrackSelection()))
        assert "--oac=aac" in cmd
        assert not any(arg.startswith("--aid=") for arg in cmd)


# =============================================================================
# run
# =============================================================================


class TestRun:
    """Tests for running the render stage."""

    def test_success_produces_intermediate(
        self, stage: MpvRenderStage, runner, intermediate: Path
    ) -> None:
        """A successful render returns the intermediate path."""
        result = stage.run(_request(intermediate))
        assert result.success
        assert result.output_path == intermediate
        assert intermediate.is_file()
        assert len(runner.calls) == 1

    def test_stale_intermediate_removed_first(
        self, stage: MpvRenderStage, runner, intermediate: Path
    ) -> None:
        """A leftover intermediate is deleted before mpv runs."""
        intermediate.write_bytes(b"stale")
        runner.results["mpv"] = ("Error opening input", 1)
        result = stage.run(_request(intermediate))
        assert not result.success
        assert not intermediate.exists()

    def test_failure_reports_stderr(
        self, stage: MpvRenderStage, runner, intermediate: Path
    ) -> None:
        """A failed render carries stripped stderr."""
        runner.results["mpv"] = ("  Failed to open source\n", 2)
        result = stage.run(_request(intermediate))
        assert not result.success
        assert result.message == "Failed to open source"

    def test_failure_without_stderr(
        self, stage: MpvRenderStage, runner, intermediate: Path
    ) -> None:
        """A silent failure reports an unknown error."""
        runner.results["mpv"] = ("", 1)
        assert stage.run(_request(intermediate)).message == "Unknown error"

    def test_zero_exit_without_file_is_failure(self, intermediate: Path) -> None:
        """A zero exit without an output file counts as failure."""
        def silent(args, **kwargs):
            return "", "", 0

        stage = MpvRenderStage(Path("/usr/bin/mpv"), runner=silent)
        assert not stage.run(_request(intermediate)).success

    def test_launch_error(self, intermediate: Path) -> None:
        """A launch error is reported as an execution failure."""
        def missing(args, **kwargs):
            raise FileNotFoundError("mpv")

        stage = MpvRenderStage(Path("/usr/bin/mpv"), runner=missing)
        result = stage.run(_request(intermediate))
        assert not result.success
        assert result.message.startswith("mpv execution failed")
