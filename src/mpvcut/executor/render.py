"""Render stage: headless mpv encode of the selected range.

Re-encoding is needed whenever the cut cannot be a stream copy: subtitle
burn-in, a CRF quality tier, or a format change. mpv renders with its own
subtitle renderer, so burned-in subtitles look exactly as they do in the
player, including the user's active video filters.
"""

import logging
import subprocess  # nosec B404 - only for SubprocessError
from dataclasses import dataclass
from pathlib import Path

from mpvcut.core.formatting import format_command, format_seconds
from mpvcut.core.subprocess_utils import CommandRunner, run_command
from mpvcut.domain.models import OutputFormat, TrackSelection
from mpvcut.executor.interface import StageResult, cleanup_temp_file

logger = logging.getLogger(__name__)

# Appended to every filter chain so downstream players can decode the result
PIXEL_FORMAT_FILTER = "format=yuv420p"

_ENCODER_OPTIONS: dict[str, str] = {
    "libx264": "preset=medium,profile=main,level=3.1,tune=fastdecode",
    "libvpx-vp9": "speed=2,threads=4,row-mt=1",
    "libaom-av1": "preset=medium",
}


def encoder_options(video_codec: str, crf: int) -> str | None:
    """Return the ``--ovcopts`` value for a codec, or None if it takes none."""
    extra = _ENCODER_OPTIONS.get(video_codec)
    if extra is None:
        return None
    return f"crf={crf},{extra}"


@dataclass(frozen=True)
class RenderRequest:
    """Everything the render stage needs for one cut."""

    source: str
    start: float
    end: float
    output_format: OutputFormat
    crf: int
    tracks: TrackSelection
    intermediate: Path
    sub_delay: float = 0.0
    video_filters: str | None = None


class MpvRenderStage:
    """Renders a time range of the source to the intermediate file with mpv."""

    def __init__(self, mpv_path: Path, runner: CommandRunner = run_command) -> None:
        self.mpv_path = mpv_path
        self._runner = runner

    def build_command(self, request: RenderRequest) -> list[str]:
        """Build the mpv encode command for a request.

        Args:
            request: Render parameters.

        Returns:
            List of command line arguments.
        """
        fmt = request.output_format
        cmd = [
            str(self.mpv_path),
            request.source,
            f"--start={format_seconds(request.start)}",
            f"--end={format_seconds(request.end)}",
            "--vo=lavc",
            f"--o={request.intermediate}",
            f"--of={fmt.container}",
            f"--ovc={fmt.video_codec}",
        ]
        options = encoder_options(fmt.video_codec, request.crf)
        if options:
            cmd.append(f"--ovcopts={options}")
        cmd.extend(["--no-ocopy-metadata", "--quiet"])

        filters: list[str] = []

        subtitle = request.tracks.burn_subtitle
        if subtitle is not None:
            filters.append("sub")
            cmd.extend(["--sub-ass=yes", "--sub-ass-force-style=Fonts=true"])
            if subtitle.external:
                cmd.append(f"--sub-file={subtitle.value}")
                logger.info("Using external subtitle: %s", subtitle.value)
            else:
                cmd.append(f"--sid={subtitle.value}")
                logger.info("Using internal subtitle track: %s", subtitle.value)
            if request.sub_delay:
                cmd.append(f"--sub-delay={format_seconds(request.sub_delay)}")
                logger.info("Applying sub-delay: %s seconds", request.sub_delay)
        else:
            logger.info("No subtitle to burn in; disabling subtitles in render")
            cmd.append("--no-sub")

        if fmt.has_audio:
            cmd.append(f"--oac={fmt.audio_codec}")
            audio = request.tracks.audio
            if audio is not None:
                cmd.append(f"--aid={audio.value}")
                logger.info("Using audio track: %s", audio.value)
            else:
                logger.info("No specific audio track selected, using default")
        else:
            logger.info("Format %s has no audio; skipping audio", fmt.container)
            cmd.append("--no-audio")

        if request.video_filters:
            filters.append(request.video_filters)
            logger.info("Applying user video filters: %s", request.video_filters)

        filters.append(PIXEL_FORMAT_FILTER)
        cmd.append(f"--vf={','.join(filters)}")
        return cmd

    def run(self, request: RenderRequest) -> StageResult:
        """Render the request to its intermediate file.

        A stale intermediate from an earlier cut is removed first. On failure
        any partial intermediate is removed as well.

        Returns:
            StageResult whose output_path is the intermediate on success.
        """
        cleanup_temp_file(request.intermediate)
        cmd = self.build_command(request)
        logger.info("Rendering video with mpv command: %s", format_command(cmd))

        try:
            _, stderr, returncode = self._runner(cmd)
        except (OSError, subprocess.SubprocessError) as e:
            cleanup_temp_file(request.intermediate)
            return StageResult(success=False, message=f"mpv execution failed: {e}")

        if returncode != 0 or not request.intermediate.is_file():
            logger.error(
                "Render failed with exit code %d", returncode, extra={"stderr": stderr}
            )
            cleanup_temp_file(request.intermediate)
            return StageResult.failed(stderr)

        logger.info("Video successfully rendered to: %s", request.intermediate)
        return StageResult(success=True, output_path=request.intermediate)
