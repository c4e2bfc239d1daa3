"""Finalize stage: ffmpeg trim-and-copy or remux into the final container.

Video and audio are always stream copied; the only exception is GIF, which
stream copy cannot produce, so it gets a palette filter pipeline instead.
"""

import logging
import subprocess  # nosec B404 - only for SubprocessError
from dataclasses import dataclass
from pathlib import Path

from mpvcut.core.formatting import format_command, format_seconds
from mpvcut.core.subprocess_utils import CommandRunner, run_command
from mpvcut.domain.models import OutputFormat
from mpvcut.executor.interface import StageResult

logger = logging.getLogger(__name__)

GIF_FILTER_GRAPH = (
    "fps=10,scale=500:-1:flags=lanczos,"
    "split[s0][s1];[s0]palettegen[p];[s1][p]paletteuse"
)


@dataclass(frozen=True)
class FinalizeRequest:
    """Parameters for one finalize run.

    Attributes:
        input_path: The original source (direct copy) or the intermediate.
        output_path: Final output file.
        output_format: Selected output format.
        trim: (start, end) when cutting straight from the source; None when
            the input is an already trimmed intermediate.
    """

    input_path: str
    output_path: Path
    output_format: OutputFormat
    trim: tuple[float, float] | None = None


class FFmpegFinalizeStage:
    """Produces the final output file with ffmpeg."""

    def __init__(
        self, ffmpeg_path: Path, runner: CommandRunner = run_command
    ) -> None:
        self.ffmpeg_path = ffmpeg_path
        self._runner = runner

    def build_command(self, request: FinalizeRequest) -> list[str]:
        """Build the ffmpeg command for a request.

        Returns:
            List of command line arguments.
        """
        cmd = [str(self.ffmpeg_path), "-hide_banner", "-loglevel", "error", "-y"]

        if request.trim is not None:
            start, end = request.trim
            cmd.extend(["-ss", format_seconds(start), "-to", format_seconds(end)])
        cmd.extend(["-i", request.input_path])

        if request.output_format.is_gif:
            cmd.extend(["-vf", GIF_FILTER_GRAPH, "-loop", "0"])
        else:
            cmd.extend(["-c:v", "copy", "-c:a", "copy"])
            if request.output_format.container == "mp4":
                cmd.extend(["-movflags", "+faststart"])
            if request.trim is None:
                cmd.extend(["-pix_fmt", "yuv420p"])

        cmd.append(str(request.output_path))
        return cmd

    def run(self, request: FinalizeRequest) -> StageResult:
        """Run ffmpeg for a request.

        The output file is left as ffmpeg left it on failure; it belongs to
        the caller.
        """
        cmd = self.build_command(request)
        logger.info("Finalizing with ffmpeg command: %s", format_command(cmd))

        try:
            _, stderr, returncode = self._runner(cmd)
        except (OSError, subprocess.SubprocessError) as e:
            return StageResult(success=False, message=f"ffmpeg execution failed: {e}")

        if returncode != 0:
            logger.error(
                "ffmpeg failed with exit code %d", returncode, extra={"stderr": stderr}
            )
            return StageResult.failed(stderr)

        return StageResult(success=True, output_path=request.output_path)
