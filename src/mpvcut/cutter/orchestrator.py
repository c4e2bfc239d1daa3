"""Cut orchestrator: the state machine behind the cutting actions.

States run ``IDLE -> START_MARKED -> RANGE_READY -> CUTTING`` and end in
``SUCCEEDED`` or ``FAILED``. Every action reports its outcome on the OSD.
Precondition problems leave the state untouched. Once a cut has started,
any failure, including an exception, rolls the cut counter back and ends
in ``FAILED``.

All actions run synchronously on the caller's thread. A non-blocking lock
rejects actions that arrive while a cut is in flight.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from pathlib import Path

from mpvcut.bindings import DEFAULT_BINDINGS, KeyBinding, chord_for
from mpvcut.config.models import ToolPathsConfig
from mpvcut.core.formatting import format_mark
from mpvcut.core.subprocess_utils import CommandRunner, run_command
from mpvcut.cutter.context import CutContext
from mpvcut.cutter.planning import (
    DirectCopyPlan,
    RenderThenFinalizePlan,
    plan_cut,
)
from mpvcut.cutter.screenshots import take_screenshot_pair
from mpvcut.domain.enums import CutState, OutputLocation, QualityTier
from mpvcut.domain.models import TrackSelection
from mpvcut.exceptions import MpvcutError, OutputDirectoryError
from mpvcut.executor.finalize import FFmpegFinalizeStage, FinalizeRequest
from mpvcut.executor.interface import (
    StageResult,
    cleanup_temp_file,
    intermediate_path,
)
from mpvcut.executor.render import MpvRenderStage, RenderRequest
from mpvcut.logging.context import cut_context
from mpvcut.output.paths import (
    clean_filename,
    cut_filename,
    ensure_directory,
    is_network_stream,
    resolve_output_directory,
)
from mpvcut.player.interface import PlayerHost
from mpvcut.player.osd import StatusReporter
from mpvcut.player.tracks import resolve_tracks
from mpvcut.tools.detection import find_tool

logger = logging.getLogger(__name__)

ToolLocator = Callable[[str, Path | None], Path | None]

# OSD duration for "in progress" messages; the next message replaces them
PROGRESS_DURATION = 60
HELP_DURATION = 10

GIF_AUDIO_WARNING = "Warning: GIF output is video-only. Audio will be ignored."


def _as_seconds(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return float(value)


class CutOrchestrator:
    """Runs the cutting actions against a player.

    Args:
        player: The running player.
        context: Process-wide selection and policies.
        tools: Configured tool paths.
        reporter: OSD reporter; defaults to one for ``player``.
        runner: Subprocess runner handed to the stages.
        locate_tool: Tool lookup, ``(name, configured_path) -> path``.
        bindings: Key bindings named in messages and the help overlay.
    """

    def __init__(
        self,
        player: PlayerHost,
        context: CutContext,
        tools: ToolPathsConfig | None = None,
        reporter: StatusReporter | None = None,
        runner: CommandRunner = run_command,
        locate_tool: ToolLocator = find_tool,
        bindings: Sequence[KeyBinding] = DEFAULT_BINDINGS,
    ) -> None:
        self.player = player
        self.context = context
        self.tools = tools or ToolPathsConfig()
        self.reporter = reporter or StatusReporter(player)
        self._runner = runner
        self._locate_tool = locate_tool
        self.bindings = tuple(bindings)
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def busy(self) -> bool:
        """True while a cut is running."""
        return self._lock.locked()

    def _reject_if_busy(self) -> bool:
        if self.busy:
            self.reporter.info("A cut is already in progress. Please wait.")
            return True
        return False

    def _hint(self, action: str) -> str:
        return chord_for(self.bindings, action)

    def _time_pos(self) -> float | None:
        return _as_seconds(self.player.get_property("time-pos"))

    def _source(self) -> str | None:
        return self.player.get_property_string("path") or None

    # ------------------------------------------------------------------
    # Marks
    # ------------------------------------------------------------------

    def mark_start(self) -> bool:
        """Mark the current position as the cut start.

        Any previous selection is discarded once the position is known.

        Returns:
            True if the start mark was set.
        """
        if self._reject_if_busy():
            return False

        position = self._time_pos()
        if position is None:
            self.reporter.error(
                "Failed to get start time. Make sure a video is playing."
            )
            return False

        selection = self.context.selection
        selection.clear()
        selection.start = position
        self.context.state = CutState.START_MARKED
        self.reporter.info(f"⏱️ Start Time: {position:.2f} seconds")
        return True

    def mark_end(self) -> bool:
        """Mark the current position as the cut end.

        Returns:
            True if the selection is now ready to cut.
        """
        if self._reject_if_busy():
            return False

        selection = self.context.selection
        if selection.start is None:
            self.reporter.error(
                f"Please set start time first ({self._hint('set_start_time')})."
            )
            return False

        position = self._time_pos()
        if position is None:
            self.reporter.error("Failed to get end time.")
            return False

        if position <= selection.start:
            selection.end = None
            self.context.state = CutState.START_MARKED
            self.reporter.error("End time must be after start time.")
            return False

        selection.end = position
        self.context.state = CutState.RANGE_READY
        self.reporter.info(f"⏱️ End Time: {position:.2f} seconds")
        return True

    # ------------------------------------------------------------------
    # Cutting
    # ------------------------------------------------------------------

    def cut(self) -> Path | None:
        """Cut the selected range to a new file.

        Returns:
            Path of the finished cut, or None if nothing was produced.
        """
        if not self._lock.acquire(blocking=False):
            self.reporter.info("A cut is already in progress. Please wait.")
            return None
        try:
            return self._cut()
        finally:
            self._lock.release()

    def _cut(self) -> Path | None:
        context = self.context
        selection = context.selection

        if not selection.is_complete:
            self.reporter.error(
                "Please set start and end times "
                f"({self._hint('set_start_time')} / {self._hint('set_end_time')})."
            )
            return None

        source = self._source()
        if source is None:
            self.reporter.error("No video loaded.")
            return None

        ffmpeg_path = self._locate_tool("ffmpeg", self.tools.ffmpeg)
        if ffmpeg_path is None:
            self.reporter.error(
                "FFmpeg not found. Please install it and ensure it's in your PATH.",
                8,
            )
            return None

        if is_network_stream(source):
            context.location = OutputLocation.DEFAULT_DIRECTORY

        directory = resolve_output_directory(
            source, context.location, context.default_directory
        )
        try:
            ensure_directory(directory)
        except OutputDirectoryError as e:
            logger.error("%s", e)
            self.reporter.error(f"Failed to create output directory: {directory}")
            return None

        tracks = resolve_tracks(self.player)
        if tracks.subtitle is not None and tracks.subtitle.virtual:
            self.reporter.info(
                "Warning: Complex subtitle (edl://) detected. "
                "Skipping subtitle embedding to prevent hangs.",
                6,
            )

        plan = plan_cut(context.quality, tracks)
        intermediate = intermediate_path(
            context.temp_directory, context.output_format.container
        )

        mpv_path = None
        render_request = None
        if isinstance(plan, RenderThenFinalizePlan):
            mpv_path = self._locate_tool("mpv", self.tools.mpv)
            if mpv_path is None:
                self.reporter.error(
                    "mpv not found. It is needed to re-encode; install it or "
                    "set MPVCUT_MPV_PATH.",
                    8,
                )
                return None
            render_request = self._render_request(plan, source, tracks, intermediate)

        context.counter += 1
        context.state = CutState.CUTTING
        output_path = directory / cut_filename(
            clean_filename(source), context.counter, selection, context.output_format
        )

        result: StageResult | None = None
        with cut_context(context.counter, source):
            logger.info("Original path: %s", source)
            logger.info("Final output file: %s", output_path)
            try:
                if isinstance(plan, DirectCopyPlan):
                    result = self._run_direct_copy(ffmpeg_path, source, output_path)
                else:
                    assert mpv_path is not None and render_request is not None
                    result = self._run_render_then_finalize(
                        plan, render_request, mpv_path, ffmpeg_path, output_path
                    )
            except MpvcutError as e:
                logger.exception("Cut aborted")
                self.reporter.error(f"Video cut failed: {e}", 8)
            finally:
                cleanup_temp_file(intermediate)
                if result is None or not result.success:
                    context.counter -= 1
                    context.state = CutState.FAILED

        if result is None or not result.success:
            return None
        context.state = CutState.SUCCEEDED
        self.reporter.success(f"Video cut saved successfully: {output_path}", 8)
        return output_path

    def _render_request(
        self,
        plan: RenderThenFinalizePlan,
        source: str,
        tracks: TrackSelection,
        intermediate: Path,
    ) -> RenderRequest:
        selection = self.context.selection
        assert selection.start is not None and selection.end is not None
        return RenderRequest(
            source=source,
            start=selection.start,
            end=selection.end,
            output_format=self.context.output_format,
            crf=plan.crf,
            tracks=tracks,
            intermediate=intermediate,
            sub_delay=_as_seconds(self.player.get_property("sub-delay")) or 0.0,
            video_filters=self.player.get_property_string("vf") or None,
        )

    def _run_direct_copy(
        self, ffmpeg_path: Path, source: str, output_path: Path
    ) -> StageResult:
        selection = self.context.selection
        output_format = self.context.output_format
        self.reporter.info("Cutting video (Direct Copy)...", PROGRESS_DURATION)
        if output_format.is_gif:
            self.reporter.info(GIF_AUDIO_WARNING, 5)

        assert selection.start is not None and selection.end is not None
        stage = FFmpegFinalizeStage(ffmpeg_path, runner=self._runner)
        result = stage.run(
            FinalizeRequest(
                input_path=source,
                output_path=output_path,
                output_format=output_format,
                trim=(selection.start, selection.end),
            )
        )
        if not result.success:
            self.reporter.error(f"Video cut failed: {result.message}", 8)
        return result

    def _run_render_then_finalize(
        self,
        plan: RenderThenFinalizePlan,
        request: RenderRequest,
        mpv_path: Path,
        ffmpeg_path: Path,
        output_path: Path,
    ) -> StageResult:
        output_format = request.output_format

        if plan.escalated:
            self.reporter.info(
                "Subs enabled, can't use 'untouched'. Re-encoding at High quality.", 6
            )

        self.reporter.info("Step 1/2: Rendering video...", PROGRESS_DURATION)
        render = MpvRenderStage(mpv_path, runner=self._runner)
        rendered = render.run(request)
        if not rendered.success or rendered.output_path is None:
            self.reporter.error(f"Video rendering failed: {rendered.message}")
            return rendered
        self.reporter.info("Step 1/2: Render complete.", 2)

        self.reporter.info("Step 2/2: Finalizing cut...", PROGRESS_DURATION)
        if output_format.is_gif:
            self.reporter.info(GIF_AUDIO_WARNING, 5)

        finalize = FFmpegFinalizeStage(ffmpeg_path, runner=self._runner)
        result = finalize.run(
            FinalizeRequest(
                input_path=str(rendered.output_path),
                output_path=output_path,
                output_format=output_format,
            )
        )
        if not result.success:
            self.reporter.error(f"Finalizing video cut failed: {result.message}", 8)
        return result

    # ------------------------------------------------------------------
    # Screenshots
    # ------------------------------------------------------------------

    def take_screenshots(self) -> tuple[Path, Path] | None:
        """Save JPEG frames at the start and end marks."""
        if self._reject_if_busy():
            return None
        return take_screenshot_pair(self.player, self.context, self.reporter)

    # ------------------------------------------------------------------
    # Policies
    # ------------------------------------------------------------------

    def set_quality(self, tier: QualityTier) -> None:
        """Select the quality tier for subsequent cuts."""
        self.context.quality = tier
        self.reporter.info(f"Video Quality: {tier.describe()}")

    def toggle_output_format(self) -> None:
        """Advance to the next output format."""
        output_format = self.context.advance_format()
        self.reporter.info(f"Output Format: {output_format.describe()}", 4)
        logger.info(
            "Set output format to: %s, Video Codec: %s, Audio Codec: %s",
            output_format.container,
            output_format.video_codec,
            output_format.audio_codec,
        )
        if output_format.is_gif:
            audio = self.player.get_property_string("aid")
            if audio not in (None, "", "no"):
                self.reporter.info(GIF_AUDIO_WARNING, 5)

    def toggle_output_location(self) -> None:
        """Switch between the source's directory and the default directory.

        Streams always use the default directory, so this is a no-op for them.
        """
        context = self.context
        source = self._source()
        if source is not None and is_network_stream(source):
            context.location = OutputLocation.DEFAULT_DIRECTORY
            self.reporter.info(
                "Cannot change output directory for streams. Always saves to "
                f"{context.default_directory}."
            )
            return

        if context.location is OutputLocation.DEFAULT_DIRECTORY:
            context.location = OutputLocation.BESIDE_SOURCE
            self.reporter.info("Output path: Source file directory.")
        else:
            context.location = OutputLocation.DEFAULT_DIRECTORY
            self.reporter.info(f"Output path: {context.default_directory}.")

    def on_path_changed(self, source: str | None) -> None:
        """React to the player loading a new source.

        Streams force the default directory; local files start out saving
        beside the source. Marks taken on a different source are dropped.
        """
        if not source:
            return

        context = self.context
        if context.source is not None and source != context.source:
            if not self.busy:
                context.selection.clear()
                context.state = CutState.IDLE
                logger.info("Source changed; cleared cut selection")
        context.source = source

        if is_network_stream(source):
            context.location = OutputLocation.DEFAULT_DIRECTORY
        else:
            context.location = OutputLocation.BESIDE_SOURCE

    # ------------------------------------------------------------------
    # Help
    # ------------------------------------------------------------------

    def help_text(self) -> str:
        """Current selection, policies and key bindings as overlay text."""
        context = self.context
        lines = [
            "\U0001f3ac MPV Video Cutter Help:",
            f"  Selected Cut: {format_mark(context.selection.start)} - "
            f"{format_mark(context.selection.end)} seconds",
            f"  Quality: {context.quality.describe()}",
            f"  Format: {context.output_format.describe()}",
        ]
        for binding in self.bindings:
            if binding.chord:
                lines.append(f"  {binding.chord}: {binding.description}")
        return "\n".join(lines)

    def show_help(self) -> None:
        """Show the help overlay for 10 seconds."""
        self.reporter.plain(self.help_text(), HELP_DURATION)
