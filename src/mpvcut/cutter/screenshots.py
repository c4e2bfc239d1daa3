"""Still frames at the start and end marks of a selection."""

import logging
from pathlib import Path

from mpvcut.cutter.context import CutContext
from mpvcut.exceptions import OutputDirectoryError
from mpvcut.output.paths import (
    clean_filename,
    ensure_directory,
    resolve_output_directory,
    screenshot_filenames,
)
from mpvcut.player.interface import PlayerHost
from mpvcut.player.osd import StatusReporter

logger = logging.getLogger(__name__)

SEEK_FLAGS = "absolute+keyframes"


def take_screenshot_pair(
    player: PlayerHost, context: CutContext, reporter: StatusReporter
) -> tuple[Path, Path] | None:
    """Save a JPEG of the frame at each end of the selection.

    Playback is paused while seeking and resumed afterwards, and the player
    is returned to the position it was at before the capture.

    Returns:
        (start_file, end_file), or None if a precondition failed.
    """
    selection = context.selection
    if not selection.is_complete:
        reporter.error("Please set start and end times to take screenshots.")
        return None

    source = player.get_property_string("path")
    if not source:
        reporter.error("No video loaded.")
        return None

    directory = resolve_output_directory(
        source, context.location, context.default_directory
    )
    try:
        ensure_directory(directory)
    except OutputDirectoryError as e:
        logger.error("%s", e)
        reporter.error(
            f"Failed to create output directory for screenshots: {directory}"
        )
        return None

    start_name, end_name = screenshot_filenames(clean_filename(source), selection)
    start_file = directory / start_name
    end_file = directory / end_name

    reporter.info("Taking screenshots...")
    position = player.get_property("time-pos")

    player.set_property("pause", True)
    try:
        player.command("seek", selection.start, SEEK_FLAGS)
        player.command("screenshot-to-file", str(start_file))
        reporter.success(f"Start Screenshot: {start_file}", 3)

        player.command("seek", selection.end, SEEK_FLAGS)
        player.command("screenshot-to-file", str(end_file))
        reporter.success(f"End Screenshot: {end_file}", 3)
    finally:
        if isinstance(position, int | float):
            player.command("seek", position, SEEK_FLAGS)
        player.set_property("pause", False)

    logger.info("Screenshots taken: %s, %s", start_file, end_file)
    return start_file, end_file
