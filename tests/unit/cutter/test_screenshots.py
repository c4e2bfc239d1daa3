"""Unit tests for start/end screenshot capture."""

from pathlib import Path

import pytest

from mpvcut.cutter.screenshots import take_screenshot_pair
from mpvcut.domain import CutSelection, OutputLocation
from mpvcut.exceptions import PlayerCommandError
from mpvcut.player.osd import StatusReporter


def test_requires_both_marks(player, context) -> None:
    """Screenshots need both marks."""
    context.selection = CutSelection(start=1.0)
    assert take_screenshot_pair(player, context, StatusReporter(player)) is None
    assert player.has_message("Please set start and end times to take screenshots.")
    assert player.commands == []


def test_requires_loaded_video(player, context) -> None:
    """Screenshots need a loaded video."""
    context.selection = CutSelection(start=1.0, end=2.0)
    assert take_screenshot_pair(player, context, StatusReporter(player)) is None
    assert player.has_message("No video loaded.")


def test_captures_start_and_end(player, context, source_file: Path) -> None:
    """Both frames are captured, then position and playback are restored."""
    player.strings["path"] = str(source_file)
    player.properties["time-pos"] = 42.0
    context.selection = CutSelection(start=10.0, end=15.5)
    context.location = OutputLocation.BESIDE_SOURCE

    result = take_screenshot_pair(player, context, StatusReporter(player))

    start_file = source_file.parent / "clip_start_10.00.jpg"
    end_file = source_file.parent / "clip_end_15.50.jpg"
    assert result == (start_file, end_file)
    assert player.commands == [
        ("seek", 10.0, "absolute+keyframes"),
        ("screenshot-to-file", str(start_file)),
        ("seek", 15.5, "absolute+keyframes"),
        ("screenshot-to-file", str(end_file)),
        ("seek", 42.0, "absolute+keyframes"),
    ]
    assert player.set_calls == [("pause", True), ("pause", False)]


def test_stream_uses_default_directory(player, context) -> None:
    """Stream screenshots go to the default directory."""
    player.strings["path"] = "https://host/show.m3u8"
    context.selection = CutSelection(start=1.0, end=2.0)
    context.location = OutputLocation.BESIDE_SOURCE

    start_file, _ = take_screenshot_pair(player, context, StatusReporter(player))
    assert start_file == context.default_directory / "show_start_1.00.jpg"
    assert context.default_directory.is_dir()


def test_unpauses_when_capture_fails(player, context, source_file: Path) -> None:
    """Playback resumes even when a capture command fails."""
    player.strings["path"] = str(source_file)
    player.failing_commands.add("screenshot-to-file")
    context.selection = CutSelection(start=1.0, end=2.0)

    with pytest.raises(PlayerCommandError):
        take_screenshot_pair(player, context, StatusReporter(player))
    assert player.set_calls[-1] == ("pause", False)
