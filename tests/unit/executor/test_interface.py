"""Unit tests for stage results and temp file helpers."""

from pathlib import Path

from mpvcut.executor.interface import (
    StageResult,
    cleanup_temp_file,
    intermediate_path,
)


def test_failed_uses_stripped_stderr() -> None:
    """failed() strips whitespace around stderr."""
    assert StageResult.failed("  boom \n").message == "boom"


def test_failed_without_stderr() -> None:
    """failed() without stderr reports an unknown error."""
    result = StageResult.failed(None)
    assert not result.success
    assert result.message == "Unknown error"


def test_cleanup_removes_file(tmp_path: Path) -> None:
    """cleanup_temp_file deletes an existing file."""
    path = tmp_path / "x.mp4"
    path.write_bytes(b"x")
    assert cleanup_temp_file(path)
    assert not path.exists()


def test_cleanup_missing_file(tmp_path: Path) -> None:
    """cleanup_temp_file returns False for a missing file."""
    assert not cleanup_temp_file(tmp_path / "missing.mp4")


def test_intermediate_path_per_container(tmp_path: Path) -> None:
    """The intermediate name carries the container extension."""
    assert intermediate_path(tmp_path, "webm") == tmp_path / "mpvcut_intermediate.webm"
