"""Output path planning."""

from mpvcut.output.paths import (
    clean_filename,
    cut_filename,
    ensure_directory,
    is_network_stream,
    resolve_output_directory,
    screenshot_filenames,
)

__all__ = [
    "clean_filename",
    "cut_filename",
    "ensure_directory",
    "is_network_stream",
    "resolve_output_directory",
    "screenshot_filenames",
]
