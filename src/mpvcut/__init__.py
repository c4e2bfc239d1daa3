"""mpvcut - clip cutting, screenshots and clipboard export for mpv."""

__version__ = "0.4.0"
