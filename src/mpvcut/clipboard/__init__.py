"""Compressed clipboard screenshots."""

from mpvcut.clipboard.backends import BACKENDS, ClipboardBackend, select_backend
from mpvcut.clipboard.capture import ClipboardCapture, jpeg_qscale

__all__ = [
    "BACKENDS",
    "ClipboardBackend",
    "ClipboardCapture",
    "jpeg_qscale",
    "select_backend",
]
