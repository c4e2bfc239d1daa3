"""Structured logging module for mpvcut.

Provides configurable logging with JSON format support, file rotation and
per-cut context tagging.
"""

from mpvcut.logging.config import configure_logging
from mpvcut.logging.context import CutContextFilter, cut_context, get_cut_context
from mpvcut.logging.handlers import JSONFormatter

__all__ = [
    "CutContextFilter",
    "JSONFormatter",
    "configure_logging",
    "cut_context",
    "get_cut_context",
]
