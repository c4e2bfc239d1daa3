"""Root logger setup for mpvcut.

Every sink shares one formatter and one CutContextFilter, so a record
logged inside ``cut_context()`` carries its cut tag in the log file and on
stderr alike.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from mpvcut.logging.context import CutContextFilter
from mpvcut.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from mpvcut.config.models import LoggingConfig

TEXT_FORMAT = "%(asctime)s - %(cut_tag)s%(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def build_formatter(log_format: str) -> logging.Formatter:
    """Formatter for ``text`` or ``json`` output."""
    if log_format.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)


def open_log_file(config: LoggingConfig) -> RotatingFileHandler | None:
    """Open the rotating log file named by ``config.file``.

    Returns:
        The handler, or None when no file is configured or it cannot be
        opened. An open failure is written to stderr, since logging is not
        set up yet.
    """
    if not config.file:
        return None
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"Warning: Could not open log file {path}: {e}\n")
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger's handlers according to ``config``.

    Records go to the log file when one opens, and to stderr when
    ``include_stderr`` is set or there is no file to write to.
    """
    sinks: list[logging.Handler] = []
    log_file = open_log_file(config)
    if log_file is not None:
        sinks.append(log_file)
    if config.include_stderr or log_file is None:
        sinks.append(logging.StreamHandler(sys.stderr))

    formatter = build_formatter(config.format)
    cut_filter = CutContextFilter()
    for sink in sinks:
        sink.setFormatter(formatter)
        sink.addFilter(cut_filter)

    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()
    levels = logging.getLevelNamesMapping()
    root.setLevel(levels.get(config.level.upper(), logging.INFO))
    for sink in sinks:
        root.addHandler(sink)
