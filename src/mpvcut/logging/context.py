"""Cut context for structured logging.

While a cut runs, every log record carries the cut number and source so a
log file interleaving several cuts stays readable.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_cut_number: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "cut_number", default=None
)
_cut_source: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "cut_source", default=None
)


def get_cut_context() -> tuple[int | None, str | None]:
    """Return (cut_number, source) for the cut in progress, if any."""
    return _cut_number.get(), _cut_source.get()


@contextmanager
def cut_context(number: int, source: str | None = None) -> Generator[None, None, None]:
    """Tag log records emitted inside the block with a cut number.

    Example:
        with cut_context(3, "/videos/clip.mp4"):
            logger.info("Rendering")  # "[cut 03] ... Rendering"
    """
    number_token = _cut_number.set(number)
    source_token = _cut_source.set(source)
    try:
        yield
    finally:
        _cut_number.reset(number_token)
        _cut_source.reset(source_token)


class CutContextFilter(logging.Filter):
    """Logging filter that injects the cut context into log records.

    Adds ``cut_number`` and ``cut_source`` for the JSON format and a compact
    ``cut_tag`` such as ``[cut 03] `` for the text format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        number, source = get_cut_context()
        record.cut_number = number
        record.cut_source = source
        record.cut_tag = f"[cut {number:02d}] " if number is not None else ""
        return True
