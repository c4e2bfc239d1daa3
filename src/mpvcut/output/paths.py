"""Output path planning for cuts and screenshots.

Source locators are either local paths or network URLs. Network sources
have no meaningful "beside the source" location, so they always resolve to
the configured default directory.
"""

import logging
import re
from pathlib import Path
from urllib.parse import unquote, urlsplit

from mpvcut.domain.enums import OutputLocation
from mpvcut.domain.models import CutSelection, OutputFormat
from mpvcut.exceptions import OutputDirectoryError

logger = logging.getLogger(__name__)

_STREAM_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
_ILLEGAL_CHARS = re.compile(r'[<>:"/\\|?*]')
_SEPARATORS = re.compile(r"[\\/]")
_STREAM_EXTENSION = re.compile(r"\.\w+$")

STREAM_FALLBACK_NAME = "stream"


def is_network_stream(locator: str) -> bool:
    """True if the locator is an http(s) URL."""
    return bool(_STREAM_PATTERN.match(locator))


def clean_filename(locator: str) -> str:
    """Derive a filesystem-safe base name from a path or URL.

    Network: last URL path segment, query removed, percent-decoded,
    extension removed; ``stream`` if nothing is left. Local: file name
    without its extension. Characters illegal in file names become ``_``.

    Examples:
        >>> clean_filename("/videos/clip.mp4")
        'clip'
        >>> clean_filename("https://host/a/My%20Show.m3u8?token=1")
        'My Show'
    """
    if is_network_stream(locator):
        segment = urlsplit(locator).path.rsplit("/", 1)[-1]
        name = _STREAM_EXTENSION.sub("", unquote(segment))
        if not name:
            name = STREAM_FALLBACK_NAME
    else:
        base = _SEPARATORS.split(locator)[-1]
        stem, dot, _ = base.rpartition(".")
        name = stem if dot and stem else base
        # ".hidden" and ".hidden.mp4" both become "hidden"
        name = name.lstrip(".") or name

    return _ILLEGAL_CHARS.sub("_", name)


def resolve_output_directory(
    locator: str, location: OutputLocation, default_directory: Path
) -> Path:
    """Pick the output directory for a source.

    Network streams ignore ``location`` and use ``default_directory``.
    """
    if is_network_stream(locator) or location is OutputLocation.DEFAULT_DIRECTORY:
        return default_directory
    return Path(locator).parent


def ensure_directory(directory: Path) -> Path:
    """Create ``directory`` (and parents) if it does not exist.

    Raises:
        OutputDirectoryError: If the directory cannot be created.
    """
    if directory.is_dir():
        return directory
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputDirectoryError(directory, str(e)) from e
    logger.info("Created output directory %s", directory)
    return directory


def cut_filename(
    clean_name: str, counter: int, selection: CutSelection, output_format: OutputFormat
) -> str:
    """Build ``<name>_<NN>_<start>-<end>.<ext>`` for a cut."""
    return (
        f"{clean_name}_{counter:02d}_{selection.start:.2f}-{selection.end:.2f}"
        f".{output_format.container}"
    )


def screenshot_filenames(clean_name: str, selection: CutSelection) -> tuple[str, str]:
    """Build the start and end screenshot names for a selection."""
    return (
        f"{clean_name}_start_{selection.start:.2f}.jpg",
        f"{clean_name}_end_{selection.end:.2f}.jpg",
    )

