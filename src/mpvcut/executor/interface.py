"""Stage results and temp file helpers shared by the render and finalize
stages."""

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error"


@dataclass(frozen=True)
class StageResult:
    """Result of one pipeline stage."""

    success: bool
    """True if the stage produced its output."""

    message: str = ""
    """Captured diagnostic text on failure; empty on success."""

    output_path: Path | None = None
    """File produced by the stage, if it succeeded."""

    @classmethod
    def failed(cls, stderr: str | None) -> "StageResult":
        """Build a failure result from captured stderr."""
        text = (stderr or "").strip()
        return cls(success=False, message=text or UNKNOWN_ERROR)


def cleanup_temp_file(path: Path) -> bool:
    """Remove a temporary file if it exists.

    Returns:
        True if a file was removed.
    """
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning("Could not remove temporary file %s: %s", path, e)
        return False
    logger.info("Temporary file cleaned up: %s", path)
    return True


def intermediate_path(temp_directory: Path, container: str) -> Path:
    """Fixed location of the reusable intermediate render file."""
    return temp_directory / f"mpvcut_intermediate.{container}"
