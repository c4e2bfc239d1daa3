"""Domain enums for mpvcut.

These enums describe the user-selectable policies and the cut lifecycle.
"""

from enum import Enum


class QualityTier(Enum):
    """Encoder quality tier selected by the user.

    UNTOUCHED means stream copy; every other tier re-encodes with a CRF.
    """

    UNTOUCHED = "untouched"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def crf(self) -> int | None:
        """CRF value for this tier, or None for stream copy."""
        return _QUALITY_CRF[self]

    @property
    def display_name(self) -> str:
        """Human-readable tier name used in OSD messages."""
        return _QUALITY_NAMES[self]

    def describe(self) -> str:
        """Return the tier name with its CRF, e.g. ``High Quality (CRF=18)``."""
        if self.crf is None:
            return self.display_name
        return f"{self.display_name} (CRF={self.crf})"


_QUALITY_CRF: dict[QualityTier, int | None] = {
    QualityTier.UNTOUCHED: None,
    QualityTier.HIGH: 18,
    QualityTier.MEDIUM: 23,
    QualityTier.LOW: 28,
}

_QUALITY_NAMES: dict[QualityTier, str] = {
    QualityTier.UNTOUCHED: "Original/Untouched",
    QualityTier.HIGH: "High Quality",
    QualityTier.MEDIUM: "Medium Quality",
    QualityTier.LOW: "Low Quality",
}


class OutputLocation(Enum):
    """Where finished cuts and screenshots are written."""

    BESIDE_SOURCE = "beside_source"  # Directory of the local source file
    DEFAULT_DIRECTORY = "default_directory"  # Configured fixed directory


class CutState(Enum):
    """Lifecycle of the cut orchestrator.

    SUCCEEDED and FAILED are transient: the next start mark begins a new
    cycle, and a kept selection can be cut again from either state.
    """

    IDLE = "idle"
    START_MARKED = "start_marked"
    RANGE_READY = "range_ready"
    CUTTING = "cutting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class TrackKind(Enum):
    """Track kinds the resolver understands, valued as mpv names them."""

    SUBTITLE = "sub"
    AUDIO = "audio"
