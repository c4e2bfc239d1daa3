"""Domain models and enums for mpvcut.

Usage:
    from mpvcut.domain import CutSelection, OutputFormat, QualityTier
"""

from .enums import CutState, OutputLocation, QualityTier, TrackKind
from .models import (
    OUTPUT_FORMATS,
    CutSelection,
    OutputFormat,
    TrackRef,
    TrackSelection,
)

__all__ = [
    # Models
    "CutSelection",
    "OUTPUT_FORMATS",
    "OutputFormat",
    "TrackRef",
    "TrackSelection",
    # Enums
    "CutState",
    "OutputLocation",
    "QualityTier",
    "TrackKind",
]
