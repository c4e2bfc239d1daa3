"""Process-wide cut state shared by every user action."""

from dataclasses import dataclass, field
from pathlib import Path

from mpvcut.config.models import OutputConfig
from mpvcut.domain.enums import CutState, OutputLocation, QualityTier
from mpvcut.domain.models import OUTPUT_FORMATS, CutSelection, OutputFormat


@dataclass
class CutContext:
    """Selection, policies and counter for the lifetime of the process.

    Mutated only by orchestrator actions; nothing here is persisted.
    """

    default_directory: Path
    temp_directory: Path
    selection: CutSelection = field(default_factory=CutSelection)
    quality: QualityTier = QualityTier.MEDIUM
    format_index: int = 0
    location: OutputLocation = OutputLocation.DEFAULT_DIRECTORY
    counter: int = 0
    state: CutState = CutState.IDLE
    source: str | None = None
    """Locator of the file the player last reported as loaded."""

    @classmethod
    def from_config(cls, config: OutputConfig) -> "CutContext":
        """Build the startup context from the output configuration."""
        containers = [fmt.container for fmt in OUTPUT_FORMATS]
        return cls(
            default_directory=config.default_directory.expanduser(),
            temp_directory=config.temp_directory.expanduser(),
            quality=QualityTier(config.default_quality),
            format_index=containers.index(config.default_format),
        )

    @property
    def output_format(self) -> OutputFormat:
        return OUTPUT_FORMATS[self.format_index]

    def advance_format(self) -> OutputFormat:
        """Select the next output format, wrapping after the last one."""
        self.format_index = (self.format_index + 1) % len(OUTPUT_FORMATS)
        return self.output_format
