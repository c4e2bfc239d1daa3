"""Configuration data models.

This module defines dataclasses for mpvcut configuration options.
"""

import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from mpvcut.domain.enums import QualityTier
from mpvcut.domain.models import OUTPUT_FORMATS


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    All paths are optional. If not specified, tools are looked up in PATH.
    """

    ffmpeg: Path | None = None
    mpv: Path | None = None


@dataclass
class OutputConfig:
    """Configuration for where cuts, screenshots and temp files go."""

    default_directory: Path = field(
        default_factory=lambda: Path.home() / "Desktop" / "mpvstreamcut"
    )
    """Fixed output directory, always used for network streams."""

    temp_directory: Path = field(
        default_factory=lambda: Path(tempfile.gettempdir())
    )
    """Directory holding the reusable intermediate render file."""

    default_quality: str = QualityTier.MEDIUM.value
    """Quality tier selected at startup."""

    default_format: str = OUTPUT_FORMATS[0].container
    """Container of the output format selected at startup."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_qualities = {tier.value for tier in QualityTier}
        if self.default_quality not in valid_qualities:
            raise ValueError(
                f"default_quality must be one of {sorted(valid_qualities)}, "
                f"got {self.default_quality}"
            )
        valid_formats = [fmt.container for fmt in OUTPUT_FORMATS]
        if self.default_format not in valid_formats:
            raise ValueError(
                f"default_format must be one of {valid_formats}, "
                f"got {self.default_format}"
            )


@dataclass
class ClipboardConfig:
    """Configuration for the compressed clipboard screenshot."""

    # Backend: auto, osascript, wl-copy or xclip
    backend: str = "auto"

    # JPEG quality 1-100
    jpeg_quality: int = 85

    # Size above which the capture is recompressed at a lower resolution
    max_size_kb: int = 300

    # Optional key chord; the action is always reachable via script-message
    key: str | None = None

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_backends = {"auto", "osascript", "wl-copy", "xclip"}
        if self.backend not in valid_backends:
            raise ValueError(
                f"backend must be one of {sorted(valid_backends)}, got {self.backend}"
            )
        if not 1 <= self.jpeg_quality <= 100:
            raise ValueError(
                f"jpeg_quality must be between 1 and 100, got {self.jpeg_quality}"
            )
        if self.max_size_kb < 1:
            raise ValueError(f"max_size_kb must be positive, got {self.max_size_kb}")


@dataclass
class IpcConfig:
    """Configuration for the mpv JSON IPC connection."""

    socket: Path = Path("/tmp/mpvsocket")  # nosec B108 - mpv's documented default

    # Seconds to wait for the socket to accept a connection
    connect_timeout: float = 5.0

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.connect_timeout <= 0:
            raise ValueError(
                f"connect_timeout must be positive, got {self.connect_timeout}"
            )


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class MpvcutConfig:
    """Main configuration container for mpvcut.

    Aggregates all configuration sections.
    """

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    clipboard: ClipboardConfig = field(default_factory=ClipboardConfig)
    ipc: IpcConfig = field(default_factory=IpcConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
