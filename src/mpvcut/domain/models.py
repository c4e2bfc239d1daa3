"""Domain models for mpvcut.

Plain dataclasses describing the cut selection, output formats and the
tracks chosen for a cut. None of these touch the player or the filesystem.
"""

from dataclasses import dataclass


@dataclass
class CutSelection:
    """Start and end marks for the next cut, in seconds.

    Mutable because marks are set one at a time by user actions.
    """

    start: float | None = None
    end: float | None = None

    @property
    def is_complete(self) -> bool:
        """True if both marks are set and end is after start."""
        return (
            self.start is not None and self.end is not None and self.end > self.start
        )

    def clear(self) -> None:
        """Forget both marks."""
        self.start = None
        self.end = None


@dataclass(frozen=True)
class OutputFormat:
    """Container and codecs used for a cut.

    ``audio_codec`` is None for video-only formats such as GIF.
    """

    container: str
    video_codec: str
    audio_codec: str | None = None

    @property
    def is_gif(self) -> bool:
        """True for the animated image format that needs a palette pipeline."""
        return self.container == "gif"

    @property
    def has_audio(self) -> bool:
        return self.audio_codec is not None

    def describe(self) -> str:
        """Return e.g. ``mp4 (Video: libx264, Audio: aac)``."""
        audio = f", Audio: {self.audio_codec}" if self.audio_codec else ""
        return f"{self.container} (Video: {self.video_codec}{audio})"


OUTPUT_FORMATS: tuple[OutputFormat, ...] = (
    OutputFormat("mp4", "libx264", "aac"),
    OutputFormat("mkv", "libx264", "aac"),
    OutputFormat("webm", "libvpx-vp9", "libopus"),
    OutputFormat("gif", "gif", None),
)
"""Formats cycled through by the output format toggle, in order."""


@dataclass(frozen=True)
class TrackRef:
    """Reference to a track that should be carried into the output.

    Attributes:
        value: Internal track id (as a string) or external file path.
        external: True if ``value`` is a path to an external file.
        virtual: True if ``value`` uses a synthetic scheme (edl://) that
            the headless renderer cannot burn in.
    """

    value: str
    external: bool = False
    virtual: bool = False

    @property
    def usable(self) -> bool:
        """True if this track can be passed to the renderer."""
        return not self.virtual


@dataclass(frozen=True)
class TrackSelection:
    """Subtitle and audio tracks resolved from live player state for one cut."""

    subtitle: TrackRef | None = None
    audio: TrackRef | None = None

    @property
    def burn_subtitle(self) -> TrackRef | None:
        """The subtitle to burn in, or None if there is no usable one."""
        if self.subtitle is not None and self.subtitle.usable:
            return self.subtitle
        return None
