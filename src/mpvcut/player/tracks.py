"""Track resolution from live player state.

Decides which subtitle and audio tracks of the loaded source should be
carried into a cut. The rules:

- Subtitles: an explicit ``sid=no`` always wins and yields no track.
  Otherwise the active track is used (its file path if it was loaded
  externally, its id if internal). Without an active track, fall back to an
  external subtitle file from ``sub-files`` that exists on disk, then to the
  internal subtitle track flagged default.
- Audio: the active ``aid`` track if there is one; otherwise None and the
  renderer uses the source default.

References using the ``edl://`` scheme are marked virtual; the renderer hangs
on them, so callers must not burn them in.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from mpvcut.domain.enums import TrackKind
from mpvcut.domain.models import TrackRef, TrackSelection
from mpvcut.player.interface import PlayerHost

logger = logging.getLogger(__name__)

VIRTUAL_SCHEMES: tuple[str, ...] = ("edl://",)

_SELECTION_PROPERTY: dict[TrackKind, str] = {
    TrackKind.SUBTITLE: "sid",
    TrackKind.AUDIO: "aid",
}

# Values of sid/aid that do not name a track
_NO_TRACK_VALUES = frozenset({"", "no", "false"})


class TrackEntry(BaseModel):
    """One entry of mpv's ``track-list`` property."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: int
    type: str
    selected: bool = False
    default: bool = False
    external: bool = False
    external_filename: str | None = Field(default=None, alias="external-filename")
    title: str | None = None
    lang: str | None = None
    codec: str | None = None


def parse_track_list(raw: object) -> list[TrackEntry]:
    """Validate a raw ``track-list`` value into TrackEntry objects.

    Entries that fail validation are skipped.
    """
    if not isinstance(raw, list):
        return []

    tracks: list[TrackEntry] = []
    for item in raw:
        try:
            tracks.append(TrackEntry.model_validate(item))
        except ValidationError as e:
            logger.debug("Skipping malformed track-list entry %r: %s", item, e)
    return tracks


def is_virtual(reference: str) -> bool:
    """True if a track reference uses a synthetic timeline scheme."""
    return reference.startswith(VIRTUAL_SCHEMES)


def _track_ref(track: TrackEntry, kind: TrackKind) -> TrackRef:
    if kind is TrackKind.SUBTITLE and track.external and track.external_filename:
        return TrackRef(
            value=track.external_filename,
            external=True,
            virtual=is_virtual(track.external_filename),
        )
    return TrackRef(value=str(track.id))


def _selected_id(player: PlayerHost, kind: TrackKind) -> str | None:
    value = player.get_property_string(_SELECTION_PROPERTY[kind])
    if value is None or value.strip().lower() in _NO_TRACK_VALUES:
        return None
    return value.strip()


def _fallback_subtitle(
    player: PlayerHost, tracks: list[TrackEntry]
) -> TrackRef | None:
    sub_files = player.get_property("sub-files") or []
    if isinstance(sub_files, str):
        sub_files = [sub_files]
    for sub_path in sub_files:
        if sub_path and Path(sub_path).is_file():
            return TrackRef(
                value=sub_path, external=True, virtual=is_virtual(sub_path)
            )

    for track in tracks:
        is_subtitle = track.type == TrackKind.SUBTITLE.value
        if is_subtitle and track.default and not track.external:
            return TrackRef(value=str(track.id))
    return None


def resolve_track(player: PlayerHost, kind: TrackKind) -> TrackRef | None:
    """Resolve the track of ``kind`` that a cut should carry.

    Args:
        player: Player to query.
        kind: Subtitle or audio.

    Returns:
        TrackRef, or None when no track applies.
    """
    active_id = _selected_id(player, kind)
    if kind is TrackKind.SUBTITLE and active_id is None:
        # The user turned subtitles off; never override that
        return None

    tracks = parse_track_list(player.get_property("track-list"))

    if active_id is not None:
        for track in tracks:
            if track.type == kind.value and str(track.id) == active_id:
                return _track_ref(track, kind)

    if kind is TrackKind.SUBTITLE:
        return _fallback_subtitle(player, tracks)
    return None


def resolve_tracks(player: PlayerHost) -> TrackSelection:
    """Resolve subtitle and audio tracks for one cut."""
    subtitle = resolve_track(player, TrackKind.SUBTITLE)
    if subtitle is not None and subtitle.virtual:
        logger.warning(
            "Subtitle %s uses a virtual timeline; not burning it in", subtitle.value
        )
    return TrackSelection(
        subtitle=subtitle, audio=resolve_track(player, TrackKind.AUDIO)
    )
