"""Player integration: the PlayerHost protocol, the mpv IPC client, track
resolution and OSD status reporting."""

from mpvcut.player.interface import PlayerHost, PlayerSession
from mpvcut.player.ipc import MpvIpcClient
from mpvcut.player.osd import MessageKind, StatusReporter
from mpvcut.player.tracks import (
    TrackEntry,
    parse_track_list,
    resolve_track,
    resolve_tracks,
)

__all__ = [
    "MessageKind",
    "MpvIpcClient",
    "PlayerHost",
    "PlayerSession",
    "StatusReporter",
    "TrackEntry",
    "parse_track_list",
    "resolve_track",
    "resolve_tracks",
]
