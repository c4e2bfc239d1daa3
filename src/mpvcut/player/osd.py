"""User-facing status messages.

Every message goes to the player's OSD and to the log, so a failure seen on
screen can be found later in the log file.
"""

import logging
from enum import Enum

from mpvcut.exceptions import PlayerCommandError, PlayerConnectionError
from mpvcut.player.interface import PlayerHost

logger = logging.getLogger(__name__)


class MessageKind(Enum):
    """Kind of status message; selects the OSD prefix and log level."""

    ERROR = "error"
    SUCCESS = "success"
    INFO = "info"
    PLAIN = "plain"


_PREFIXES: dict[MessageKind, str] = {
    MessageKind.ERROR: "❗ Error: ",
    MessageKind.SUCCESS: "✅ Success: ",
    MessageKind.INFO: "\U0001f4ac Info: ",
    MessageKind.PLAIN: "",
}


class StatusReporter:
    """Shows status messages on the player's OSD and mirrors them to the log."""

    def __init__(self, player: PlayerHost) -> None:
        self.player = player

    def show(self, kind: MessageKind, message: str, duration: float = 4) -> None:
        """Show a message.

        OSD delivery problems are logged and otherwise ignored; the message
        itself is always logged.
        """
        if kind is MessageKind.ERROR:
            logger.error(message)
        else:
            logger.info(message)

        try:
            self.player.show_text(_PREFIXES[kind] + message, duration)
        except (PlayerCommandError, PlayerConnectionError) as e:
            logger.warning("Could not display OSD message: %s", e)

    def error(self, message: str, duration: float = 6) -> None:
        self.show(MessageKind.ERROR, message, duration)

    def success(self, message: str, duration: float = 8) -> None:
        self.show(MessageKind.SUCCESS, message, duration)

    def info(self, message: str, duration: float = 3) -> None:
        self.show(MessageKind.INFO, message, duration)

    def plain(self, message: str, duration: float = 3) -> None:
        self.show(MessageKind.PLAIN, message, duration)
