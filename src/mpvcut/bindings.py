"""Key bindings and action dispatch.

Each action is bound in the player as ``keybind <chord> "script-message
mpvcut-<action>"``; the player then sends a ``client-message`` event whose
first argument is the message name, which the dispatcher maps back to a
handler.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from mpvcut.player.osd import StatusReporter

logger = logging.getLogger(__name__)

MESSAGE_PREFIX = "mpvcut-"

Handler = Callable[[], object]


@dataclass(frozen=True)
class KeyBinding:
    """One user action and the chord that triggers it."""

    action: str
    chord: str | None
    description: str

    @property
    def message(self) -> str:
        """Script message the player sends for this action."""
        return f"{MESSAGE_PREFIX}{self.action}"


DEFAULT_BINDINGS: tuple[KeyBinding, ...] = (
    KeyBinding("set_start_time", "Ctrl+Shift+s", "Set Cut Start Time"),
    KeyBinding("set_end_time", "Ctrl+Shift+e", "Set Cut End Time"),
    KeyBinding("cut_video", "Ctrl+Shift+x", "Cut and Save Video"),
    KeyBinding(
        "take_screenshots", "Ctrl+Shift+p", "Take Screenshots of Start/End Frames"
    ),
    KeyBinding(
        "toggle_output_dir", "Ctrl+Shift+d", "Toggle Output Directory (Default/Source)"
    ),
    KeyBinding(
        "toggle_output_format",
        "Ctrl+Shift+f",
        "Toggle Output Format (MP4/MKV/WebM/GIF)",
    ),
    KeyBinding(
        "set_quality_untouched", "Ctrl+Alt+0", "Set Quality: Original/Untouched"
    ),
    KeyBinding("set_quality_high", "Ctrl+Alt+1", "Set Quality: High"),
    KeyBinding("set_quality_medium", "Ctrl+Alt+2", "Set Quality: Medium"),
    KeyBinding("set_quality_low", "Ctrl+Alt+3", "Set Quality: Low"),
    KeyBinding("show_help", "Ctrl+h", "Show this Help Message"),
    KeyBinding("clipboard_screenshot", None, "Copy Compressed Screenshot to Clipboard"),
)


def build_bindings(clipboard_key: str | None = None) -> tuple[KeyBinding, ...]:
    """Return the binding table with the clipboard chord filled in.

    Args:
        clipboard_key: Chord for the clipboard screenshot; unbound if None.
    """
    bindings = []
    for binding in DEFAULT_BINDINGS:
        if binding.action == "clipboard_screenshot":
            binding = KeyBinding(binding.action, clipboard_key, binding.description)
        bindings.append(binding)
    return tuple(bindings)


def chord_for(bindings: Iterable[KeyBinding], action: str) -> str:
    """Chord bound to ``action``, or the action name if it has none."""
    for binding in bindings:
        if binding.action == action and binding.chord:
            return binding.chord
    return action


def input_conf_snippet(bindings: Iterable[KeyBinding]) -> str:
    """Render the bindings as ``input.conf`` lines.

    Unbound actions are emitted commented out so the user can pick a chord.
    """
    lines = []
    for binding in bindings:
        line = f"{binding.chord or 'KEY'} script-message {binding.message}"
        line = f"{line}  # {binding.description}"
        lines.append(line if binding.chord else f"#{line}")
    return "\n".join(lines) + "\n"


class ActionDispatcher:
    """Routes player script messages to action handlers.

    Exceptions raised by a handler are logged with their traceback and shown
    as an OSD error; they never escape ``dispatch``.
    """

    def __init__(
        self, handlers: Mapping[str, Handler], reporter: StatusReporter
    ) -> None:
        self.handlers = dict(handlers)
        self.reporter = reporter

    def dispatch(self, message: str) -> bool:
        """Run the handler for a script message.

        Returns:
            True if the message named a known action.
        """
        if not message.startswith(MESSAGE_PREFIX):
            return False
        action = message[len(MESSAGE_PREFIX) :]
        handler = self.handlers.get(action)
        if handler is None:
            logger.warning("Unknown action: %s", action)
            return False

        logger.debug("Dispatching action %s", action)
        try:
            handler()
        except Exception as e:
            logger.exception("Action %s failed", action)
            self.reporter.error(f"Action '{action}' failed: {e}")
        return True
