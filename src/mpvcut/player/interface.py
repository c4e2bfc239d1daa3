"""PlayerHost protocol: the slice of mpv that mpvcut depends on."""

from collections.abc import Iterator
from typing import Any, Protocol


class PlayerHost(Protocol):
    """Protocol for the running media player.

    Implementations forward to a live mpv (see ``MpvIpcClient``) or to an
    in-memory fake in tests. Property reads return None when the property
    is unavailable, e.g. ``time-pos`` with nothing loaded.
    """

    def get_property(self, name: str) -> Any:
        """Return a property in its native (JSON) form, or None."""
        ...

    def get_property_string(self, name: str) -> str | None:
        """Return a property formatted as mpv's option string, or None."""
        ...

    def set_property(self, name: str, value: Any) -> None:
        """Set a property."""
        ...

    def command(self, *args: Any) -> Any:
        """Run an input command such as ``seek`` or ``screenshot-to-file``."""
        ...

    def show_text(self, text: str, duration: float) -> None:
        """Show a transient on-screen message for ``duration`` seconds."""
        ...


class PlayerSession(PlayerHost, Protocol):
    """A player connection that can also deliver key presses and events."""

    def bind_key(self, key: str, message: str) -> None:
        """Bind a key chord to ``script-message <message>``."""
        ...

    def observe_property(self, observe_id: int, name: str) -> None:
        """Request ``property-change`` events for a property."""
        ...

    def events(self) -> Iterator[dict[str, Any]]:
        """Yield player events until the player goes away."""
        ...
