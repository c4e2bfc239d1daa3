"""JSON IPC client for a running mpv.

mpv must be started with ``--input-ipc-server=<socket>``. Requests are
newline-delimited JSON objects carrying a ``request_id``; replies and
asynchronous events share the same stream, so events read while waiting
for a reply are queued and handed out later by ``events()``.
"""

from __future__ import annotations

import itertools
import json
import logging
import socket
from collections import deque
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from mpvcut.exceptions import PlayerCommandError, PlayerConnectionError

logger = logging.getLogger(__name__)

# Errors mpv reports for properties that exist but have no value right now
_UNAVAILABLE_ERRORS = frozenset({"property unavailable", "property not found"})

_RECV_SIZE = 65536


class MpvIpcClient:
    """Blocking client for mpv's JSON IPC protocol.

    Example:
        with MpvIpcClient(Path("/tmp/mpvsocket")) as player:
            player.show_text("hello", 2)
            for event in player.events():
                ...
    """

    def __init__(self, socket_path: Path, connect_timeout: float = 5.0) -> None:
        self.socket_path = socket_path
        self.connect_timeout = connect_timeout
        self._sock: socket.socket | None = None
        self._buffer = b""
        self._pending_events: deque[dict[str, Any]] = deque()
        self._request_ids = itertools.count(1)

    def __enter__(self) -> MpvIpcClient:
        self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def connect(self) -> None:
        """Open the IPC socket.

        Raises:
            PlayerConnectionError: If the socket cannot be reached.
        """
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self.connect_timeout)
        try:
            sock.connect(str(self.socket_path))
        except OSError as e:
            sock.close()
            raise PlayerConnectionError(
                f"Cannot connect to mpv IPC socket {self.socket_path}: {e}. "
                "Start mpv with --input-ipc-server."
            ) from e
        # Replies and events are awaited indefinitely once connected
        sock.settimeout(None)
        self._sock = sock
        logger.info("Connected to mpv at %s", self.socket_path)

    def close(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            finally:
                self._sock = None

    def _write(self, payload: dict[str, Any]) -> None:
        if self._sock is None:
            raise PlayerConnectionError("IPC client is not connected")
        data = json.dumps(payload).encode("utf-8") + b"\n"
        try:
            self._sock.sendall(data)
        except OSError as e:
            raise PlayerConnectionError(f"Lost connection to mpv: {e}") from e

    def _read_message(self) -> dict[str, Any]:
        """Read the next JSON message from the socket.

        Raises:
            PlayerConnectionError: If mpv closed the connection.
        """
        if self._sock is None:
            raise PlayerConnectionError("IPC client is not connected")

        while True:
            while b"\n" not in self._buffer:
                try:
                    chunk = self._sock.recv(_RECV_SIZE)
                except OSError as e:
                    raise PlayerConnectionError(f"Lost connection to mpv: {e}") from e
                if not chunk:
                    raise PlayerConnectionError("mpv closed the IPC connection")
                self._buffer += chunk

            line, _, self._buffer = self._buffer.partition(b"\n")
            text = line.decode("utf-8", errors="replace").strip()
            if not text:
                continue
            try:
                return json.loads(text)
            except json.JSONDecodeError:
                logger.warning("Ignoring malformed IPC message: %s", text)

    def request(self, *command: Any) -> Any:
        """Send a raw IPC command and wait for its reply.

        Returns:
            The ``data`` member of the reply (None if absent).

        Raises:
            PlayerCommandError: If mpv reports an error.
            PlayerConnectionError: If the connection fails.
        """
        request_id = next(self._request_ids)
        self._write({"command": list(command), "request_id": request_id})

        while True:
            message = self._read_message()
            if "event" in message:
                self._pending_events.append(message)
                continue
            if message.get("request_id") != request_id:
                logger.debug("Discarding unmatched IPC reply: %s", message)
                continue
            error = message.get("error", "success")
            if error != "success":
                raise PlayerCommandError(list(command), error)
            return message.get("data")

    # PlayerHost implementation

    def get_property(self, name: str) -> Any:
        try:
            return self.request("get_property", name)
        except PlayerCommandError as e:
            if e.error in _UNAVAILABLE_ERRORS:
                return None
            raise

    def get_property_string(self, name: str) -> str | None:
        try:
            return self.request("get_property_string", name)
        except PlayerCommandError as e:
            if e.error in _UNAVAILABLE_ERRORS:
                return None
            raise

    def set_property(self, name: str, value: Any) -> None:
        self.request("set_property", name, value)

    def command(self, *args: Any) -> Any:
        return self.request(*args)

    def show_text(self, text: str, duration: float) -> None:
        self.request("show-text", text, int(duration * 1000))

    # Host integration used by the event loop

    def bind_key(self, key: str, message: str) -> None:
        """Bind a key chord to ``script-message <message>``."""
        self.request("keybind", key, f"script-message {message}")

    def observe_property(self, observe_id: int, name: str) -> None:
        """Ask mpv to send ``property-change`` events for ``name``."""
        self.request("observe_property", observe_id, name)

    def events(self) -> Iterator[dict[str, Any]]:
        """Yield IPC events until mpv shuts down or disconnects."""
        while True:
            if self._pending_events:
                event = self._pending_events.popleft()
            else:
                try:
                    message = self._read_message()
                except PlayerConnectionError as e:
                    logger.info("Event stream ended: %s", e)
                    return
                if "event" not in message:
                    continue
                event = message
            yield event
            if event.get("event") == "shutdown":
                return
