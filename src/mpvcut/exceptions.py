"""Exception hierarchy for mpvcut.

Precondition problems are reported to the user directly and never raised;
these exceptions cover the failures that cross module boundaries.
"""

from pathlib import Path


class MpvcutError(Exception):
    """Base class for all mpvcut errors."""


class OutputDirectoryError(MpvcutError):
    """Raised when the output directory cannot be created."""

    def __init__(self, directory: Path, reason: str) -> None:
        self.directory = directory
        self.reason = reason
        super().__init__(f"Failed to create output directory {directory}: {reason}")


class ToolNotFoundError(MpvcutError):
    """Raised when a required external executable cannot be located."""

    def __init__(self, tool_name: str, hint: str = "") -> None:
        self.tool_name = tool_name
        message = f"Required tool not available: {tool_name}."
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)


class PlayerConnectionError(MpvcutError):
    """Raised when the IPC connection to mpv cannot be used."""


class PlayerCommandError(MpvcutError):
    """Raised when mpv answers an IPC request with an error status."""

    def __init__(self, command: list, error: str) -> None:
        self.command = command
        self.error = error
        super().__init__(f"mpv rejected {command!r}: {error}")
