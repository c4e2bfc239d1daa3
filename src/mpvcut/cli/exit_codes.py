"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Configuration errors
    30-39: Tool/dependency errors
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for mpvcut CLI commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1
    INTERRUPTED = 2

    # Configuration errors (10-19)
    CONFIG_ERROR = 11

    # Tool/dependency errors (30-39)
    TOOL_NOT_AVAILABLE = 30
    PLAYER_UNAVAILABLE = 31
