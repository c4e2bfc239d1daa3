"""Core utilities package.

Pure helpers with no knowledge of the player: subprocess invocation and
formatting of timestamps and commands.
"""

from mpvcut.core.formatting import format_command, format_mark, format_seconds
from mpvcut.core.subprocess_utils import CommandRunner, run_command

__all__ = [
    "CommandRunner",
    "format_command",
    "format_mark",
    "format_seconds",
    "run_command",
]
