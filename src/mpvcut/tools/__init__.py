"""External tool discovery for ffmpeg and mpv."""

from mpvcut.tools.detection import (
    INSTALL_HINTS,
    ToolInfo,
    detect_tool,
    find_tool,
    require_tool,
)

__all__ = [
    "INSTALL_HINTS",
    "ToolInfo",
    "detect_tool",
    "find_tool",
    "require_tool",
]
