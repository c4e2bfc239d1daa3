"""Pipeline stages that shell out to mpv and ffmpeg."""

from mpvcut.executor.finalize import (
    GIF_FILTER_GRAPH,
    FFmpegFinalizeStage,
    FinalizeRequest,
)
from mpvcut.executor.interface import (
    StageResult,
    cleanup_temp_file,
    intermediate_path,
)
from mpvcut.executor.render import (
    PIXEL_FORMAT_FILTER,
    MpvRenderStage,
    RenderRequest,
    encoder_options,
)

__all__ = [
    "FFmpegFinalizeStage",
    "FinalizeRequest",
    "GIF_FILTER_GRAPH",
    "MpvRenderStage",
    "PIXEL_FORMAT_FILTER",
    "RenderRequest",
    "StageResult",
    "cleanup_temp_file",
    "encoder_options",
    "intermediate_path",
]
