"""Subprocess utilities for external tool invocation.

Every external program mpvcut launches (mpv as a renderer, ffmpeg, the
clipboard helpers) goes through ``run_command`` so that logging, decoding
and the returned shape are the same everywhere. Components accept a
``CommandRunner`` so tests can substitute a fake.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for ffmpeg/mpv invocation
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CommandRunner = Callable[..., tuple[str, str, int]]
"""Signature of ``run_command``: ``(args, **kwargs) -> (stdout, stderr, rc)``."""


def run_command(
    args: list[str | Path],
    timeout: int | None = None,
    input_bytes: bytes | None = None,
    errors: str = "replace",
    **kwargs: Any,
) -> tuple[str, str, int]:
    """Run an external command to completion and capture both streams.

    There is no timeout by default: renders run as long as they need and
    are never cancelled.

    Args:
        args: Command and arguments. Path objects are converted to strings.
        timeout: Optional timeout in seconds.
        input_bytes: Optional bytes written to the child's stdin. Output is
            still decoded as text.
        errors: Error handling mode for text decoding (default "replace").
        **kwargs: Additional subprocess.run arguments.

    Returns:
        Tuple of (stdout, stderr, returncode).

    Raises:
        OSError: If the executable cannot be started.
        subprocess.TimeoutExpired: If a timeout was given and exceeded.
    """
    str_args = [str(arg) for arg in args]
    command_name = Path(str_args[0]).name if str_args else "unknown"

    logger.debug(
        "Executing command: %s",
        " ".join(str_args),
        extra={"command": command_name, "arg_count": len(str_args)},
    )

    start_time = time.monotonic()
    result = subprocess.run(  # nosec B603 - args are built by mpvcut, no shell
        str_args,
        input=input_bytes,
        capture_output=True,
        timeout=timeout,
        **kwargs,
    )
    elapsed = time.monotonic() - start_time

    stdout = (result.stdout or b"").decode("utf-8", errors=errors)
    stderr = (result.stderr or b"").decode("utf-8", errors=errors)

    logger.debug(
        "Command completed",
        extra={
            "command": command_name,
            "elapsed_seconds": round(elapsed, 3),
            "returncode": result.returncode,
        },
    )
    return stdout, stderr, result.returncode
