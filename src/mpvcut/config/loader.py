"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (MPVCUT_*)
3. Config file (~/.mpvcut/config.toml)
4. Default values

Environment variables:
- MPVCUT_CONFIG_PATH: Path to config file (overrides default location)
- MPVCUT_DATA_DIR: Path to the mpvcut data directory (overrides ~/.mpvcut/)
- MPVCUT_FFMPEG_PATH: Path to ffmpeg executable
- MPVCUT_MPV_PATH: Path to mpv executable
- MPVCUT_OUTPUT_DIR: Default output directory for cuts
- MPVCUT_TEMP_DIR: Directory for the intermediate render file
- MPVCUT_SOCKET: mpv IPC socket path
- MPVCUT_LOG_LEVEL: Log level
- MPVCUT_LOG_FILE: Log file path
"""

import logging
import tomllib
from pathlib import Path
from typing import Any

from mpvcut.config.env import EnvReader
from mpvcut.config.models import (
    ClipboardConfig,
    IpcConfig,
    LoggingConfig,
    MpvcutConfig,
    OutputConfig,
    ToolPathsConfig,
)

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.toml"
DEFAULT_CONFIG_DIR = Path.home() / ".mpvcut"


def get_data_dir(reader: EnvReader | None = None) -> Path:
    """Get the mpvcut data directory.

    Can be overridden by MPVCUT_DATA_DIR environment variable.

    Returns:
        Path to the data directory (~/.mpvcut/ by default).
    """
    reader = reader or EnvReader()
    return reader.get_path("DATA_DIR") or DEFAULT_CONFIG_DIR


def get_default_config_path(reader: EnvReader | None = None) -> Path:
    """Get the config file path.

    MPVCUT_CONFIG_PATH wins over the data directory.

    Returns:
        Path to config file.
    """
    reader = reader or EnvReader()
    return reader.get_path("CONFIG_PATH") or get_data_dir(reader) / CONFIG_FILE_NAME


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Args:
        path: Path to config file. If None, uses default location.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist or
        cannot be parsed.
    """
    if path is None:
        path = get_default_config_path()

    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        config = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}

    logger.debug("Loaded config from %s", path)
    return config


def _file_path(section: dict[str, Any], key: str) -> Path | None:
    value = section.get(key)
    return Path(value).expanduser() if value else None


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    ffmpeg_path: Path | None = None,
    mpv_path: Path | None = None,
    socket_path: Path | None = None,
    output_dir: Path | None = None,
    env: EnvReader | None = None,
) -> MpvcutConfig:
    """Get mpvcut configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides MPVCUT_CONFIG_PATH).
        ffmpeg_path: CLI override for ffmpeg path.
        mpv_path: CLI override for mpv path.
        socket_path: CLI override for the IPC socket.
        output_dir: CLI override for the default output directory.
        env: Environment reader; defaults to os.environ.

    Returns:
        MpvcutConfig with merged configuration.

    Raises:
        ValueError: If a merged value fails validation.
    """
    reader = env or EnvReader()
    file_config = load_config_file(config_path or get_default_config_path(reader))

    tools_file = file_config.get("tools", {})
    tools = ToolPathsConfig(
        ffmpeg=(
            ffmpeg_path
            or reader.get_path("FFMPEG_PATH", must_exist=True)
            or _file_path(tools_file, "ffmpeg")
        ),
        mpv=(
            mpv_path
            or reader.get_path("MPV_PATH", must_exist=True)
            or _file_path(tools_file, "mpv")
        ),
    )

    output_file = file_config.get("output", {})
    defaults = OutputConfig()
    output = OutputConfig(
        default_directory=(
            output_dir
            or reader.get_path("OUTPUT_DIR")
            or _file_path(output_file, "default_directory")
            or defaults.default_directory
        ),
        temp_directory=(
            reader.get_path("TEMP_DIR")
            or _file_path(output_file, "temp_directory")
            or defaults.temp_directory
        ),
        default_quality=reader.get_str(
            "DEFAULT_QUALITY",
            output_file.get("default_quality", defaults.default_quality),
        ),
        default_format=reader.get_str(
            "DEFAULT_FORMAT",
            output_file.get("default_format", defaults.default_format),
        ),
    )

    clipboard_file = file_config.get("clipboard", {})
    clipboard = ClipboardConfig(
        backend=reader.get_str(
            "CLIPBOARD_BACKEND", clipboard_file.get("backend", "auto")
        ),
        jpeg_quality=reader.get_int(
            "CLIPBOARD_JPEG_QUALITY", clipboard_file.get("jpeg_quality", 85)
        ),
        max_size_kb=reader.get_int(
            "CLIPBOARD_MAX_SIZE_KB", clipboard_file.get("max_size_kb", 300)
        ),
        key=reader.get_str("CLIPBOARD_KEY", clipboard_file.get("key")),
    )

    ipc_file = file_config.get("ipc", {})
    ipc_defaults = IpcConfig()
    ipc = IpcConfig(
        socket=(
            socket_path
            or reader.get_path("SOCKET")
            or _file_path(ipc_file, "socket")
            or ipc_defaults.socket
        ),
        connect_timeout=reader.get_float(
            "CONNECT_TIMEOUT",
            float(ipc_file.get("connect_timeout", ipc_defaults.connect_timeout)),
        ),
    )

    logging_file = file_config.get("logging", {})
    logging_config = LoggingConfig(
        level=reader.get_str("LOG_LEVEL", logging_file.get("level", "info")),
        file=reader.get_path("LOG_FILE") or _file_path(logging_file, "file"),
        format=reader.get_str("LOG_FORMAT", logging_file.get("format", "text")),
        include_stderr=reader.get_bool(
            "LOG_INCLUDE_STDERR", logging_file.get("include_stderr", False)
        ),
        max_bytes=int(logging_file.get("max_bytes", 10_485_760)),
        backup_count=int(logging_file.get("backup_count", 5)),
    )

    return MpvcutConfig(
        tools=tools,
        output=output,
        clipboard=clipboard,
        ipc=ipc,
        logging=logging_config,
    )
