"""Configuration management for mpvcut.

Configuration is loaded with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (MPVCUT_*)
3. Config file (~/.mpvcut/config.toml)
4. Default values (lowest priority)
"""

from mpvcut.config.env import EnvReader
from mpvcut.config.loader import (
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)
from mpvcut.config.models import (
    ClipboardConfig,
    IpcConfig,
    LoggingConfig,
    MpvcutConfig,
    OutputConfig,
    ToolPathsConfig,
)

__all__ = [
    # Models
    "ClipboardConfig",
    "IpcConfig",
    "LoggingConfig",
    "MpvcutConfig",
    "OutputConfig",
    "ToolPathsConfig",
    # Loader
    "EnvReader",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config_file",
]
