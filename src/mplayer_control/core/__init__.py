"""Core infrastructure layer - no playback dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Logging (Loguru)
- Console management (Rich)
"""

# Configuration
from .config import (
    Config,
    InitialStateConfig,
    LoggingConfig,
    PathsConfig,
    PlayerConfig,
    create_default_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    load_config,
    parse_config,
)

# Console
from .console import get_console, print_error, safe_print

# Logging
from .output import setup_from_config, setup_loguru

__all__ = [
    # Config
    "Config",
    "InitialStateConfig",
    "LoggingConfig",
    "PathsConfig",
    "PlayerConfig",
    "create_default_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "load_config",
    "parse_config",
    # Console
    "get_console",
    "print_error",
    "safe_print",
    # Logging
    "setup_from_config",
    "setup_loguru",
]
