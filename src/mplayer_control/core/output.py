"""
Logging setup using Loguru.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import LoggingConfig, get_data_dir


def get_log_file_path() -> Path:
    """Get the path to the log file."""
    return get_data_dir() / "mplayer-control.log"


def setup_loguru(
    log_file: Optional[Path] = None,
    level: str = "INFO",
    max_file_size_mb: int = 10,
    backup_count: int = 5,
    console_output: bool = False,
) -> None:
    """
    Configure loguru with a rotating file sink and an optional stderr sink.

    Args:
        log_file: Path to log file (default: ~/.local/share/mplayer-control/mplayer-control.log)
        level: Minimum level (TRACE, DEBUG, INFO, WARNING, ERROR)
        max_file_size_mb: Size at which the log file is rotated
        backup_count: Number of rotated files to keep
        console_output: Whether to also log to stderr
    """
    log_file = log_file if log_file else get_log_file_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Remove default handler
    logger.remove()

    logger.add(
        log_file,
        rotation=f"{max_file_size_mb} MB",
        retention=backup_count,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
        enqueue=False,  # Synchronous writes (thread-safe but blocking)
    )

    if console_output:
        logger.add(sys.stderr, level=level, format="{level}: {message}")

    logger.info(f"Loguru initialized: {log_file} (level={level})")


def setup_from_config(config: LoggingConfig) -> None:
    """Configure logging from the [logging] config section."""
    setup_loguru(
        log_file=Path(config.log_file) if config.log_file else None,
        level=config.level,
        max_file_size_mb=config.max_file_size_mb,
        backup_count=config.backup_count,
        console_output=config.console_output,
    )
