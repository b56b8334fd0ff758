"""
Configuration management for mplayer-control
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class PlayerConfig:
    """Configuration for the mplayer process."""

    binary: str = "mplayer"
    update_interval: int = 1000  # Time position poll interval in ms, 0 disables

    def validate(self) -> None:
        """Validate player configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if not self.binary:
            raise ValueError("Player binary must not be empty")
        if self.update_interval < 0:
            raise ValueError(
                f"update_interval must be >= 0 (got {self.update_interval})"
            )


@dataclass
class PathsConfig:
    """Filesystem locations."""

    fifo: str = "./.mplayer"  # Control pipe read by mplayer via -input file=


@dataclass
class InitialStateConfig:
    """State applied once, right after mplayer has been launched."""

    volume: Optional[float] = None
    loop: Optional[int] = None
    time: Optional[float] = None
    position: Optional[float] = None  # Percentage 0-100
    speed: Optional[float] = None
    mute: bool = False

    def validate(self) -> None:
        """Validate initial state values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if self.volume is not None and not 0 <= self.volume <= 100:
            raise ValueError(f"volume must be between 0 and 100 (got {self.volume})")
        if self.position is not None and not 0 <= self.position <= 100:
            raise ValueError(
                f"position must be between 0 and 100 (got {self.position})"
            )
        if self.time is not None and self.time < 0:
            raise ValueError(f"time must be >= 0 (got {self.time})")
        if self.speed is not None and self.speed <= 0:
            raise ValueError(f"speed must be > 0 (got {self.speed})")
        if self.loop is not None and self.loop < -1:
            raise ValueError(f"loop must be >= -1 (got {self.loop})")


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/mplayer-control/mplayer-control.log)
    )
    max_file_size_mb: int = 10  # Maximum log file size before rotation
    backup_count: int = 5  # Number of backup files to keep
    console_output: bool = False  # Also output to stderr (for debugging)


@dataclass
class Config:
    """Main configuration object."""

    player: PlayerConfig = field(default_factory=PlayerConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    initial: InitialStateConfig = field(default_factory=InitialStateConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "mplayer-control"
    return Path.home() / ".config" / "mplayer-control"


def _find_project_config() -> Optional[Path]:
    """Find config.toml in project root by looking for pyproject.toml.

    Returns:
        Path to config.toml in project root, or None if not found
    """
    current = Path(__file__).resolve().parent
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            config_path = parent / "config.toml"
            if config_path.exists():
                return config_path
            # Found project root but no config.toml there
            return None
    return None


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Project root (detected via pyproject.toml) - for development
    2. Current working directory
    3. XDG_CONFIG_HOME/mplayer-control (or ~/.config/mplayer-control)
    """
    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "mplayer-control"
    return Path.home() / ".local" / "share" / "mplayer-control"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# mplayer-control Configuration

[player]
# mplayer executable
binary = "mplayer"

# Interval in milliseconds between time position queries while playing
# (0 disables polling)
update_interval = 1000

[paths]
# Named pipe used to send slave commands to mplayer
fifo = "./.mplayer"

[initial]
# State applied right after mplayer starts (uncomment to use)
# volume = 50
# loop = 0
# time = 0.0
# position = 0.0
# speed = 1.0
mute = false

[logging]
# Log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/mplayer-control/mplayer-control.log)
# log_file = "/path/to/custom/mplayer-control.log"

# Maximum log file size in MB before rotation
max_file_size_mb = 10

# Number of backup log files to keep
backup_count = 5

# Also output logs to stderr (useful for debugging)
console_output = false
""".strip()


def parse_config(toml_data: dict) -> Config:
    """Build a Config from parsed TOML data, keeping defaults for missing keys."""
    config = Config()

    if "player" in toml_data:
        player_data = toml_data["player"]
        config.player = PlayerConfig(
            binary=player_data.get("binary", config.player.binary),
            update_interval=player_data.get(
                "update_interval", config.player.update_interval
            ),
        )
        try:
            config.player.validate()
        except ValueError as e:
            print(f"Warning: Invalid player configuration: {e}")
            print("Using default player configuration.")
            config.player = PlayerConfig()

    if "paths" in toml_data:
        paths_data = toml_data["paths"]
        config.paths = PathsConfig(
            fifo=str(Path(paths_data.get("fifo", config.paths.fifo)).expanduser()),
        )

    if "initial" in toml_data:
        initial_data = toml_data["initial"]
        config.initial = InitialStateConfig(
            volume=initial_data.get("volume"),
            loop=initial_data.get("loop"),
            time=initial_data.get("time"),
            position=initial_data.get("position"),
            speed=initial_data.get("speed"),
            mute=initial_data.get("mute", config.initial.mute),
        )
        try:
            config.initial.validate()
        except ValueError as e:
            print(f"Warning: Invalid initial state configuration: {e}")
            print("Using default initial state.")
            config.initial = InitialStateConfig()

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        log_file = logging_data.get("log_file")
        if log_file:
            log_file = str(Path(log_file).expanduser())
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level).upper(),
            log_file=log_file,
            max_file_size_mb=logging_data.get(
                "max_file_size_mb", config.logging.max_file_size_mb
            ),
            backup_count=logging_data.get("backup_count", config.logging.backup_count),
            console_output=logging_data.get(
                "console_output", config.logging.console_output
            ),
        )

    return config


def apply_env_overrides(config: Config) -> Config:
    """Override config values with environment variables if present.

    - MPLAYER_BINARY
    - MPLAYER_FIFO
    """
    binary = os.environ.get("MPLAYER_BINARY")
    fifo = os.environ.get("MPLAYER_FIFO")

    if binary:
        config.player.binary = binary
    if fifo:
        config.paths.fifo = fifo

    return config


def load_config() -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values, see apply_env_overrides().
    """
    # Load .env file from config directory if it exists
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = get_config_path()

    if not config_path.exists():
        # Create config directory and default file
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
        print(f"Created default configuration at: {config_path}")
        return apply_env_overrides(Config())

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        print(f"Error loading configuration from {config_path}: {e}")
        print("Using default configuration.")
        return apply_env_overrides(Config())

    return apply_env_overrides(parse_config(toml_data))
