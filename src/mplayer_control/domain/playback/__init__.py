"""Playback domain - mplayer slave-mode control.

This domain handles:
- Spawning mplayer and writing commands to its control fifo
- Queueing commands until mplayer is ready
- Parsing mplayer answers into session state
- Publishing state changes as events
"""

from .commands import (
    PAUSING_KEEP,
    PAUSING_KEEP_FORCE,
    Command,
    SeekMode,
    VolumeMode,
    encode_command,
)
from .events import EVENT_KINDS, EventBus
from .exceptions import (
    MediaFileNotFoundError,
    NoFileError,
    PlayerError,
    PlayerNotAvailableError,
    TransportError,
)
from .parser import StatusUpdate, parse_status_line
from .player import MPlayer
from .queue import ReadinessQueue
from .state import ErrorInfo, ExitInfo, PlaybackInfo, PlaybackSession, Status
from .transport import MPlayerTransport, check_mplayer_available, ensure_mplayer_available

__all__ = [
    # Commands
    "PAUSING_KEEP",
    "PAUSING_KEEP_FORCE",
    "Command",
    "SeekMode",
    "VolumeMode",
    "encode_command",
    # Events
    "EVENT_KINDS",
    "EventBus",
    # Errors
    "MediaFileNotFoundError",
    "NoFileError",
    "PlayerError",
    "PlayerNotAvailableError",
    "TransportError",
    # Parsing
    "StatusUpdate",
    "parse_status_line",
    # Player
    "MPlayer",
    "ReadinessQueue",
    "ErrorInfo",
    "ExitInfo",
    "PlaybackInfo",
    "PlaybackSession",
    "Status",
    "MPlayerTransport",
    "check_mplayer_available",
    "ensure_mplayer_available",
]
