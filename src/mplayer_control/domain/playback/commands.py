"""
Slave-mode command encoding for mplayer.

Every command is prefixed with a pausing flag so that sending it does not
change the current pause/play state, see
http://www.mplayerhq.hu/DOCS/tech/slave.txt
"""

from enum import IntEnum
from typing import Any, NamedTuple

# Keep the pause state and apply the command without leaving the pause loop
PAUSING_KEEP_FORCE = "pausing_keep_force"

# Keep the pause state only
PAUSING_KEEP = "pausing_keep"

# mplayer does not honour "pausing_keep_force" for these commands, so they
# are degraded to "pausing_keep"
KEEP_ONLY_COMMANDS = frozenset({"seek"})


class SeekMode(IntEnum):
    """Type argument of the ``seek`` command."""

    RELATIVE = 0
    PERCENTAGE = 1
    ABSOLUTE = 2


class VolumeMode(IntEnum):
    """Second argument of the ``volume`` command."""

    RELATIVE = 0
    ABSOLUTE = 1


class Command(NamedTuple):
    """A logical command: name plus ordered arguments."""

    name: str
    args: tuple = ()


def preserve_flag(name: str) -> str:
    """Pick the pausing prefix for a command."""
    if name in KEEP_ONLY_COMMANDS:
        return PAUSING_KEEP
    return PAUSING_KEEP_FORCE


def _format_arg(arg: Any) -> str:
    if isinstance(arg, bool):
        return "1" if arg else "0"
    if isinstance(arg, IntEnum):
        return str(int(arg))
    return str(arg)


def encode_command(name: str, *args: Any) -> str:
    """Turn a command into the line written to the control pipe.

    Args:
        name: Slave command name (e.g. "seek", "get_time_pos")
        *args: Command arguments, rendered in order

    Returns:
        Wire string without the trailing newline,
        e.g. ``"pausing_keep seek 123 2"``
    """
    parts = [preserve_flag(name), name]
    parts.extend(_format_arg(arg) for arg in args)
    return " ".join(parts)
