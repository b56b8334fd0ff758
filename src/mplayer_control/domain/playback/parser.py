"""Parsing of mplayer answer lines (``ANS_<property>=<value>``)."""

import re
from typing import NamedTuple, Optional

DURATION_MARKER = "ANS_LENGTH"
TIME_POSITION_MARKER = "ANS_TIME_POSITION"
VOLUME_MARKER = "ANS_volume"

_MARKER_KINDS = {
    DURATION_MARKER: "duration",
    TIME_POSITION_MARKER: "time",
    VOLUME_MARKER: "volume",
}

_ANSWER_RE = re.compile(
    r"(?P<marker>ANS_LENGTH|ANS_TIME_POSITION|ANS_volume)=(?P<value>\S+)"
)


class StatusUpdate(NamedTuple):
    """A recognized answer: event kind plus numeric value."""

    kind: str
    value: float


def parse_status_line(line: str) -> Optional[StatusUpdate]:
    """Classify a line of mplayer output.

    Lines that carry none of the known markers, or a value that is not a
    number, return None. mplayer prints plenty of other chatter on stdout.
    """
    match = _ANSWER_RE.search(line)
    if not match:
        return None

    raw = match.group("value").strip("'\"")
    try:
        value = float(raw)
    except ValueError:
        return None

    return StatusUpdate(_MARKER_KINDS[match.group("marker")], value)
