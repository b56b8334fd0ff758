"""
Playback session state for one mplayer process.

The session owns the status field. Status only changes through emit(),
which applies the transition and then publishes an immutable snapshot.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from loguru import logger

from .events import EventBus
from .parser import StatusUpdate, parse_status_line


class Status(str, Enum):
    WAIT = "wait"
    READY = "ready"
    PLAY = "play"
    PAUSE = "pause"
    STOP = "stop"
    END = "end"
    ERROR = "error"


# Events that move the session into the status of the same name
_STATUS_EVENTS = {
    "ready": Status.READY,
    "play": Status.PLAY,
    "pause": Status.PAUSE,
    "stop": Status.STOP,
}

TERMINAL_STATUSES = frozenset({Status.END, Status.ERROR})


@dataclass(frozen=True)
class PlaybackInfo:
    """Immutable snapshot of the session at the time an event fired."""

    file: str
    status: Status = Status.WAIT
    time: float = 0.0
    duration: float = 0.0
    position: float = 0.0
    volume: Optional[float] = None


@dataclass(frozen=True)
class ExitInfo:
    """Payload of the ``end`` event."""

    status: str  # 'success' or 'error'
    exit_code: Optional[int] = None
    signal: Optional[int] = None

    @property
    def success(self) -> bool:
        return self.status == "success"


@dataclass(frozen=True)
class ErrorInfo:
    """Payload of the ``error`` event."""

    error: BaseException
    status: str = "error"


def classify_exit(exit_code: Optional[int], signal: Optional[int]) -> ExitInfo:
    """Success only for a zero exit code without a terminating signal."""
    if exit_code == 0 and signal is None:
        return ExitInfo(status="success", exit_code=exit_code)
    return ExitInfo(status="error", exit_code=exit_code, signal=signal)


class PlaybackSession:
    """State of a single file being played by a single mplayer process."""

    def __init__(self, file: str, bus: EventBus):
        self.file = file
        self.bus = bus
        self.status = Status.WAIT
        self.time = 0.0
        self.duration = 0.0
        self.position = 0.0
        self.volume: Optional[float] = None
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def snapshot(self) -> PlaybackInfo:
        return PlaybackInfo(
            file=self.file,
            status=self.status,
            time=self.time,
            duration=self.duration,
            position=self.position,
            volume=self.volume,
        )

    def emit(self, kind: str) -> PlaybackInfo:
        """Apply the transition for ``kind`` and publish the snapshot."""
        target = _STATUS_EVENTS.get(kind)
        if target is not None:
            self._transition(target)
        if kind == "ready":
            self._ready = True

        info = self.snapshot()
        self.bus.publish(kind, info)
        return info

    def handle_line(self, line: str) -> Optional[StatusUpdate]:
        """Apply a line of mplayer output, publishing the matching event."""
        update = parse_status_line(line)
        if update is None:
            logger.trace(f"mplayer: {line}")
            return None

        self.apply(update)
        self.emit(update.kind)
        return update

    def apply(self, update: StatusUpdate) -> None:
        if update.kind == "duration":
            self.duration = update.value
        elif update.kind == "time":
            self.time = update.value
            self.position = self.time / self.duration if self.duration else 0.0
        elif update.kind == "volume":
            self.volume = update.value

    def fail(self, error: BaseException) -> ErrorInfo:
        """Move to the error state and publish the ``error`` event."""
        logger.error(f"mplayer error for {self.file}: {error}")
        if not self.is_terminal:
            self.status = Status.ERROR
        info = ErrorInfo(error=error)
        self.bus.publish("error", info)
        return info

    def finish(self, exit_code: Optional[int], signal: Optional[int]) -> ExitInfo:
        """Move to the end state and publish the ``end`` event."""
        info = classify_exit(exit_code, signal)
        log = logger.info if info.success else logger.warning
        log(
            f"mplayer exited for {self.file}: status={info.status}, "
            f"exit_code={exit_code}, signal={signal}"
        )
        if not self.is_terminal:
            self.status = Status.END
        self.bus.publish("end", info)
        return info

    def _transition(self, target: Status) -> None:
        if self.is_terminal:
            logger.debug(f"Ignoring transition to {target.value}: session is {self.status.value}")
            return
        if self.status != target:
            logger.debug(f"Status {self.status.value} -> {target.value}")
        self.status = target
