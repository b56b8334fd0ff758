"""Fixtures for playback tests.

FakeMPlayerTransport stands in for the mplayer process: it records every
line written to the control pipe and answers queries the way mplayer
does, through the same line stream the real transport reads.
"""

import asyncio
from typing import Optional

import pytest

from mplayer_control.core.config import Config
from mplayer_control.domain.playback.player import MPlayer


class FakeMPlayerTransport:
    def __init__(
        self,
        duration: float = 300.0,
        volume: float = 100.0,
        auto_respond: bool = True,
        spawn_error: Optional[OSError] = None,
    ):
        self.duration = duration
        self.volume = volume
        self.time = 0.0
        self.paused = False
        self.muted = False
        self.auto_respond = auto_respond
        self.spawn_error = spawn_error
        self.writes: list[str] = []
        self.pipe_prepared = False
        self.opened_with: Optional[str] = None
        self.closed = False
        self._lines: asyncio.Queue = asyncio.Queue()
        self._exit_status: tuple[Optional[int], Optional[int]] = (None, None)

    @property
    def commands(self) -> list[str]:
        """Written lines without the pausing prefix."""
        return [line.split(" ", 1)[1] for line in self.writes]

    def prepare_pipe(self) -> None:
        self.pipe_prepared = True

    async def open(self, file: str):
        if self.spawn_error is not None:
            raise self.spawn_error
        self.opened_with = file
        return self

    def write(self, command: str) -> None:
        self.writes.append(command)
        if self.auto_respond:
            self._respond(command)

    def emit(self, line: str) -> None:
        """Make the fake print a line on stdout."""
        self._lines.put_nowait(line)

    def exit(self, exit_code: Optional[int] = 0, signal: Optional[int] = None) -> None:
        self._exit_status = (exit_code, signal)
        self._lines.put_nowait(None)

    async def lines(self):
        while True:
            line = await self._lines.get()
            if line is None:
                return
            yield line

    async def wait(self) -> tuple[Optional[int], Optional[int]]:
        return self._exit_status

    def close(self) -> None:
        self.closed = True

    def _respond(self, command: str) -> None:
        _flag, name, *args = command.split()

        if name == "get_time_pos":
            self.emit(f"ANS_TIME_POSITION={self.time:.1f}")
        elif name == "get_time_length":
            self.emit(f"ANS_LENGTH={self.duration:.2f}")
        elif name == "get_property" and args == ["volume"]:
            self.emit(f"ANS_volume={self.volume:.6f}")
        elif name == "pause":
            self.paused = not self.paused
        elif name == "mute":
            self.muted = args[0] == "1"
        elif name == "seek":
            value = float(args[0])
            mode = int(args[1]) if len(args) > 1 else 0
            if mode == 2:
                self.time = value
            elif mode == 1:
                self.time = self.duration * value / 100
            else:
                self.time += value
            self.time = max(0.0, min(self.time, self.duration))
        elif name == "volume":
            value = float(args[0])
            if len(args) > 1 and args[1] == "1":
                self.volume = value
            else:
                self.volume += value
            self.volume = max(0.0, min(self.volume, 100.0))


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def media_file(tmp_path) -> str:
    """An existing file standing in for a track."""
    path = tmp_path / "sample.mp3"
    path.write_bytes(b"ID3")
    return str(path)


@pytest.fixture
def config() -> Config:
    config = Config()
    config.player.update_interval = 10
    return config


@pytest.fixture
def transport() -> FakeMPlayerTransport:
    return FakeMPlayerTransport()


@pytest.fixture
async def player(config: Config, transport: FakeMPlayerTransport):
    player = MPlayer(config, transport_factory=lambda config: transport)
    yield player
    player.close()


@pytest.fixture
def fake_transport_cls() -> type:
    return FakeMPlayerTransport
