"""
mplayer process and control pipe.

Commands are written to a named pipe that mplayer reads through
``-input file=<fifo>``; answers come back on mplayer's stdout.
"""

import asyncio
import os
import subprocess
from pathlib import Path
from typing import AsyncIterator, Optional

from loguru import logger

from mplayer_control.core.config import Config

from .exceptions import PlayerNotAvailableError, TransportError

FIFO_MODE = 0o755


def check_mplayer_available(binary: str = "mplayer") -> bool:
    """Check if mplayer is available on the system."""
    try:
        result = subprocess.run([binary], capture_output=True, text=True, timeout=5)
        return result.returncode == 0
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return False


class MPlayerTransport:
    """Owns the control fifo and the mplayer child process."""

    def __init__(self, fifo_path: str, binary: str = "mplayer"):
        self.fifo_path = Path(fifo_path)
        self.binary = binary
        self.process: Optional[asyncio.subprocess.Process] = None
        self._fd: Optional[int] = None

    @classmethod
    def from_config(cls, config: Config) -> "MPlayerTransport":
        return cls(fifo_path=config.paths.fifo, binary=config.player.binary)

    def build_args(self, file: str) -> list[str]:
        return [
            self.binary,
            "-slave",
            "-quiet",
            "-input",
            f"file={self.fifo_path}",
            file,
        ]

    def prepare_pipe(self) -> None:
        """Replace any fifo left by a previous run and open it for writing.

        The fifo is opened read/write so the open does not block until
        mplayer attaches; anything written before then stays buffered.
        """
        if self.fifo_path.exists() or self.fifo_path.is_symlink():
            logger.debug(f"Removing existing fifo: {self.fifo_path}")
            self.fifo_path.unlink()

        os.mkfifo(self.fifo_path, FIFO_MODE)
        self._fd = os.open(self.fifo_path, os.O_RDWR | os.O_NONBLOCK)

    async def open(self, file: str) -> asyncio.subprocess.Process:
        """Spawn mplayer in slave mode for ``file``."""
        args = self.build_args(file)
        logger.info(f"Starting mplayer: {' '.join(args)}")
        self.process = await asyncio.create_subprocess_exec(
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
        return self.process

    def write(self, command: str) -> None:
        if self._fd is None:
            raise TransportError(f"Control pipe {self.fifo_path} is not open")

        logger.debug(f"-> {command}")
        try:
            os.write(self._fd, (command + "\n").encode("utf-8"))
        except OSError as e:
            raise TransportError(f"Failed to write '{command}': {e}") from e

    async def lines(self) -> AsyncIterator[str]:
        """Yield mplayer's stdout line by line until EOF."""
        if self.process is None or self.process.stdout is None:
            return

        while True:
            raw = await self.process.stdout.readline()
            if not raw:
                return
            yield raw.decode("utf-8", errors="replace").rstrip("\r\n")

    async def wait(self) -> tuple[Optional[int], Optional[int]]:
        """Wait for mplayer to exit, returning ``(exit_code, signal)``."""
        if self.process is None:
            return None, None

        returncode = await self.process.wait()
        if returncode < 0:
            return None, -returncode
        return returncode, None

    def close(self) -> None:
        """Stop mplayer if still running and remove the fifo."""
        if self.process is not None and self.process.returncode is None:
            try:
                self.process.terminate()
            except ProcessLookupError:
                pass

        if self._fd is not None:
            try:
                os.close(self._fd)
            except OSError:
                pass
            self._fd = None

        if self.fifo_path.exists():
            try:
                self.fifo_path.unlink()
            except OSError:
                pass


def ensure_mplayer_available(binary: str = "mplayer") -> None:
    """Raise PlayerNotAvailableError unless mplayer can be executed."""
    if not check_mplayer_available(binary):
        raise PlayerNotAvailableError(
            f"{binary} encountered an error or isn't installed."
        )
