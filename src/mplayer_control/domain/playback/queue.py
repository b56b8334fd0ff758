"""
Buffer for commands issued before mplayer is ready.

Commands are replayed in FIFO order exactly once when the session becomes
ready. Commands enqueued while the drain is running go to the back of the
same queue and are replayed by the same drain.
"""

import asyncio
from collections import deque
from typing import Any, Callable, NamedTuple

from loguru import logger

from .commands import Command


class PendingCommand(NamedTuple):
    """A queued command and the future resolved once it was replayed."""

    command: Command
    future: asyncio.Future


class ReadinessQueue:
    def __init__(self) -> None:
        self._pending: deque[PendingCommand] = deque()
        self._ready = False
        self._draining = False

    def is_ready(self) -> bool:
        return self._ready

    def accepts_direct(self) -> bool:
        """Whether commands may bypass the queue and be written now."""
        return self._ready and not self._draining

    def __len__(self) -> int:
        return len(self._pending)

    def enqueue(self, command: Command) -> asyncio.Future:
        future = asyncio.get_running_loop().create_future()
        self._pending.append(PendingCommand(command, future))
        logger.debug(f"Queued '{command.name}' until ready ({len(self._pending)} pending)")
        return future

    def drain_on_ready(
        self,
        dispatch: Callable[[Command], None],
        snapshot: Callable[[], Any],
    ) -> int:
        """Mark ready and replay every buffered command in order.

        Args:
            dispatch: Writes a single command to mplayer
            snapshot: Produces the value each command's future resolves with

        Returns:
            Number of commands replayed
        """
        if self._ready:
            return 0

        self._ready = True
        self._draining = True
        replayed = 0
        try:
            while self._pending:
                pending = self._pending.popleft()
                dispatch(pending.command)
                replayed += 1
                if not pending.future.done():
                    pending.future.set_result(snapshot())
        finally:
            self._draining = False

        if replayed:
            logger.debug(f"Replayed {replayed} queued command(s)")
        return replayed
