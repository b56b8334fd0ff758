"""
mplayer control facade.

Mutating calls return the player immediately and complete in the
background, emitting the matching event once the command went out.
Queries return asyncio futures that resolve with the next answer
mplayer prints for them.
"""

import asyncio
from dataclasses import replace
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from loguru import logger

from mplayer_control.core.config import Config, InitialStateConfig

from .commands import Command, SeekMode, VolumeMode, encode_command
from .events import EventBus
from .exceptions import MediaFileNotFoundError, NoFileError, TransportError
from .queue import ReadinessQueue
from .state import PlaybackInfo, PlaybackSession, Status
from .transport import MPlayerTransport

TransportFactory = Callable[[Config], MPlayerTransport]


class MPlayer:
    """Controls one mplayer process at a time.

    Usage (inside a running event loop)::

        player = MPlayer()
        player.on("time", lambda info: print(info.time))
        player.set_file("song.mp3").play()
        await player.wait_for("end")
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        transport_factory: Optional[TransportFactory] = None,
    ):
        self.config = config or Config()
        self._transport_factory = transport_factory or MPlayerTransport.from_config
        self._bus = EventBus()
        self._session: Optional[PlaybackSession] = None
        self._transport: Optional[MPlayerTransport] = None
        self._queue = ReadinessQueue()
        # In-flight queries by event kind; at most one per kind
        self._queries: dict[str, asyncio.Future] = {}
        self._query_unsubscribes: dict[str, Callable[[], None]] = {}
        self._tasks: set[asyncio.Task] = set()
        self._ready_task: Optional[asyncio.Task] = None
        self._poll_task: Optional[asyncio.Task] = None
        self._paused = True
        self._muted = False

    # ------------------------------------------------------------ Events

    def on(self, kind: str, callback: Callable[[Any], None]) -> Callable[[], None]:
        """Subscribe to an event kind. Returns an unsubscribe function."""
        return self._bus.subscribe(kind, callback)

    def once(self, kind: str, callback: Callable[[Any], None]) -> Callable[[], None]:
        return self._bus.once(kind, callback)

    def wait_for(
        self, kind: str, predicate: Optional[Callable[[Any], bool]] = None
    ) -> asyncio.Future:
        """Future for the next ``kind`` event whose payload matches ``predicate``."""
        future = asyncio.get_running_loop().create_future()

        def check(payload: Any) -> None:
            if future.done():
                unsubscribe()
                return
            if predicate is None or predicate(payload):
                unsubscribe()
                future.set_result(payload)

        unsubscribe = self._bus.subscribe(kind, check)
        return future

    # ------------------------------------------------------------ State

    @property
    def info(self) -> Optional[PlaybackInfo]:
        """Snapshot of the current session, or None before set_file()."""
        if self._session is None:
            return None
        return self._session.snapshot()

    @property
    def status(self) -> Optional[Status]:
        if self._session is None:
            return None
        return self._session.status

    @property
    def is_ready(self) -> bool:
        return self._session is not None and self._session.is_ready

    # ------------------------------------------------------------ Initialization

    def set_file(self, file: str, **initial: Any) -> "MPlayer":
        """Start a new mplayer process for ``file``.

        Args:
            file: Path of the media file
            **initial: Overrides for the initial state (volume, loop, time,
                position, speed, mute) applied right after launch

        Raises:
            MediaFileNotFoundError: If the file does not exist
        """
        if not Path(file).exists():
            raise MediaFileNotFoundError(str(file))

        self.initialize(str(file), **initial)
        return self

    def initialize(self, file: str, **initial: Any) -> None:
        initial_state = replace(self.config.initial, **initial)
        initial_state.validate()

        # A new file always means a new process and a fresh session
        self._teardown()

        logger.info(f"Loading {file}")
        session = PlaybackSession(file, self._bus)
        transport = self._transport_factory(self.config)
        transport.prepare_pipe()

        self._session = session
        self._transport = transport
        self._queue = ReadinessQueue()
        self._queries = {}
        self._paused = True
        self._muted = False

        self._spawn(self._run(session, transport))

        # mplayer starts paused; playback begins with play()
        self._write("pause")
        self._apply_initial_state(initial_state)

        # Ready once both the first time and duration answers arrived
        self._ready_task = self._spawn(
            self._await_ready(session, self.get_time_position(), self.get_time_length())
        )

    def close(self) -> None:
        """Stop mplayer and discard the session without an ``end`` event."""
        self._teardown()
        self._session = None

    # ------------------------------------------------------------ Playback

    def play(self) -> "MPlayer":
        session = self._require_live(
            "No playback file has been set. Use set_file() before starting playback."
        )

        if self._paused:
            # mplayer has no resume command; "pause" toggles
            future = self._dispatch("pause")
            self._paused = False
        else:
            future = self._completed(session.snapshot())

        def confirm(session: PlaybackSession) -> None:
            session.emit("play")
            self._start_time_position_polling()

        self._then(future, confirm)
        return self

    def pause(self) -> "MPlayer":
        """Toggle pause.

        If the session is already paused when the command completes the
        toggle resumed playback, so a ``play`` event is emitted instead.
        """
        future = self._dispatch("pause")
        self._paused = not self._paused

        def confirm(session: PlaybackSession) -> None:
            if session.status == Status.PAUSE:
                session.emit("play")
                self._start_time_position_polling()
            else:
                session.emit("pause")

        self._then(future, confirm)
        return self

    def stop(self) -> "MPlayer":
        future = self._dispatch("stop")

        def confirm(session: PlaybackSession) -> None:
            self._cancel_polling()
            session.emit("stop")

        self._then(future, confirm)
        return self

    def seek(self, seconds: float) -> "MPlayer":
        """Seek relative to the current position."""
        return self._reposition(seconds, SeekMode.RELATIVE)

    def set_position(self, percent: float) -> "MPlayer":
        """Seek to a percentage (0-100) of the file."""
        return self._reposition(percent, SeekMode.PERCENTAGE)

    def set_time(self, seconds: float) -> "MPlayer":
        """Seek to an absolute time in seconds."""
        return self._reposition(seconds, SeekMode.ABSOLUTE)

    # ------------------------------------------------------------ Volume

    def mute(self, muted: bool = True) -> "MPlayer":
        self._dispatch("mute", muted)
        self._muted = muted
        return self

    def set_volume(self, volume: float) -> "MPlayer":
        self._dispatch("volume", volume, VolumeMode.ABSOLUTE)
        self.get_volume()
        return self

    def increase_volume(self, amount: float) -> "MPlayer":
        self._dispatch("volume", amount, VolumeMode.RELATIVE)
        self.get_volume()
        return self

    def decrease_volume(self, amount: float) -> "MPlayer":
        self._dispatch("volume", -amount, VolumeMode.RELATIVE)
        self.get_volume()
        return self

    # ------------------------------------------------------------ Properties

    def set_loop(self, times: int) -> "MPlayer":
        self._dispatch("loop", times)
        return self

    def set_speed(self, speed: float) -> "MPlayer":
        self._dispatch("speed_set", speed)
        return self

    # ------------------------------------------------------------ Queries

    def get_status(self) -> asyncio.Future:
        session = self._require_file()
        return self._completed(session.status)

    def get_time_length(self) -> asyncio.Future:
        return self._query("duration", "get_time_length", immediate=True)

    def get_time_position(self) -> asyncio.Future:
        return self._query("time", "get_time_pos", immediate=True)

    def get_volume(self) -> asyncio.Future:
        return self._query("volume", "get_property", "volume")

    # ------------------------------------------------------------ Internals

    def _require_file(self, message: Optional[str] = None) -> PlaybackSession:
        if self._session is None or self._transport is None:
            raise NoFileError(message)
        return self._session

    def _require_live(self, message: Optional[str] = None) -> PlaybackSession:
        """Like _require_file, but also rejects a session whose process is gone."""
        session = self._require_file(message)
        if session.is_terminal:
            raise NoFileError(
                f"mplayer is no longer running (status: {session.status.value}). "
                "Use set_file() to load a file again."
            )
        return session

    def _completed(self, value: Any) -> asyncio.Future:
        future = asyncio.get_running_loop().create_future()
        future.set_result(value)
        return future

    def _dispatch(self, name: str, *args: Any) -> asyncio.Future:
        """Write a command now, or queue it until the session is ready."""
        session = self._require_live()
        command = Command(name, args)

        if not self._queue.accepts_direct():
            return self._queue.enqueue(command)

        self._send(command)
        return self._completed(session.snapshot())

    def _send(self, command: Command) -> None:
        self._write(command.name, *command.args)

    def _write(self, name: str, *args: Any) -> None:
        session = self._require_file()
        try:
            self._transport.write(encode_command(name, *args))
        except TransportError as e:
            session.fail(e)

    def _query(self, kind: str, name: str, *args: Any, immediate: bool = False) -> asyncio.Future:
        self._require_live()

        pending = self._queries.get(kind)
        if pending is not None and not pending.done():
            return pending

        future = asyncio.get_running_loop().create_future()
        self._queries[kind] = future

        def resolve(info: PlaybackInfo) -> None:
            if self._queries.get(kind) is future:
                del self._queries[kind]
                self._query_unsubscribes.pop(kind, None)
            if not future.done():
                future.set_result(getattr(info, kind))

        self._query_unsubscribes[kind] = self._bus.once(kind, resolve)

        if immediate:
            self._write(name, *args)
        else:
            self._dispatch(name, *args)

        return future

    def _reposition(self, value: float, mode: SeekMode) -> "MPlayer":
        # Muting around the seek hides the audible glitch
        futures = [
            self._dispatch("mute", True),
            self._dispatch("seek", value, mode),
            self._dispatch("mute", self._muted),
        ]
        self._then(asyncio.gather(*futures), lambda session: session.emit("seek"))
        return self

    def _apply_initial_state(self, initial: InitialStateConfig) -> None:
        if initial.volume is not None:
            self.set_volume(initial.volume)

        if initial.loop is not None:
            self.set_loop(initial.loop)

        if initial.time is not None:
            self.set_time(initial.time)

        if initial.position is not None:
            self.set_position(initial.position)

        if initial.speed is not None:
            self.set_speed(initial.speed)

        if initial.mute:
            self.mute()

    async def _await_ready(
        self,
        session: PlaybackSession,
        time_position: asyncio.Future,
        time_length: asyncio.Future,
    ) -> None:
        await asyncio.gather(asyncio.shield(time_position), asyncio.shield(time_length))
        if session is not self._session or session.is_terminal:
            return

        self._queue.drain_on_ready(self._send, session.snapshot)
        logger.info(f"mplayer ready: {session.file} ({session.duration:.2f}s)")
        session.emit("ready")

    async def _run(self, session: PlaybackSession, transport: MPlayerTransport) -> None:
        try:
            await transport.open(session.file)
        except OSError as e:
            self._cancel_polling()
            self._cancel_ready_gate()
            session.fail(e)
            transport.close()
            return

        async for line in transport.lines():
            session.handle_line(line)

        exit_code, signal = await transport.wait()
        self._cancel_polling()
        self._cancel_ready_gate()
        session.finish(exit_code, signal)
        transport.close()

    def _start_time_position_polling(self) -> None:
        if not self.config.player.update_interval:
            return
        if self._poll_task is not None and not self._poll_task.done():
            return

        self._poll_task = self._spawn(self._poll_time_position(self._session))

    async def _poll_time_position(self, session: PlaybackSession) -> None:
        interval = self.config.player.update_interval / 1000
        iteration = 0

        while not session.is_terminal:
            # Shielded so cancelling the poll does not cancel a shared query
            position = await asyncio.shield(self.get_time_position())
            logger.debug(
                f"poll {iteration}: time={position} interval={self.config.player.update_interval}ms"
            )
            iteration += 1
            await asyncio.sleep(interval)

    def _cancel_polling(self) -> None:
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None

    def _cancel_ready_gate(self) -> None:
        if self._ready_task is not None:
            self._ready_task.cancel()
            self._ready_task = None

    def _then(
        self, future: Awaitable[Any], callback: Callable[[PlaybackSession], None]
    ) -> None:
        """Run ``callback`` with the session once ``future`` completes."""
        session = self._session

        async def confirm() -> None:
            await future
            if session is self._session:
                callback(session)

        self._spawn(confirm())

    def _spawn(self, coro: Awaitable[Any]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.opt(exception=error).error("Background player task failed")

    def _teardown(self) -> None:
        self._cancel_polling()
        self._cancel_ready_gate()
        # Pending queries of the old session must not resolve from the next one
        for unsubscribe in self._query_unsubscribes.values():
            unsubscribe()
        self._query_unsubscribes.clear()
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

        if self._transport is not None:
            self._transport.close()
            self._transport = None
