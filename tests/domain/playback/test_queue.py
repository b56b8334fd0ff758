"""Tests for the readiness queue."""

import pytest

from mplayer_control.domain.playback.commands import Command
from mplayer_control.domain.playback.queue import ReadinessQueue

pytestmark = pytest.mark.anyio


async def test_not_ready_initially() -> None:
    queue = ReadinessQueue()
    assert not queue.is_ready()
    assert not queue.accepts_direct()


async def test_drain_replays_in_order_and_resolves() -> None:
    queue = ReadinessQueue()
    futures = [queue.enqueue(Command(name, (i,))) for i, name in enumerate(["a", "b", "c"])]
    dispatched = []

    replayed = queue.drain_on_ready(dispatched.append, lambda: "snapshot")

    assert replayed == 3
    assert [command.name for command in dispatched] == ["a", "b", "c"]
    assert [command.args for command in dispatched] == [(0,), (1,), (2,)]
    assert all(future.result() == "snapshot" for future in futures)
    assert len(queue) == 0
    assert queue.is_ready()
    assert queue.accepts_direct()


async def test_drain_runs_only_once() -> None:
    queue = ReadinessQueue()
    queue.enqueue(Command("a"))
    dispatched = []

    queue.drain_on_ready(dispatched.append, lambda: None)
    assert queue.drain_on_ready(dispatched.append, lambda: None) == 0

    assert len(dispatched) == 1


async def test_enqueue_during_drain_goes_to_back() -> None:
    queue = ReadinessQueue()
    queue.enqueue(Command("first"))
    queue.enqueue(Command("second"))
    dispatched = []

    def dispatch(command: Command) -> None:
        dispatched.append(command.name)
        assert not queue.accepts_direct()
        if command.name == "first":
            queue.enqueue(Command("side-effect"))

    queue.drain_on_ready(dispatch, lambda: None)

    assert dispatched == ["first", "second", "side-effect"]
    assert queue.accepts_direct()


async def test_empty_drain_marks_ready() -> None:
    queue = ReadinessQueue()
    assert queue.drain_on_ready(lambda command: None, lambda: None) == 0
    assert queue.is_ready()
