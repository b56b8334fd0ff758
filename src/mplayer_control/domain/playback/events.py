"""Publish/subscribe for player events."""

from collections import defaultdict
from typing import Any, Callable

from loguru import logger

EVENT_KINDS = frozenset(
    {
        "ready",
        "play",
        "pause",
        "stop",
        "seek",
        "duration",
        "time",
        "volume",
        "end",
        "error",
    }
)

Subscriber = Callable[[Any], None]


class EventBus:
    """Delivers event payloads to the callbacks registered for each kind.

    Callbacks run synchronously, in registration order. A callback that
    raises is logged and skipped; the rest still receive the event.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Subscriber]] = defaultdict(list)

    def subscribe(self, kind: str, callback: Subscriber) -> Callable[[], None]:
        """Register a callback, returning a function that removes it."""
        _check_kind(kind)
        self._subscribers[kind].append(callback)

        def unsubscribe() -> None:
            try:
                self._subscribers[kind].remove(callback)
            except ValueError:
                pass

        return unsubscribe

    def once(self, kind: str, callback: Subscriber) -> Callable[[], None]:
        """Register a callback that fires for the next event only."""
        unsubscribe: Callable[[], None]

        def wrapper(payload: Any) -> None:
            unsubscribe()
            callback(payload)

        unsubscribe = self.subscribe(kind, wrapper)
        return unsubscribe

    def publish(self, kind: str, payload: Any) -> None:
        _check_kind(kind)
        for callback in list(self._subscribers.get(kind, ())):
            try:
                callback(payload)
            except Exception:
                logger.exception(f"Subscriber for '{kind}' event failed")

    def subscriber_count(self, kind: str) -> int:
        return len(self._subscribers.get(kind, ()))


def _check_kind(kind: str) -> None:
    if kind not in EVENT_KINDS:
        raise ValueError(
            f"Unknown event kind: {kind!r}. Valid kinds are: {sorted(EVENT_KINDS)}"
        )
