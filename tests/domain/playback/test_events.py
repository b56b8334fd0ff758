"""Tests for the event bus."""

import pytest

from mplayer_control.domain.playback.events import EVENT_KINDS, EventBus


class TestEventBus:
    """Tests for EventBus."""

    def test_publish_reaches_subscribers_in_order(self) -> None:
        bus = EventBus()
        calls = []
        bus.subscribe("play", lambda payload: calls.append(("a", payload)))
        bus.subscribe("play", lambda payload: calls.append(("b", payload)))

        bus.publish("play", 1)

        assert calls == [("a", 1), ("b", 1)]

    def test_publish_only_to_matching_kind(self) -> None:
        bus = EventBus()
        calls = []
        bus.subscribe("stop", calls.append)

        bus.publish("play", 1)

        assert calls == []

    def test_unsubscribe(self) -> None:
        bus = EventBus()
        calls = []
        unsubscribe = bus.subscribe("time", calls.append)

        unsubscribe()
        unsubscribe()  # second call is a no-op
        bus.publish("time", 1)

        assert calls == []
        assert bus.subscriber_count("time") == 0

    def test_once_fires_a_single_time(self) -> None:
        bus = EventBus()
        calls = []
        bus.once("duration", calls.append)

        bus.publish("duration", 1)
        bus.publish("duration", 2)

        assert calls == [1]

    def test_failing_subscriber_does_not_block_others(self) -> None:
        bus = EventBus()
        calls = []

        def broken(payload):
            raise RuntimeError("boom")

        bus.subscribe("end", broken)
        bus.subscribe("end", calls.append)

        bus.publish("end", "done")

        assert calls == ["done"]

    def test_subscriber_added_during_publish_waits_for_next_event(self) -> None:
        bus = EventBus()
        calls = []
        bus.subscribe("seek", lambda payload: bus.subscribe("seek", calls.append))

        bus.publish("seek", 1)
        assert calls == []

        bus.publish("seek", 2)
        assert calls == [2]

    def test_unknown_kind_rejected(self) -> None:
        bus = EventBus()
        with pytest.raises(ValueError):
            bus.subscribe("finished", print)
        with pytest.raises(ValueError):
            bus.publish("finished", None)

    def test_event_kinds(self) -> None:
        assert EVENT_KINDS == {
            "ready", "play", "pause", "stop", "seek",
            "duration", "time", "volume", "end", "error",
        }
