"""Broadcaster hub and wire events."""

import pytest

from src.pg_broadcast.application.hub import Broadcaster, Subscription
from src.pg_broadcast.domain.events import (
    BetPlaced,
    BettingClosed,
    GameResultEvent,
    NewPeriod,
    PriceUpdate,
)


class TestWireEvents:
    def test_price_update_uses_camel_case(self) -> None:
        frame = PriceUpdate(
            period=9, open=1.0, high=2.0, low=0.5, close=1.5, countdown=33, betting_active=False
        ).to_wire()
        assert frame == {
            "type": "priceUpdate",
            "data": {
                "period": 9,
                "open": 1.0,
                "high": 2.0,
                "low": 0.5,
                "close": 1.5,
                "countdown": 33,
                "bettingActive": False,
            },
        }

    def test_game_result_keys(self) -> None:
        frame = GameResultEvent(
            period=9, winning_side="RED_DOJI", display_number=4, reference_price=1201
        ).to_wire()
        assert frame["type"] == "gameResult"
        assert set(frame["data"]) == {"period", "winningSide", "displayNumber", "referencePrice"}

    def test_events_are_immutable(self) -> None:
        event = BettingClosed(period=3)
        with pytest.raises(Exception):
            event.period = 4  # type: ignore[misc]


class TestSubscription:
    def test_full_queue_drops_oldest(self) -> None:
        sub = Subscription(maxsize=2)
        for i in range(3):
            sub.offer({"n": i})
        assert sub.dropped == 1
        assert [sub.queue.get_nowait()["n"] for _ in range(2)] == [1, 2]


class TestBroadcaster:
    async def test_every_subscriber_gets_frames_in_order(self) -> None:
        hub = Broadcaster(queue_size=10)
        a, b = hub.subscribe(), hub.subscribe()

        hub.publish(NewPeriod(period=1, countdown=120, betting_active=True))
        hub.publish(BettingClosed(period=1))

        for sub in (a, b):
            assert (await sub.next_frame())["type"] == "newPeriod"
            assert (await sub.next_frame())["type"] == "bettingClosed"

    def test_slow_subscriber_does_not_affect_others(self) -> None:
        hub = Broadcaster(queue_size=1)
        slow, fast = hub.subscribe(), hub.subscribe()

        hub.publish(BettingClosed(period=1))
        fast.queue.get_nowait()
        hub.publish(BettingClosed(period=2))

        assert slow.dropped == 1
        assert fast.dropped == 0
        assert fast.queue.get_nowait()["data"]["period"] == 2

    def test_failing_subscriber_removed(self) -> None:
        hub = Broadcaster()
        broken, healthy = hub.subscribe(), hub.subscribe()

        def boom(frame: dict) -> None:
            raise RuntimeError("socket gone")

        broken.offer = boom  # type: ignore[method-assign]
        hub.publish(BetPlaced(period=1, username="alice", side="UP", amount=100))

        assert hub.subscriber_count == 1
        assert healthy.queue.qsize() == 1

    def test_unsubscribe(self) -> None:
        hub = Broadcaster()
        sub = hub.subscribe()
        hub.unsubscribe(sub)
        hub.unsubscribe(sub)
        hub.publish(BettingClosed(period=1))
        assert hub.subscriber_count == 0
        assert sub.queue.empty()

    def test_publish_without_subscribers(self) -> None:
        Broadcaster().publish(BettingClosed(period=1))
