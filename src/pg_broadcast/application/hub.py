"""In-process publish/subscribe hub for round events.

Each subscriber owns a bounded asyncio.Queue. ``publish`` never awaits: a full
queue drops that subscriber's oldest frame, so one slow WebSocket can neither
stall the round clock nor delay other subscribers. Frames reach a given
subscriber in publish order.
"""

import asyncio
import itertools
import logging
from typing import Any

from src.pg_broadcast.domain.events import WireEvent

logger = logging.getLogger(__name__)

_ids = itertools.count(1)


class Subscription:
    def __init__(self, maxsize: int) -> None:
        self.id = next(_ids)
        self.queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    def offer(self, frame: dict[str, Any]) -> None:
        """Enqueue without blocking, evicting the oldest frame when full."""
        if self.queue.full():
            try:
                self.queue.get_nowait()
                self.dropped += 1
            except asyncio.QueueEmpty:
                pass
        self.queue.put_nowait(frame)

    async def next_frame(self) -> dict[str, Any]:
        return await self.queue.get()


class Broadcaster:
    def __init__(self, queue_size: int = 100) -> None:
        self._queue_size = queue_size
        self._subscribers: dict[int, Subscription] = {}

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> Subscription:
        sub = Subscription(self._queue_size)
        self._subscribers[sub.id] = sub
        logger.debug("subscriber %d joined (%d total)", sub.id, len(self._subscribers))
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        if self._subscribers.pop(sub.id, None) is not None and sub.dropped:
            logger.info("subscriber %d left after dropping %d frames", sub.id, sub.dropped)

    def publish(self, event: WireEvent) -> None:
        frame = event.to_wire()
        # Snapshot: subscribers may leave while we iterate
        for sub in list(self._subscribers.values()):
            try:
                sub.offer(frame)
            except Exception:
                logger.exception("dropping subscriber %d after delivery failure", sub.id)
                self._subscribers.pop(sub.id, None)
