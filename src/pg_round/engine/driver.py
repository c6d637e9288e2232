"""RoundDriver: the single background task that advances the round clock.

Ticks are scheduled against the event loop's monotonic clock so a slow tick
does not push every later tick back. ``stop`` lets an in-flight tick finish
(a half-settled round would otherwise wait for the next startup).
"""

import asyncio
import logging

from src.pg_round.engine.clock import RoundClock

logger = logging.getLogger(__name__)


class RoundDriver:
    def __init__(self, clock: RoundClock, interval: float = 1.0) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._clock = clock
        self._interval = interval
        self._stop = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            return
        await self._clock.bootstrap()
        self._stop.clear()
        self._task = asyncio.create_task(self._run(), name="round-driver")
        logger.info("round driver started (interval=%.2fs)", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stop.set()
        await self._task
        self._task = None
        logger.info("round driver stopped")

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        next_at = loop.time() + self._interval
        while not self._stop.is_set():
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=max(0.0, next_at - loop.time()))
                break
            except TimeoutError:
                pass
            try:
                await self._clock.tick()
            except Exception:
                logger.exception("round tick failed")
            next_at += self._interval
            # After a long stall, resume from now instead of bursting
            if next_at < loop.time():
                next_at = loop.time() + self._interval
