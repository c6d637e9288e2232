"""RoundDriver: one background task, graceful stop."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from src.pg_round.engine.driver import RoundDriver


class TestRoundDriver:
    async def test_bootstraps_then_ticks(self) -> None:
        clock = AsyncMock()
        driver = RoundDriver(clock, interval=0.01)

        await driver.start()
        await asyncio.sleep(0.08)
        await driver.stop()

        clock.bootstrap.assert_awaited_once()
        assert clock.tick.await_count >= 2
        assert driver.running is False

    async def test_tick_failure_does_not_stop_driver(self) -> None:
        clock = AsyncMock()
        clock.tick.side_effect = RuntimeError("boom")
        driver = RoundDriver(clock, interval=0.01)

        await driver.start()
        await asyncio.sleep(0.06)
        assert driver.running is True
        await driver.stop()

        assert clock.tick.await_count >= 2

    async def test_stop_waits_for_in_flight_tick(self) -> None:
        started = asyncio.Event()
        finished: list[bool] = []

        async def slow_tick() -> None:
            started.set()
            await asyncio.sleep(0.05)
            finished.append(True)

        clock = AsyncMock()
        clock.tick.side_effect = slow_tick
        driver = RoundDriver(clock, interval=0.01)

        await driver.start()
        await started.wait()
        await driver.stop()

        assert finished == [True]

    async def test_start_twice_is_noop(self) -> None:
        clock = AsyncMock()
        driver = RoundDriver(clock, interval=0.5)
        await driver.start()
        await driver.start()
        await driver.stop()
        clock.bootstrap.assert_awaited_once()

    async def test_stop_without_start(self) -> None:
        await RoundDriver(AsyncMock(), interval=1.0).stop()

    def test_rejects_bad_interval(self) -> None:
        with pytest.raises(ValueError):
            RoundDriver(AsyncMock(), interval=0)
