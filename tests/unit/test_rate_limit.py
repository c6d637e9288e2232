"""Fixed-window limiter on a mocked Redis client."""

from unittest.mock import AsyncMock

import pytest

from src.pg_common.errors import RateLimitError
from src.pg_gateway.middleware.rate_limit import hit


class TestHit:
    async def test_first_hit_sets_expiry(self) -> None:
        redis = AsyncMock()
        redis.incr.return_value = 1

        count = await hit(redis, "u-1", "bets", limit=30, now=120.0)

        assert count == 1
        redis.incr.assert_awaited_once_with("ratelimit:u-1:bets:2")
        redis.expire.assert_awaited_once_with("ratelimit:u-1:bets:2", 60)

    async def test_later_hits_keep_expiry(self) -> None:
        redis = AsyncMock()
        redis.incr.return_value = 5
        await hit(redis, "u-1", "bets", limit=30, now=0.0)
        redis.expire.assert_not_awaited()

    async def test_over_limit(self) -> None:
        redis = AsyncMock()
        redis.incr.return_value = 31
        with pytest.raises(RateLimitError):
            await hit(redis, "u-1", "bets", limit=30)

    async def test_new_window_new_key(self) -> None:
        redis = AsyncMock()
        redis.incr.return_value = 1
        await hit(redis, "u-1", "bets", limit=30, now=59.0)
        await hit(redis, "u-1", "bets", limit=30, now=60.0)
        keys = [call.args[0] for call in redis.incr.await_args_list]
        assert keys == ["ratelimit:u-1:bets:0", "ratelimit:u-1:bets:1"]
