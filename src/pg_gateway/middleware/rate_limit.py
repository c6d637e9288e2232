"""Fixed-window rate limiting backed by Redis.

Used as a route dependency on bet placement:
    key   = "ratelimit:{user_id}:{group}:{window}"
    count = INCR key; EXPIRE key 60 on first hit
    count > limit -> RateLimitError (9001)

If Redis is unreachable the request is allowed and a warning is logged;
the ledger, not the limiter, is what protects balances.
"""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Depends
from redis.exceptions import RedisError

from config.settings import settings
from src.pg_common.errors import RateLimitError
from src.pg_common.redis_client import get_redis
from src.pg_gateway.auth.dependencies import get_current_user
from src.pg_gateway.user.db_models import UserModel

logger = logging.getLogger(__name__)

_WINDOW_SECONDS = 60


async def hit(redis, user_id: str, group: str, limit: int, now: float | None = None) -> int:  # type: ignore[no-untyped-def]
    """Count one request in the current window; raise once over the limit."""
    window = int((time.time() if now is None else now) // _WINDOW_SECONDS)
    key = f"ratelimit:{user_id}:{group}:{window}"
    count = int(await redis.incr(key))
    if count == 1:
        await redis.expire(key, _WINDOW_SECONDS)
    if count > limit:
        raise RateLimitError()
    return count


def rate_limited(group: str, limit: int) -> Callable[..., Awaitable[None]]:
    """Build a FastAPI dependency enforcing ``limit`` requests/minute per user."""

    async def _dependency(
        current_user: UserModel = Depends(get_current_user),
    ) -> None:
        try:
            redis = await get_redis()
            await hit(redis, str(current_user.id), group, limit)
        except RedisError:
            logger.warning("rate limiter unavailable, allowing %s request", group)

    return _dependency


bet_rate_limit = rate_limited("bets", settings.BET_RATE_LIMIT_PER_MINUTE)
