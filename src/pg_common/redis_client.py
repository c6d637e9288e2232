"""Shared Redis client. Only the bet rate limiter uses it.

Nothing on the money path reads Redis, so an outage degrades rate limiting
and nothing else: ``ping_redis`` reports instead of raising.
"""

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from config.settings import settings

logger = logging.getLogger(__name__)

_client: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    global _client  # noqa: PLW0603
    if _client is None:
        _client = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
            socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
        )
    return _client


async def ping_redis() -> bool:
    try:
        client = await get_redis()
        await client.ping()
    except RedisError as exc:
        logger.warning("redis unreachable (%s): bet rate limiting disabled until it returns", exc)
        return False
    return True


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.aclose()
        _client = None
