"""Redis connection for the rate limiter.

Carts, orders and analytics live in PostgreSQL; Redis only holds short-lived
per-IP request counters. Socket timeouts are kept short so that a slow Redis
makes the limiter fail open quickly instead of stalling checkout.
"""

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from config.settings import settings

logger = logging.getLogger(__name__)

_client: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """Shared client; created lazily on first use."""
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
    """Startup probe. A dead Redis is logged, not fatal: the limiter fails open."""
    try:
        client = await get_redis()
        await client.ping()
    except RedisError as exc:
        logger.warning("Redis unreachable at startup, rate limiting will fail open: %s", exc)
        return False
    return True


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.aclose()
        _client = None
