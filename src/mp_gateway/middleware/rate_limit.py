"""Rate limiting middleware: Redis fixed-window counter per client IP.

Rules:
  - write group (POST/PUT/PATCH/DELETE, i.e. checkout and cart edits):
    RATE_LIMIT_WRITE_PER_MINUTE per IP
  - read group (everything else): RATE_LIMIT_READ_PER_MINUTE per IP

Key pattern: "ratelimit:{client_ip}:{group}". The first INCR in a window
sets the EXPIRE, so the window starts at the first request.

If Redis is unreachable the request is let through and a warning is logged;
an outage of the limiter must not take checkout down with it.
"""

import logging
from collections.abc import Awaitable, Callable

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from config.settings import settings
from src.mp_common.errors import RateLimitError
from src.mp_common.redis_client import get_redis
from src.mp_common.response import error_response

logger = logging.getLogger(__name__)

_WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
_EXEMPT_PATHS = frozenset({"/health", "/docs", "/openapi.json"})


def client_ip(request: Request) -> str:
    """Real client IP, honouring the first X-Forwarded-For hop from the proxy."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        redis_factory: Callable[[], Awaitable[aioredis.Redis]] = get_redis,
        enabled: bool | None = None,
        write_limit: int | None = None,
        read_limit: int | None = None,
        window_seconds: int = 60,
    ) -> None:
        super().__init__(app)
        self._redis_factory = redis_factory
        self._enabled = settings.RATE_LIMIT_ENABLED if enabled is None else enabled
        self._write_limit = (
            settings.RATE_LIMIT_WRITE_PER_MINUTE if write_limit is None else write_limit
        )
        self._read_limit = settings.RATE_LIMIT_READ_PER_MINUTE if read_limit is None else read_limit
        self._window = window_seconds

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self._enabled or request.url.path in _EXEMPT_PATHS:
            return await call_next(request)

        group = "write" if request.method in _WRITE_METHODS else "read"
        limit = self._write_limit if group == "write" else self._read_limit
        key = f"ratelimit:{client_ip(request)}:{group}"

        try:
            redis = await self._redis_factory()
            count = await redis.incr(key)
            if count == 1:
                await redis.expire(key, self._window)
        except RedisError as exc:
            logger.warning("Rate limiter unavailable, allowing %s: %s", key, exc)
            return await call_next(request)

        if count > limit:
            err = RateLimitError()
            logger.warning("Rate limit exceeded: %s (%d > %d)", key, count, limit)
            return JSONResponse(
                status_code=err.http_status,
                content=error_response(err.code, err.message).model_dump(),
                headers={"Retry-After": str(self._window)},
            )
        return await call_next(request)
