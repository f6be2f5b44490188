"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.mp_analytics.api.router import router as analytics_router
from src.mp_cart.api.router import router as cart_router
from src.mp_catalog.infrastructure.client import close_catalog_client
from src.mp_checkout.api.router import router as checkout_router
from src.mp_common.database import check_database, engine
from src.mp_common.errors import AppError
from src.mp_common.redis_client import close_redis, ping_redis
from src.mp_common.response import error_response
from src.mp_gateway.middleware.rate_limit import RateLimitMiddleware
from src.mp_gateway.middleware.request_log import RequestLogMiddleware
from src.mp_order.api.router import router as order_router

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB (fatal) and Redis (advisory). Shutdown: dispose."""
    # Startup
    await check_database()
    if settings.RATE_LIMIT_ENABLED:
        await ping_redis()
    yield
    # Shutdown
    await close_catalog_client()
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# Starlette runs the last-added middleware first: log, then rate limit
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    resp = error_response(exc.code, exc.message, exc.details)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(checkout_router, prefix="/api/v1")
app.include_router(order_router, prefix="/api/v1")
app.include_router(cart_router, prefix="/api/v1")
app.include_router(analytics_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
