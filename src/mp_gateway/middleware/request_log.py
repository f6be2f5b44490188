"""Access log and request correlation.

Every request gets a request id: the upstream gateway's X-Request-ID when it
sent one, otherwise a fresh `req_<12 hex>`. It is stored on request.state (the
ApiResponse envelope echoes it) and returned in the X-Request-ID header.

    INFO    [POST] /api/v1/checkout → 200 (412ms) req_a1b2c3d4e5f6 ip=10.0.0.7
    WARNING [POST] /api/v1/checkout → 502 (5030ms) req_0f9e8d7c6b5a ip=10.0.0.7
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.mp_gateway.middleware.rate_limit import client_ip

logger = logging.getLogger("mp.request")

_MAX_INBOUND_ID_LEN = 64


def _request_id(request: Request) -> str:
    inbound = request.headers.get("x-request-id", "").strip()
    if inbound and len(inbound) <= _MAX_INBOUND_ID_LEN:
        return inbound
    return f"req_{uuid.uuid4().hex[:12]}"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _request_id(request)
        request.state.request_id = request_id

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers["X-Request-ID"] = request_id
        logger.log(
            logging.WARNING if response.status_code >= 500 else logging.INFO,
            "[%s] %s → %d (%.0fms) %s ip=%s",
            request.method, request.url.path, response.status_code, elapsed_ms,
            request_id, client_ip(request),
        )
        return response
