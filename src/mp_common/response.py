"""Response envelope shared by every endpoint.

    {"code": 0, "message": "Order placed successfully",
     "data": {"order_number": "..."}, "timestamp": "...", "request_id": "req_..."}

code 0 is success; any other value is an AppError code (see errors.py). On
errors `data` is null unless the error carries structured details, e.g. an
InsufficientStockError puts {requested, available, shortfall} there.
"""

import uuid
from typing import Any

from fastapi import Request
from pydantic import BaseModel, Field

from src.mp_common.datetime_utils import to_iso, utc_now


def _new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: to_iso(utc_now()))
    request_id: str = Field(default_factory=_new_request_id)


def success_response(data: Any = None, message: str = "success") -> ApiResponse:
    return ApiResponse(code=0, message=message, data=data)


def error_response(code: int, message: str, details: dict[str, Any] | None = None) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=details)


def respond(request: Request, data: Any = None, message: str = "success") -> ApiResponse:
    """Success envelope tagged with the request id RequestLogMiddleware assigned."""
    resp = success_response(data, message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
