"""Tests for mp_common.errors and mp_common.response."""

from unittest.mock import MagicMock

from src.mp_common.errors import (
    AppError,
    CartLineNotFoundError,
    EmptyCartError,
    InsufficientStockError,
    InvalidCredentialsError,
    InvalidQuantityError,
    InternalError,
    NotFoundError,
    OrderLineNotFoundError,
    OrderNotFoundError,
    ProductUnavailableError,
    RateLimitError,
    RemoteServiceError,
)
from src.mp_common.response import ApiResponse, error_response, respond, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_custom_http_status(self) -> None:
        err = AppError(code=2001, message="Cart is empty", http_status=400)
        assert err.http_status == 400

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1, message="x"), Exception)


class TestSpecificErrors:
    def test_empty_cart(self) -> None:
        err = EmptyCartError()
        assert err.code == 2001
        assert err.http_status == 400

    def test_cart_line_not_found(self) -> None:
        err = CartLineNotFoundError(42)
        assert err.code == 2002
        assert err.http_status == 404
        assert "42" in err.message
        assert isinstance(err, NotFoundError)

    def test_invalid_quantity(self) -> None:
        err = InvalidQuantityError(0)
        assert err.code == 2003
        assert err.http_status == 422

    def test_product_unavailable_names_product_and_merchant(self) -> None:
        err = ProductUnavailableError(101, "m1")
        assert err.code == 3001
        assert "101" in err.message
        assert "m1" in err.message

    def test_insufficient_stock_reports_shortfall(self) -> None:
        err = InsufficientStockError("Trail Shoe", requested=5, available=3)
        assert err.code == 3002
        assert err.http_status == 409
        assert err.requested == 5
        assert err.available == 3
        assert "Trail Shoe" in err.message
        assert "short by 2" in err.message
        assert err.details == {"requested": 5, "available": 3, "shortfall": 2}

    def test_remote_service_error(self) -> None:
        err = RemoteServiceError("timeout")
        assert err.code == 3003
        assert err.http_status == 502
        assert "timeout" in err.message

    def test_order_not_found(self) -> None:
        err = OrderNotFoundError("abc-123")
        assert err.code == 4004
        assert err.http_status == 404

    def test_order_line_not_found(self) -> None:
        err = OrderLineNotFoundError(7)
        assert err.code == 4005
        assert err.http_status == 404

    def test_invalid_credentials(self) -> None:
        err = InvalidCredentialsError()
        assert err.code == 1003
        assert err.http_status == 401

    def test_internal_error(self) -> None:
        err = InternalError("Order line insert returned no row")
        assert err.code == 9002
        assert err.http_status == 500
        assert "no row" in err.message

    def test_rate_limit(self) -> None:
        err = RateLimitError()
        assert err.code == 9001
        assert err.http_status == 429


class TestApiResponse:
    def test_success_response(self) -> None:
        resp = success_response(data={"order_number": "abc"})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"order_number": "abc"}
        assert resp.request_id.startswith("req_")
        assert resp.timestamp

    def test_error_response(self) -> None:
        resp = error_response(code=2001, message="Cart is empty")
        assert resp.code == 2001
        assert resp.message == "Cart is empty"
        assert resp.data is None

    def test_error_response_with_details(self) -> None:
        resp = error_response(3002, "Insufficient stock", {"shortfall": 2})
        assert resp.data == {"shortfall": 2}

    def test_serialization(self) -> None:
        data = ApiResponse(code=0, message="ok", data={"x": 1}).model_dump()
        assert set(data) == {"code", "message", "data", "timestamp", "request_id"}

    def test_respond_carries_request_id_from_state(self) -> None:
        request = MagicMock()
        request.state.request_id = "req_fromstate01"
        resp = respond(request, {"a": 1}, "done")
        assert resp.request_id == "req_fromstate01"
        assert resp.message == "done"
        assert resp.data == {"a": 1}
