"""HTTP-level tests: routing, envelope, auth and error mapping.

Services are swapped for mocks and auth/db dependencies overridden, so no
database, Redis or product service is needed.
"""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

import src.mp_analytics.api.router as analytics_router
import src.mp_cart.api.router as cart_router
import src.mp_checkout.api.router as checkout_router
import src.mp_order.api.router as order_router
from src.main import app
from src.mp_analytics.application.schemas import MerchantStatsResponse
from src.mp_analytics.domain.models import MerchantAnalytics
from src.mp_cart.application.schemas import CartResponse
from src.mp_cart.domain.models import CartLine
from src.mp_common.database import get_db_session
from src.mp_common.errors import (
    CartLineNotFoundError,
    EmptyCartError,
    InsufficientStockError,
    OrderLineNotFoundError,
)
from src.mp_gateway.auth.dependencies import get_current_user
from src.mp_gateway.auth.jwt_handler import CurrentUser
from src.mp_order.application.schemas import OrderItemResponse
from src.mp_order.domain.models import OrderLine


@pytest.fixture
def auth_overrides():
    async def _db():
        yield MagicMock()

    app.dependency_overrides[get_current_user] = lambda: CurrentUser(id="user-1")
    app.dependency_overrides[get_db_session] = _db
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def checkout_service(monkeypatch) -> MagicMock:
    svc = MagicMock()
    svc.checkout = AsyncMock(return_value="3f1c0d52-aaaa-4bbb-8ccc-000000000001")
    monkeypatch.setattr(checkout_router, "_service", svc)
    return svc


@pytest.fixture
def cart_service(monkeypatch) -> MagicMock:
    svc = MagicMock()
    monkeypatch.setattr(cart_router, "_service", svc)
    return svc


@pytest.fixture
def order_service(monkeypatch) -> MagicMock:
    svc = MagicMock()
    monkeypatch.setattr(order_router, "_service", svc)
    return svc


@pytest.fixture
def analytics_service(monkeypatch) -> MagicMock:
    svc = MagicMock()
    monkeypatch.setattr(analytics_router, "_service", svc)
    return svc


async def test_health(client) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_request_id_header(client) -> None:
    resp = await client.get("/health")
    assert resp.headers["X-Request-ID"].startswith("req_")


async def test_inbound_request_id_is_kept(client) -> None:
    resp = await client.get("/health", headers={"X-Request-ID": "gw-abc-123"})
    assert resp.headers["X-Request-ID"] == "gw-abc-123"


async def test_request_id_header_on_auth_failure(client) -> None:
    resp = await client.get(
        "/api/v1/orders",
        headers={"Authorization": "Bearer junk", "X-Request-ID": "gw-err-1"},
    )
    assert resp.headers["X-Request-ID"] == "gw-err-1"


class TestAuth:
    async def test_checkout_without_token_is_401(self, client) -> None:
        resp = await client.post("/api/v1/checkout")
        assert resp.status_code == 401

    async def test_orders_with_bad_token_is_401(self, client) -> None:
        resp = await client.get("/api/v1/orders", headers={"Authorization": "Bearer junk"})
        assert resp.status_code == 401


@pytest.mark.usefixtures("auth_overrides")
class TestCheckoutRoute:
    async def test_returns_order_number(self, client, checkout_service) -> None:
        resp = await client.post("/api/v1/checkout")

        body = resp.json()
        assert resp.status_code == 200
        assert body["code"] == 0
        assert body["message"] == "Order placed successfully"
        assert body["data"] == {"order_number": "3f1c0d52-aaaa-4bbb-8ccc-000000000001"}
        assert body["request_id"] == resp.headers["X-Request-ID"]
        checkout_service.checkout.assert_awaited_once()
        assert checkout_service.checkout.await_args.args[1] == "user-1"

    async def test_empty_cart_maps_to_400(self, client, checkout_service) -> None:
        checkout_service.checkout.side_effect = EmptyCartError()

        resp = await client.post("/api/v1/checkout")

        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == 2001
        assert body["data"] is None

    async def test_insufficient_stock_maps_to_409(self, client, checkout_service) -> None:
        checkout_service.checkout.side_effect = InsufficientStockError("Trail Shoe", 5, 3)

        resp = await client.post("/api/v1/checkout")

        assert resp.status_code == 409
        assert "short by 2" in resp.json()["message"]
        assert resp.json()["data"] == {"requested": 5, "available": 3, "shortfall": 2}


@pytest.mark.usefixtures("auth_overrides")
class TestCartRoutes:
    async def test_add_item(self, client, cart_service) -> None:
        cart_service.add_item = AsyncMock(return_value=CartLine(
            id=3, user_id="user-1", product_id=101, variant_id="v1", merchant_id="m1",
            quantity=2, price=Decimal("100.00"),
        ))

        resp = await client.post("/api/v1/cart/items", json={
            "product_id": 101, "variant_id": "v1", "merchant_id": "m1", "quantity": 2,
        })

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["item_id"] == 3
        assert Decimal(data["sub_total"]) == Decimal("200.00")

    async def test_add_item_rejects_zero_quantity(self, client, cart_service) -> None:
        resp = await client.post("/api/v1/cart/items", json={
            "product_id": 101, "variant_id": "v1", "merchant_id": "m1", "quantity": 0,
        })
        assert resp.status_code == 422

    async def test_get_cart(self, client, cart_service) -> None:
        cart_service.get_cart = AsyncMock(return_value=CartResponse.from_lines([]))
        resp = await client.get("/api/v1/cart")
        assert resp.status_code == 200
        assert resp.json()["data"]["total_value_display"] == "$0.00"

    async def test_remove_item_deleted(self, client, cart_service) -> None:
        cart_service.remove_item = AsyncMock(return_value=None)
        resp = await client.delete("/api/v1/cart/items/3", params={"quantity": 2})
        assert resp.status_code == 200
        assert resp.json()["data"] is None
        cart_service.remove_item.assert_awaited_once()
        assert cart_service.remove_item.await_args.args[1:] == ("user-1", 3, 2)

    async def test_remove_item_requires_quantity(self, client, cart_service) -> None:
        resp = await client.delete("/api/v1/cart/items/3")
        assert resp.status_code == 422

    async def test_remove_unknown_item_is_404(self, client, cart_service) -> None:
        cart_service.remove_item = AsyncMock(side_effect=CartLineNotFoundError(3))
        resp = await client.delete("/api/v1/cart/items/3", params={"quantity": 1})
        assert resp.status_code == 404
        assert resp.json()["code"] == 2002


@pytest.mark.usefixtures("auth_overrides")
class TestOrderRoutes:
    async def test_item_detail(self, client, order_service) -> None:
        line = OrderLine(
            id=42, order_id="o1", product_id=101, variant_id="v1", merchant_id="m1",
            quantity=2, price=Decimal("100.00"), merchant_name="Acme",
            created_at=datetime.now(UTC),
        )
        order_service.get_item = AsyncMock(return_value=OrderItemResponse.from_line(line))

        resp = await client.get("/api/v1/orders/42")

        assert resp.status_code == 200
        assert resp.json()["data"]["merchant_name"] == "Acme"

    async def test_item_detail_missing(self, client, order_service) -> None:
        order_service.get_item = AsyncMock(side_effect=OrderLineNotFoundError(42))
        resp = await client.get("/api/v1/orders/42")
        assert resp.status_code == 404
        assert resp.json()["code"] == 4005


@pytest.mark.usefixtures("auth_overrides")
class TestAnalyticsRoutes:
    async def test_total_orders_absent(self, client, analytics_service) -> None:
        analytics_service.total_orders = AsyncMock(return_value=None)
        resp = await client.get("/api/v1/merchants/m1/total-orders")
        assert resp.status_code == 200
        assert resp.json()["data"] == {"merchant_id": "m1", "total_orders": None}

    async def test_total_revenue(self, client, analytics_service) -> None:
        analytics_service.total_revenue = AsyncMock(return_value=Decimal("219.99"))
        resp = await client.get("/api/v1/merchants/m1/total-revenue")
        assert Decimal(resp.json()["data"]["total_revenue"]) == Decimal("219.99")

    async def test_stats(self, client, analytics_service) -> None:
        analytics_service.get_stats = AsyncMock(return_value=MerchantStatsResponse.from_domain(
            MerchantAnalytics("m1", 101, "v1", units_sold=2, revenue=Decimal("200.00"))
        ))
        resp = await client.get(
            "/api/v1/merchants/m1/stats", params={"product_id": 101, "variant_id": "v1"}
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["units_sold"] == 2
