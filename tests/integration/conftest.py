"""Integration-test fixtures.

Requires PostgreSQL with migrations applied (alembic upgrade head) at
DATABASE_URL, and INTEGRATION=1 in the environment; otherwise every test in
this directory is skipped.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool (created at import time) remains valid across
the entire test session. The product service is replaced by an in-process
stub; everything else runs for real.
"""

import os
import uuid
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt

import src.mp_cart.api.router as cart_router
import src.mp_checkout.api.router as checkout_router
from config.settings import settings
from src.mp_analytics.application.service import AnalyticsAggregator
from src.mp_cart.application.service import CartApplicationService
from src.mp_catalog.domain.models import ProductSnapshot
from src.mp_checkout.application.service import CheckoutService
from src.main import app


def pytest_collection_modifyitems(config, items):
    if os.environ.get("INTEGRATION") == "1":
        return
    skip = pytest.mark.skip(reason="set INTEGRATION=1 with a migrated database to run")
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(skip)


class StubCatalog:
    """CatalogClientProtocol backed by a dict of offers; records decrements."""

    def __init__(self) -> None:
        self.offers: dict[tuple[int, str, str], ProductSnapshot] = {}
        self.decrements: list[tuple[int, str, str, int]] = []

    def put(self, product_id: int, variant_id: str, merchant_id: str,
            price: str, stock: int) -> None:
        self.offers[(product_id, variant_id, merchant_id.casefold())] = ProductSnapshot(
            name=f"Product {product_id}", price=Decimal(price), stock=stock,
            merchant_name=f"Merchant {merchant_id}",
        )

    async def verify(self, product_id, variant_id, merchant_id):
        return self.offers.get((product_id, variant_id, merchant_id.casefold()))

    async def decrement_stock(self, product_id, variant_id, merchant_id, quantity):
        self.decrements.append((product_id, variant_id, merchant_id, quantity))


@pytest.fixture
def catalog(monkeypatch) -> StubCatalog:
    stub = StubCatalog()
    monkeypatch.setattr(cart_router, "_service", CartApplicationService(catalog=stub))
    monkeypatch.setattr(
        checkout_router, "_service",
        CheckoutService(catalog=stub, analytics=AnalyticsAggregator()),
    )
    return stub


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client that keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def new_user() -> tuple[str, dict[str, str]]:
    """Fresh user id plus an Authorization header signed with the shared secret."""
    user_id = f"it-{uuid.uuid4().hex[:10]}"
    token = jwt.encode(
        {"userId": user_id, "sub": f"{user_id}@example.com",
         "exp": datetime.now(UTC) + timedelta(minutes=10)},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    return user_id, {"Authorization": f"Bearer {token}"}
