"""Shared test fixtures."""

import os

# Settings are read at import time; these must be in place before src.* loads
os.environ.setdefault("JWT_SECRET", "test-secret-do-not-use-in-production")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from decimal import Decimal  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.main import app  # noqa: E402
from src.mp_analytics.domain.models import MerchantAnalytics  # noqa: E402


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class InMemoryAnalyticsRepository:
    """Dict-backed AnalyticsRepositoryProtocol with the same additive semantics."""

    def __init__(self) -> None:
        self.rows: dict[tuple[str, int, str], MerchantAnalytics] = {}

    async def increment(self, db, merchant_id, product_id, variant_id, units, revenue):
        key = (merchant_id, product_id, variant_id)
        row = self.rows.get(key)
        if row is None:
            row = MerchantAnalytics(
                merchant_id=merchant_id, product_id=product_id, variant_id=variant_id,
                id=len(self.rows) + 1,
            )
            self.rows[key] = row
        row.units_sold += units
        row.revenue += revenue
        return row

    async def get_by_key(self, db, merchant_id, product_id, variant_id):
        return self.rows.get((merchant_id, product_id, variant_id))

    async def sum_units(self, db, merchant_id):
        rows = [r for r in self.rows.values() if r.merchant_id == merchant_id]
        return sum(r.units_sold for r in rows) if rows else None

    async def sum_revenue(self, db, merchant_id):
        rows = [r for r in self.rows.values() if r.merchant_id == merchant_id]
        return sum((r.revenue for r in rows), Decimal("0")) if rows else None


class FakeSessionFactory:
    """Stands in for async_sessionmaker: every call yields the same AsyncMock session."""

    def __init__(self) -> None:
        self.session = AsyncMock()
        self.opened = 0

    def __call__(self) -> "FakeSessionFactory":
        self.opened += 1
        return self

    async def __aenter__(self) -> AsyncMock:
        return self.session

    async def __aexit__(self, *exc_info: object) -> bool:
        return False


@pytest.fixture
def analytics_repo() -> InMemoryAnalyticsRepository:
    return InMemoryAnalyticsRepository()


@pytest.fixture
def session_factory() -> FakeSessionFactory:
    return FakeSessionFactory()
