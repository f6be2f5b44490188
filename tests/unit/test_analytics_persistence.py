"""Unit tests for AnalyticsRepository using MagicMock AsyncSession."""
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.mp_analytics.infrastructure.persistence import AnalyticsRepository
from src.mp_common.errors import InternalError


def _make_row(**kwargs: Any) -> MagicMock:
    row = MagicMock()
    row.id = kwargs.get("id", 1)
    row.merchant_id = kwargs.get("merchant_id", "m1")
    row.product_id = kwargs.get("product_id", 101)
    row.variant_id = kwargs.get("variant_id", "v1")
    row.units_sold = kwargs.get("units_sold", 2)
    row.revenue = kwargs.get("revenue", Decimal("200.00"))
    row.created_at = kwargs.get("created_at", datetime.now(UTC))
    row.updated_at = kwargs.get("updated_at", datetime.now(UTC))
    return row


def _db_with_result(**result_attrs: Any) -> AsyncMock:
    db = AsyncMock()
    result_mock = MagicMock()
    for name, value in result_attrs.items():
        getattr(result_mock, name).return_value = value
    db.execute.return_value = result_mock
    return db


class TestAnalyticsRepository:
    async def test_increment_returns_updated_counters(self) -> None:
        db = _db_with_result(fetchone=_make_row(units_sold=5, revenue=Decimal("231.50")))

        stats = await AnalyticsRepository().increment(db, "m1", 101, "v1", 3, Decimal("31.50"))

        assert stats.units_sold == 5
        assert stats.revenue == Decimal("231.50")
        params = db.execute.await_args.args[1]
        assert params["units"] == 3
        assert params["revenue"] == Decimal("31.50")

    async def test_increment_without_returned_row_raises(self) -> None:
        db = _db_with_result(fetchone=None)
        with pytest.raises(InternalError):
            await AnalyticsRepository().increment(db, "m1", 101, "v1", 1, Decimal("1.00"))

    async def test_get_by_key_none(self) -> None:
        db = _db_with_result(fetchone=None)
        assert await AnalyticsRepository().get_by_key(db, "m1", 101, "v1") is None

    async def test_get_by_key_maps_row(self) -> None:
        db = _db_with_result(fetchone=_make_row(id=3))
        stats = await AnalyticsRepository().get_by_key(db, "m1", 101, "v1")
        assert stats is not None
        assert stats.id == 3

    async def test_sum_units(self) -> None:
        db = _db_with_result(scalar_one_or_none=Decimal("12"))
        total = await AnalyticsRepository().sum_units(db, "m1")
        assert total == 12
        assert isinstance(total, int)

    async def test_sum_units_without_rows(self) -> None:
        db = _db_with_result(scalar_one_or_none=None)
        assert await AnalyticsRepository().sum_units(db, "m1") is None

    async def test_sum_revenue(self) -> None:
        db = _db_with_result(scalar_one_or_none=Decimal("219.99"))
        assert await AnalyticsRepository().sum_revenue(db, "m1") == Decimal("219.99")

    async def test_sum_revenue_without_rows(self) -> None:
        db = _db_with_result(scalar_one_or_none=None)
        assert await AnalyticsRepository().sum_revenue(db, "m1") is None
