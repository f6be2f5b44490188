"""AnalyticsRepository: concrete implementation of AnalyticsRepositoryProtocol.

increment() is a single INSERT ... ON CONFLICT DO UPDATE: the counter row is
created with the first sale's numbers when the key is new, otherwise the
numbers are added to what is there. Two concurrent checkouts touching the
same key therefore both land, without a read-modify-write race.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_analytics.domain.models import MerchantAnalytics
from src.mp_common.errors import InternalError

_COLUMNS = """
    id, merchant_id, product_id, variant_id, units_sold, revenue, created_at, updated_at
"""

_INCREMENT_SQL = text(f"""
    INSERT INTO merchant_analytics (merchant_id, product_id, variant_id, units_sold, revenue)
    VALUES (:merchant_id, :product_id, :variant_id, :units, :revenue)
    ON CONFLICT (merchant_id, product_id, variant_id) DO UPDATE
        SET units_sold = merchant_analytics.units_sold + EXCLUDED.units_sold,
            revenue    = merchant_analytics.revenue    + EXCLUDED.revenue
    RETURNING {_COLUMNS}
""")

_GET_BY_KEY_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM merchant_analytics
    WHERE merchant_id = :merchant_id AND product_id = :product_id AND variant_id = :variant_id
""")

# SUM over zero rows is NULL, surfaced as None
_SUM_UNITS_SQL = text("""
    SELECT SUM(units_sold) AS total FROM merchant_analytics WHERE merchant_id = :merchant_id
""")

_SUM_REVENUE_SQL = text("""
    SELECT SUM(revenue) AS total FROM merchant_analytics WHERE merchant_id = :merchant_id
""")


def _row_to_analytics(row: Any) -> MerchantAnalytics:
    return MerchantAnalytics(
        id=row.id,
        merchant_id=row.merchant_id,
        product_id=row.product_id,
        variant_id=row.variant_id,
        units_sold=row.units_sold,
        revenue=row.revenue,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class AnalyticsRepository:
    async def increment(
        self,
        db: AsyncSession,
        merchant_id: str,
        product_id: int,
        variant_id: str,
        units: int,
        revenue: Decimal,
    ) -> MerchantAnalytics:
        result = await db.execute(
            _INCREMENT_SQL,
            {
                "merchant_id": merchant_id,
                "product_id": product_id,
                "variant_id": variant_id,
                "units": units,
                "revenue": revenue,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError(f"Analytics upsert returned no row for merchant {merchant_id}")
        return _row_to_analytics(row)

    async def get_by_key(
        self, db: AsyncSession, merchant_id: str, product_id: int, variant_id: str
    ) -> MerchantAnalytics | None:
        result = await db.execute(
            _GET_BY_KEY_SQL,
            {"merchant_id": merchant_id, "product_id": product_id, "variant_id": variant_id},
        )
        row = result.fetchone()
        return _row_to_analytics(row) if row else None

    async def sum_units(self, db: AsyncSession, merchant_id: str) -> int | None:
        result = await db.execute(_SUM_UNITS_SQL, {"merchant_id": merchant_id})
        total = result.scalar_one_or_none()
        return int(total) if total is not None else None

    async def sum_revenue(self, db: AsyncSession, merchant_id: str) -> Decimal | None:
        result = await db.execute(_SUM_REVENUE_SQL, {"merchant_id": merchant_id})
        total = result.scalar_one_or_none()
        return Decimal(total) if total is not None else None
