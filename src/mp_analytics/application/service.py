"""AnalyticsAggregator: per-(merchant, product, variant) sales counters.

record_sale() opens and commits its own session. It is called from inside a
checkout whose own transaction may still roll back; the counters are
deliberately outside that boundary and are not undone when it does.

There is no idempotency key: every call adds. One call per order line is
the contract, so replaying a checkout double-counts.
"""

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.mp_analytics.application.schemas import MerchantStatsResponse
from src.mp_analytics.domain.models import MerchantAnalytics
from src.mp_analytics.domain.repository import AnalyticsRepositoryProtocol
from src.mp_analytics.infrastructure.persistence import AnalyticsRepository
from src.mp_common.database import async_session_factory
from src.mp_common.money import line_total

logger = logging.getLogger(__name__)


class AnalyticsAggregator:
    def __init__(
        self,
        repo: AnalyticsRepositoryProtocol | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> None:
        self._repo: AnalyticsRepositoryProtocol = repo or AnalyticsRepository()
        self._session_factory = session_factory or async_session_factory

    async def record_sale(
        self,
        merchant_id: str,
        product_id: int,
        variant_id: str,
        quantity: int,
        unit_price: Decimal,
    ) -> MerchantAnalytics:
        revenue = line_total(unit_price, quantity)
        async with self._session_factory() as db:
            try:
                stats = await self._repo.increment(
                    db, merchant_id, product_id, variant_id, quantity, revenue
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        logger.info(
            "Analytics updated: merchant=%s product=%s variant=%s units=%d revenue=%s",
            merchant_id, product_id, variant_id, stats.units_sold, stats.revenue,
        )
        return stats

    async def total_orders(self, db: AsyncSession, merchant_id: str) -> int | None:
        """Units sold across every product/variant of the merchant."""
        return await self._repo.sum_units(db, merchant_id)

    async def total_revenue(self, db: AsyncSession, merchant_id: str) -> Decimal | None:
        return await self._repo.sum_revenue(db, merchant_id)

    async def get_stats(
        self, db: AsyncSession, merchant_id: str, product_id: int, variant_id: str
    ) -> MerchantStatsResponse:
        stats = await self._repo.get_by_key(db, merchant_id, product_id, variant_id)
        if stats is None:
            # No sale yet reads as zero counters, not as an error
            stats = MerchantAnalytics(
                merchant_id=merchant_id, product_id=product_id, variant_id=variant_id
            )
        return MerchantStatsResponse.from_domain(stats)
