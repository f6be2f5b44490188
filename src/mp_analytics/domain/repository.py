"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_analytics.domain.models import MerchantAnalytics


class AnalyticsRepositoryProtocol(Protocol):
    async def increment(
        self,
        db: AsyncSession,
        merchant_id: str,
        product_id: int,
        variant_id: str,
        units: int,
        revenue: Decimal,
    ) -> MerchantAnalytics: ...

    async def get_by_key(
        self, db: AsyncSession, merchant_id: str, product_id: int, variant_id: str
    ) -> MerchantAnalytics | None: ...

    async def sum_units(self, db: AsyncSession, merchant_id: str) -> int | None: ...

    async def sum_revenue(self, db: AsyncSession, merchant_id: str) -> Decimal | None: ...
