from decimal import Decimal

from pydantic import BaseModel

from src.mp_analytics.domain.models import MerchantAnalytics
from src.mp_common.money import money_to_display, to_money


class MerchantStatsResponse(BaseModel):
    merchant_id: str
    product_id: int
    variant_id: str
    units_sold: int
    revenue: Decimal
    revenue_display: str

    @classmethod
    def from_domain(cls, stats: MerchantAnalytics) -> "MerchantStatsResponse":
        revenue = to_money(stats.revenue)
        return cls(
            merchant_id=stats.merchant_id,
            product_id=stats.product_id,
            variant_id=stats.variant_id,
            units_sold=stats.units_sold,
            revenue=revenue,
            revenue_display=money_to_display(revenue),
        )


class MerchantTotalOrdersResponse(BaseModel):
    merchant_id: str
    total_orders: int | None


class MerchantTotalRevenueResponse(BaseModel):
    merchant_id: str
    total_revenue: Decimal | None
