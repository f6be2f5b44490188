"""Merchant analytics domain model: pure dataclass, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.mp_common.money import ZERO


@dataclass
class MerchantAnalytics:
    """Running sales counters for one (merchant, product, variant).

    units_sold / revenue only ever grow; each checked-out order line adds
    its quantity and price × quantity exactly once.
    """

    merchant_id: str
    product_id: int
    variant_id: str
    units_sold: int = 0
    revenue: Decimal = ZERO
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
