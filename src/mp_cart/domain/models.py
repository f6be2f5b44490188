"""Cart domain model: pure dataclass, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.mp_common.money import line_total


@dataclass
class CartLine:
    id: int | None
    user_id: str
    product_id: int
    variant_id: str
    merchant_id: str
    quantity: int  # >= 1
    price: Decimal  # unit price verified when the line was added
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def subtotal(self) -> Decimal:
        return line_total(self.price, self.quantity)
