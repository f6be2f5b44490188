"""Order domain models: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from src.mp_common.enums import OrderStatus
from src.mp_common.money import ZERO, line_total, to_money


@dataclass(frozen=True)
class OrderLine:
    """One purchased line. Price, merchant name and image are snapshots
    taken at checkout; nothing here is ever re-fetched or updated."""

    id: int | None
    order_id: str
    product_id: int
    variant_id: str
    merchant_id: str
    quantity: int
    price: Decimal
    merchant_name: str = ""
    image_url: str = ""
    created_at: datetime | None = None

    @property
    def subtotal(self) -> Decimal:
        return line_total(self.price, self.quantity)


@dataclass
class Order:
    id: str
    order_number: str
    user_id: str
    status: str = OrderStatus.CONFIRMED.value
    total_amount: Decimal = ZERO
    created_at: datetime | None = None
    updated_at: datetime | None = None
    lines: list[OrderLine] = field(default_factory=list)

    def compute_total(self) -> Decimal:
        """Σ price × quantity over the lines."""
        return to_money(sum((line.subtotal for line in self.lines), ZERO))
