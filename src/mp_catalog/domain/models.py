"""Catalog domain model: pure dataclass, no HTTP dependency."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ProductSnapshot:
    """One merchant's offer for a product variant, as verified at checkout time.

    Not persisted. Its price, merchant name and image are frozen into the
    order line built from it.
    """

    name: str
    price: Decimal
    stock: int
    merchant_name: str
    image_url: str = ""
