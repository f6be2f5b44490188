"""CatalogClient Protocol: the remote product/inventory service contract."""

from typing import Protocol

from src.mp_catalog.domain.models import ProductSnapshot


class CatalogClientProtocol(Protocol):
    async def verify(
        self, product_id: int, variant_id: str, merchant_id: str
    ) -> ProductSnapshot | None: ...

    async def decrement_stock(
        self, product_id: int, variant_id: str, merchant_id: str, quantity: int
    ) -> None: ...
