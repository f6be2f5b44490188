"""CartApplicationService: add/merge, view and remove cart lines.

Adding verifies the offer against the product service up front so the cart
only ever holds lines that were sellable at add time. Checkout re-verifies
every line anyway; the stored price is informational.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_cart.application.schemas import AddToCartRequest, CartResponse
from src.mp_cart.domain.models import CartLine
from src.mp_cart.domain.repository import CartRepositoryProtocol
from src.mp_cart.infrastructure.persistence import CartRepository
from src.mp_catalog.domain.client import CatalogClientProtocol
from src.mp_catalog.infrastructure.client import get_catalog_client
from src.mp_common.errors import (
    CartLineNotFoundError,
    InsufficientStockError,
    InvalidQuantityError,
    ProductUnavailableError,
)

logger = logging.getLogger(__name__)


class CartApplicationService:
    def __init__(
        self,
        repo: CartRepositoryProtocol | None = None,
        catalog: CatalogClientProtocol | None = None,
    ) -> None:
        self._repo: CartRepositoryProtocol = repo or CartRepository()
        self._catalog = catalog

    @property
    def catalog(self) -> CatalogClientProtocol:
        if self._catalog is None:
            self._catalog = get_catalog_client()
        return self._catalog

    async def add_item(
        self, db: AsyncSession, user_id: str, req: AddToCartRequest
    ) -> CartLine:
        snapshot = await self.catalog.verify(req.product_id, req.variant_id, req.merchant_id)
        if snapshot is None:
            raise ProductUnavailableError(req.product_id, req.merchant_id)

        existing = await self._repo.find_by_product(db, user_id, req.product_id, req.variant_id)
        wanted = req.quantity + (existing.quantity if existing else 0)
        if wanted > snapshot.stock:
            raise InsufficientStockError(snapshot.name, wanted, snapshot.stock)

        if existing is not None:
            # Merge: one line per (user, product, variant); merchant follows
            # the latest add, the price stays the one captured first.
            existing.quantity = wanted
            existing.merchant_id = req.merchant_id
            line = existing
        else:
            line = CartLine(
                id=None,
                user_id=user_id,
                product_id=req.product_id,
                variant_id=req.variant_id,
                merchant_id=req.merchant_id,
                quantity=req.quantity,
                price=snapshot.price,
            )

        try:
            saved = await self._repo.upsert(db, line)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Cart updated: user=%s product=%s variant=%s qty=%d",
            user_id, saved.product_id, saved.variant_id, saved.quantity,
        )
        return saved

    async def get_cart(self, db: AsyncSession, user_id: str) -> CartResponse:
        lines = await self._repo.list_by_user(db, user_id)
        return CartResponse.from_lines(lines)

    async def remove_item(
        self, db: AsyncSession, user_id: str, item_id: int, quantity: int
    ) -> CartLine | None:
        """Reduce a line by `quantity`; drop it when nothing would be left.

        Returns the remaining line, or None when it was deleted.
        """
        if quantity < 1:
            raise InvalidQuantityError(quantity)
        line = await self._repo.find_by_id(db, item_id, user_id)
        if line is None:
            raise CartLineNotFoundError(item_id)

        try:
            if quantity >= line.quantity:
                await self._repo.delete(db, item_id, user_id)
                remaining = None
            else:
                line.quantity -= quantity
                remaining = await self._repo.upsert(db, line)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return remaining
