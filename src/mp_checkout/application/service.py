"""CheckoutService: turns a user's cart into a CONFIRMED order.

Pipeline for checkout(db, user_id):

    load cart ── empty ──> EmptyCartError (nothing written)
        │
    create order shell (CONFIRMED, total 0, fresh order number)
        │
    for each cart line, strictly one after another:
        verify offer ── None ──> ProductUnavailableError ─┐
        stock check ── short ──> InsufficientStockError ──┤
        write order line (verified price, never the cart's)│
        record sale in analytics      (best-effort)        │
        decrement remote inventory    (best-effort)        │
        │                                                  │
    write order total = Σ line subtotals                   │
    delete the user's cart lines                           │
    commit ──> order number                                │
                                                           v
                                                    rollback, re-raise

Transaction boundary: the order row, its lines, the total and the cart
deletion all go through `db` and are committed together at the end. An abort
rolls all of them back, so the cart is left exactly as it was and no partial
order survives. Analytics (own session) and remote inventory are outside this
boundary: what they recorded for lines before the failing one stays.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_analytics.application.service import AnalyticsAggregator
from src.mp_cart.domain.models import CartLine
from src.mp_cart.domain.repository import CartRepositoryProtocol
from src.mp_cart.infrastructure.persistence import CartRepository
from src.mp_catalog.domain.client import CatalogClientProtocol
from src.mp_catalog.infrastructure.client import get_catalog_client
from src.mp_common.datetime_utils import utc_now
from src.mp_common.enums import OrderStatus
from src.mp_common.errors import (
    EmptyCartError,
    InsufficientStockError,
    ProductUnavailableError,
)
from src.mp_common.id_generator import generate_id, generate_order_number
from src.mp_common.money import ZERO
from src.mp_order.domain.models import Order, OrderLine
from src.mp_order.domain.repository import OrderRepositoryProtocol
from src.mp_order.infrastructure.persistence import OrderRepository

logger = logging.getLogger(__name__)


class CheckoutService:
    def __init__(
        self,
        cart_repo: CartRepositoryProtocol | None = None,
        order_repo: OrderRepositoryProtocol | None = None,
        catalog: CatalogClientProtocol | None = None,
        analytics: AnalyticsAggregator | None = None,
    ) -> None:
        self._cart_repo: CartRepositoryProtocol = cart_repo or CartRepository()
        self._order_repo: OrderRepositoryProtocol = order_repo or OrderRepository()
        self._catalog = catalog
        self._analytics = analytics or AnalyticsAggregator()

    @property
    def catalog(self) -> CatalogClientProtocol:
        if self._catalog is None:
            self._catalog = get_catalog_client()
        return self._catalog

    async def checkout(self, db: AsyncSession, user_id: str) -> str:
        """Run the checkout pipeline for `user_id` and return the order number."""
        logger.info("Checkout started: user=%s", user_id)

        cart_lines = await self._cart_repo.list_by_user(db, user_id)
        if not cart_lines:
            logger.warning("Checkout rejected, cart is empty: user=%s", user_id)
            raise EmptyCartError()

        order = Order(
            id=generate_id(),
            order_number=generate_order_number(),
            user_id=user_id,
            status=OrderStatus.CONFIRMED.value,
            total_amount=ZERO,
            created_at=utc_now(),
        )

        try:
            await self._order_repo.create(db, order)

            for cart_line in cart_lines:
                order.lines.append(await self._process_line(db, order, cart_line))

            order.total_amount = order.compute_total()
            await self._order_repo.update_total(db, order.id, order.total_amount)

            await self._cart_repo.delete_all_by_user(db, user_id)
            await db.commit()
        except Exception:
            await db.rollback()
            logger.warning(
                "Checkout aborted: user=%s order=%s lines_processed=%d",
                user_id, order.order_number, len(order.lines),
            )
            raise

        logger.info(
            "Checkout complete: user=%s order=%s lines=%d total=%s",
            user_id, order.order_number, len(order.lines), order.total_amount,
        )
        return order.order_number

    async def _process_line(
        self, db: AsyncSession, order: Order, cart_line: CartLine
    ) -> OrderLine:
        """Verify one cart line, write its order line, then fire side effects."""
        logger.info(
            "Verifying line: product=%s variant=%s merchant=%s qty=%d",
            cart_line.product_id, cart_line.variant_id, cart_line.merchant_id, cart_line.quantity,
        )
        snapshot = await self.catalog.verify(
            cart_line.product_id, cart_line.variant_id, cart_line.merchant_id
        )
        if snapshot is None:
            raise ProductUnavailableError(cart_line.product_id, cart_line.merchant_id)
        if snapshot.stock < cart_line.quantity:
            raise InsufficientStockError(snapshot.name, cart_line.quantity, snapshot.stock)

        line = await self._order_repo.add_line(
            db,
            OrderLine(
                id=None,
                order_id=order.id,
                product_id=cart_line.product_id,
                variant_id=cart_line.variant_id,
                merchant_id=cart_line.merchant_id,
                quantity=cart_line.quantity,
                price=snapshot.price,
                merchant_name=snapshot.merchant_name,
                image_url=snapshot.image_url,
            ),
        )

        await self._record_sale(line)
        await self._decrement_stock(line)
        return line

    async def _record_sale(self, line: OrderLine) -> None:
        try:
            await self._analytics.record_sale(
                line.merchant_id, line.product_id, line.variant_id, line.quantity, line.price
            )
        except Exception:
            logger.exception(
                "Analytics update failed, continuing: merchant=%s product=%s variant=%s item=%s",
                line.merchant_id, line.product_id, line.variant_id, line.id,
            )

    async def _decrement_stock(self, line: OrderLine) -> None:
        try:
            await self.catalog.decrement_stock(
                line.product_id, line.variant_id, line.merchant_id, line.quantity
            )
        except Exception:
            logger.exception(
                "Inventory decrement failed, continuing: product=%s variant=%s merchant=%s item=%s",
                line.product_id, line.variant_id, line.merchant_id, line.id,
            )
