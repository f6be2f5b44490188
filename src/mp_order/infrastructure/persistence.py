# src/mp_order/infrastructure/persistence.py
"""OrderRepository: raw SQL persistence implementation.

Transaction ownership: the CALLER commits. Checkout writes the order, its
lines, the final total and the cart deletion before a single commit.
"""
from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.errors import InternalError
from src.mp_order.domain.models import Order, OrderLine

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_INSERT_ORDER_SQL = text("""
    INSERT INTO orders (id, order_number, user_id, status, total_amount, created_at)
    VALUES (:id, :order_number, :user_id, :status, :total_amount, :created_at)
""")

_INSERT_LINE_SQL = text("""
    INSERT INTO order_items (order_id, product_id, variant_id, merchant_id,
        merchant_name, quantity, price, image_url)
    VALUES (:order_id, :product_id, :variant_id, :merchant_id,
        :merchant_name, :quantity, :price, :image_url)
    RETURNING id, created_at
""")

_UPDATE_TOTAL_SQL = text("""
    UPDATE orders SET total_amount = :total_amount WHERE id = :id
""")

# LEFT JOIN so an order without lines still shows up in history.
_ORDER_WITH_LINES_COLUMNS = """
    o.id, o.order_number, o.user_id, o.status, o.total_amount,
    o.created_at, o.updated_at,
    i.id AS item_id, i.product_id, i.variant_id, i.merchant_id, i.merchant_name,
    i.quantity, i.price, i.image_url, i.created_at AS item_created_at
"""

_LIST_BY_USER_SQL = text(f"""
    SELECT {_ORDER_WITH_LINES_COLUMNS}
    FROM orders o
    LEFT JOIN order_items i ON i.order_id = o.id
    WHERE o.user_id = :user_id
    ORDER BY o.created_at DESC, o.id DESC, i.id ASC
""")

_GET_BY_NUMBER_SQL = text(f"""
    SELECT {_ORDER_WITH_LINES_COLUMNS}
    FROM orders o
    LEFT JOIN order_items i ON i.order_id = o.id
    WHERE o.order_number = :order_number AND o.user_id = :user_id
    ORDER BY i.id ASC
""")

_GET_LINE_SQL = text("""
    SELECT i.id AS item_id, i.order_id, i.product_id, i.variant_id, i.merchant_id,
        i.merchant_name, i.quantity, i.price, i.image_url,
        i.created_at AS item_created_at
    FROM order_items i
    JOIN orders o ON o.id = i.order_id
    WHERE i.id = :id AND o.user_id = :user_id
""")


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_line(row: Any, order_id: str) -> OrderLine:
    return OrderLine(
        id=row.item_id,
        order_id=order_id,
        product_id=row.product_id,
        variant_id=row.variant_id,
        merchant_id=row.merchant_id,
        quantity=row.quantity,
        price=row.price,
        merchant_name=row.merchant_name or "",
        image_url=row.image_url or "",
        created_at=row.item_created_at,
    )


def _rows_to_orders(rows: list[Any]) -> list[Order]:
    """Fold joined order/line rows into Orders, keeping row order."""
    orders: dict[str, Order] = {}
    for row in rows:
        order = orders.get(row.id)
        if order is None:
            order = Order(
                id=row.id,
                order_number=row.order_number,
                user_id=row.user_id,
                status=row.status,
                total_amount=row.total_amount,
                created_at=row.created_at,
                updated_at=row.updated_at,
            )
            orders[row.id] = order
        if row.item_id is not None:
            order.lines.append(_row_to_line(row, row.id))
    return list(orders.values())


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    async def create(self, db: AsyncSession, order: Order) -> None:
        await db.execute(
            _INSERT_ORDER_SQL,
            {
                "id": order.id,
                "order_number": order.order_number,
                "user_id": order.user_id,
                "status": order.status,
                "total_amount": order.total_amount,
                "created_at": order.created_at,
            },
        )

    async def add_line(self, db: AsyncSession, line: OrderLine) -> OrderLine:
        result = await db.execute(
            _INSERT_LINE_SQL,
            {
                "order_id": line.order_id,
                "product_id": line.product_id,
                "variant_id": line.variant_id,
                "merchant_id": line.merchant_id,
                "merchant_name": line.merchant_name,
                "quantity": line.quantity,
                "price": line.price,
                "image_url": line.image_url,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError(f"Order line insert returned no row for order {line.order_id}")
        return OrderLine(
            id=row.id,
            order_id=line.order_id,
            product_id=line.product_id,
            variant_id=line.variant_id,
            merchant_id=line.merchant_id,
            quantity=line.quantity,
            price=line.price,
            merchant_name=line.merchant_name,
            image_url=line.image_url,
            created_at=row.created_at,
        )

    async def update_total(self, db: AsyncSession, order_id: str, total: Decimal) -> None:
        await db.execute(_UPDATE_TOTAL_SQL, {"id": order_id, "total_amount": total})

    async def list_by_user(self, db: AsyncSession, user_id: str) -> list[Order]:
        result = await db.execute(_LIST_BY_USER_SQL, {"user_id": user_id})
        return _rows_to_orders(result.fetchall())

    async def get_by_number(
        self, db: AsyncSession, order_number: str, user_id: str
    ) -> Order | None:
        result = await db.execute(
            _GET_BY_NUMBER_SQL, {"order_number": order_number, "user_id": user_id}
        )
        orders = _rows_to_orders(result.fetchall())
        return orders[0] if orders else None

    async def get_line(
        self, db: AsyncSession, item_id: int, user_id: str
    ) -> OrderLine | None:
        result = await db.execute(_GET_LINE_SQL, {"id": item_id, "user_id": user_id})
        row = result.fetchone()
        return _row_to_line(row, row.order_id) if row else None
