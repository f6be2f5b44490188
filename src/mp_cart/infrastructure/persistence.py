"""CartRepository: raw SQL persistence implementation.

Transaction ownership: the CALLER commits. Checkout relies on this so the
cart deletion lands in the same transaction as the order rows.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_cart.domain.models import CartLine
from src.mp_common.errors import InternalError

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_SELECT_COLUMNS = """
    id, user_id, product_id, variant_id, merchant_id, quantity, price,
    created_at, updated_at
"""

_LIST_BY_USER_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM cart_items
    WHERE user_id = :user_id
    ORDER BY id ASC
""")

_FIND_BY_PRODUCT_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM cart_items
    WHERE user_id = :user_id AND product_id = :product_id AND variant_id = :variant_id
""")

_FIND_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM cart_items
    WHERE id = :id AND user_id = :user_id
""")

_INSERT_SQL = text(f"""
    INSERT INTO cart_items (user_id, product_id, variant_id, merchant_id, quantity, price)
    VALUES (:user_id, :product_id, :variant_id, :merchant_id, :quantity, :price)
    RETURNING {_SELECT_COLUMNS}
""")

_UPDATE_SQL = text(f"""
    UPDATE cart_items
    SET merchant_id = :merchant_id, quantity = :quantity, price = :price
    WHERE id = :id AND user_id = :user_id
    RETURNING {_SELECT_COLUMNS}
""")

_DELETE_SQL = text("""
    DELETE FROM cart_items WHERE id = :id AND user_id = :user_id
""")

_DELETE_ALL_SQL = text("""
    DELETE FROM cart_items WHERE user_id = :user_id
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_line(row: Any) -> CartLine:
    """Convert a DB result row to a CartLine domain object."""
    return CartLine(
        id=row.id,
        user_id=row.user_id,
        product_id=row.product_id,
        variant_id=row.variant_id,
        merchant_id=row.merchant_id,
        quantity=row.quantity,
        price=row.price,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class CartRepository:
    """Concrete implementation of CartRepositoryProtocol using raw SQL."""

    async def list_by_user(self, db: AsyncSession, user_id: str) -> list[CartLine]:
        result = await db.execute(_LIST_BY_USER_SQL, {"user_id": user_id})
        return [_row_to_line(row) for row in result.fetchall()]

    async def find_by_product(
        self, db: AsyncSession, user_id: str, product_id: int, variant_id: str
    ) -> CartLine | None:
        result = await db.execute(
            _FIND_BY_PRODUCT_SQL,
            {"user_id": user_id, "product_id": product_id, "variant_id": variant_id},
        )
        row = result.fetchone()
        return _row_to_line(row) if row else None

    async def find_by_id(
        self, db: AsyncSession, item_id: int, user_id: str
    ) -> CartLine | None:
        result = await db.execute(_FIND_BY_ID_SQL, {"id": item_id, "user_id": user_id})
        row = result.fetchone()
        return _row_to_line(row) if row else None

    async def upsert(self, db: AsyncSession, line: CartLine) -> CartLine:
        """INSERT when the line has no id yet, otherwise UPDATE it in place."""
        params: dict[str, Any] = {
            "user_id": line.user_id,
            "merchant_id": line.merchant_id,
            "quantity": line.quantity,
            "price": line.price,
        }
        if line.id is None:
            params["product_id"] = line.product_id
            params["variant_id"] = line.variant_id
            result = await db.execute(_INSERT_SQL, params)
        else:
            params["id"] = line.id
            result = await db.execute(_UPDATE_SQL, params)
        row = result.fetchone()
        if row is None:
            raise InternalError(f"Cart upsert returned no row for user {line.user_id}")
        return _row_to_line(row)

    async def delete(self, db: AsyncSession, item_id: int, user_id: str) -> None:
        await db.execute(_DELETE_SQL, {"id": item_id, "user_id": user_id})

    async def delete_all_by_user(self, db: AsyncSession, user_id: str) -> int:
        result = await db.execute(_DELETE_ALL_SQL, {"user_id": user_id})
        return int(result.rowcount or 0)
