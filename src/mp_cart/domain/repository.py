"""CartRepository Protocol: interface contract for persistence layer."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_cart.domain.models import CartLine


class CartRepositoryProtocol(Protocol):
    async def list_by_user(self, db: AsyncSession, user_id: str) -> list[CartLine]: ...

    async def find_by_product(
        self, db: AsyncSession, user_id: str, product_id: int, variant_id: str
    ) -> CartLine | None: ...

    async def find_by_id(
        self, db: AsyncSession, item_id: int, user_id: str
    ) -> CartLine | None: ...

    async def upsert(self, db: AsyncSession, line: CartLine) -> CartLine: ...

    async def delete(self, db: AsyncSession, item_id: int, user_id: str) -> None: ...

    async def delete_all_by_user(self, db: AsyncSession, user_id: str) -> int: ...
