# src/mp_order/domain/repository.py
"""OrderRepository Protocol: interface contract for persistence layer."""
from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_order.domain.models import Order, OrderLine


class OrderRepositoryProtocol(Protocol):
    async def create(self, db: AsyncSession, order: Order) -> None: ...

    async def add_line(self, db: AsyncSession, line: OrderLine) -> OrderLine: ...

    async def update_total(self, db: AsyncSession, order_id: str, total: Decimal) -> None: ...

    async def list_by_user(self, db: AsyncSession, user_id: str) -> list[Order]: ...

    async def get_by_number(
        self, db: AsyncSession, order_number: str, user_id: str
    ) -> Order | None: ...

    async def get_line(
        self, db: AsyncSession, item_id: int, user_id: str
    ) -> OrderLine | None: ...
