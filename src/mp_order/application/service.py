# src/mp_order/application/service.py
"""OrderQueryService: read side of orders (history and line detail).

Orders are only ever written by checkout; see mp_checkout.
"""
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.errors import OrderLineNotFoundError, OrderNotFoundError
from src.mp_order.application.schemas import (
    OrderHistoryResponse,
    OrderItemResponse,
    OrderResponse,
)
from src.mp_order.domain.repository import OrderRepositoryProtocol
from src.mp_order.infrastructure.persistence import OrderRepository


class OrderQueryService:
    def __init__(self, repo: OrderRepositoryProtocol | None = None) -> None:
        self._repo: OrderRepositoryProtocol = repo or OrderRepository()

    async def get_history(self, db: AsyncSession, user_id: str) -> OrderHistoryResponse:
        orders = await self._repo.list_by_user(db, user_id)
        return OrderHistoryResponse(orders=[OrderResponse.from_order(o) for o in orders])

    async def get_order(
        self, db: AsyncSession, user_id: str, order_number: str
    ) -> OrderResponse:
        order = await self._repo.get_by_number(db, order_number, user_id)
        if order is None:
            raise OrderNotFoundError(order_number)
        return OrderResponse.from_order(order)

    async def get_item(
        self, db: AsyncSession, user_id: str, item_id: int
    ) -> OrderItemResponse:
        # Scoped to the caller: another user's line id reads as not found
        line = await self._repo.get_line(db, item_id, user_id)
        if line is None:
            raise OrderLineNotFoundError(item_id)
        return OrderItemResponse.from_line(line)
