# src/mp_order/api/router.py
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.database import get_db_session
from src.mp_common.response import ApiResponse, respond
from src.mp_gateway.auth.dependencies import get_current_user
from src.mp_gateway.auth.jwt_handler import CurrentUser
from src.mp_order.application.service import OrderQueryService

router = APIRouter(prefix="/orders", tags=["orders"])

_service = OrderQueryService()


@router.get("")
async def get_order_history(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_history(db, current_user.id)
    return respond(request, data.model_dump(mode="json"), "Order history fetched")


@router.get("/number/{order_number}")
async def get_order(
    order_number: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_order(db, current_user.id, order_number)
    return respond(request, data.model_dump(mode="json"), "Order fetched")


@router.get("/{item_id}")
async def get_order_item(
    item_id: int,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_item(db, current_user.id, item_id)
    return respond(request, data.model_dump(mode="json"), "Item details fetched")
