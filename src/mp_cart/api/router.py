"""mp_cart REST API: 3 endpoints, all require JWT authentication."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_cart.application.schemas import AddToCartRequest, CartItemResponse
from src.mp_cart.application.service import CartApplicationService
from src.mp_common.database import get_db_session
from src.mp_common.response import ApiResponse, respond
from src.mp_gateway.auth.dependencies import get_current_user
from src.mp_gateway.auth.jwt_handler import CurrentUser

router = APIRouter(prefix="/cart", tags=["cart"])

_service = CartApplicationService()


@router.post("/items")
async def add_item(
    body: AddToCartRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    line = await _service.add_item(db, current_user.id, body)
    data = CartItemResponse.from_line(line).model_dump(mode="json")
    return respond(request, data, "Item added to cart")


@router.get("")
async def get_cart(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_cart(db, current_user.id)
    return respond(request, data.model_dump(mode="json"), "Cart retrieved")


@router.delete("/items/{item_id}")
async def remove_item(
    item_id: int,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    quantity: int = Query(..., ge=1, description="Units to remove"),
) -> ApiResponse:
    remaining = await _service.remove_item(db, current_user.id, item_id, quantity)
    data = CartItemResponse.from_line(remaining).model_dump(mode="json") if remaining else None
    return respond(request, data, "Cart updated")
