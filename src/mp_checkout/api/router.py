"""mp_checkout REST API: POST /checkout acts on the authenticated user's cart."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_checkout.application.service import CheckoutService
from src.mp_common.database import get_db_session
from src.mp_common.response import ApiResponse, respond
from src.mp_gateway.auth.dependencies import get_current_user
from src.mp_gateway.auth.jwt_handler import CurrentUser
from src.mp_order.application.schemas import CheckoutResponse

router = APIRouter(prefix="/checkout", tags=["checkout"])

_service = CheckoutService()


@router.post("")
async def checkout(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    order_number = await _service.checkout(db, current_user.id)
    data = CheckoutResponse(order_number=order_number)
    return respond(request, data.model_dump(), "Order placed successfully")
