"""mp_analytics REST API: merchant sales counters, JWT required."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_analytics.application.schemas import (
    MerchantTotalOrdersResponse,
    MerchantTotalRevenueResponse,
)
from src.mp_analytics.application.service import AnalyticsAggregator
from src.mp_common.database import get_db_session
from src.mp_common.response import ApiResponse, respond
from src.mp_gateway.auth.dependencies import get_current_user
from src.mp_gateway.auth.jwt_handler import CurrentUser

router = APIRouter(prefix="/merchants", tags=["analytics"])

_service = AnalyticsAggregator()


@router.get("/{merchant_id}/total-orders")
async def get_total_orders(
    merchant_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    total = await _service.total_orders(db, merchant_id)
    data = MerchantTotalOrdersResponse(merchant_id=merchant_id, total_orders=total)
    return respond(request, data.model_dump(mode="json"), "Total orders fetched")


@router.get("/{merchant_id}/total-revenue")
async def get_total_revenue(
    merchant_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    total = await _service.total_revenue(db, merchant_id)
    data = MerchantTotalRevenueResponse(merchant_id=merchant_id, total_revenue=total)
    return respond(request, data.model_dump(mode="json"), "Total revenue fetched")


@router.get("/{merchant_id}/stats")
async def get_stats(
    merchant_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    product_id: int = Query(..., description="Catalog product id"),
    variant_id: str = Query(..., description="Catalog variant id"),
) -> ApiResponse:
    data = await _service.get_stats(db, merchant_id, product_id, variant_id)
    return respond(request, data.model_dump(mode="json"), "Stats fetched")
