"""
Order API routes.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.telemetry import trace_span
from common.db.session import get_db, get_db_readonly
from common.models.pagination import Pagination
from packages.auth.dependencies import get_current_active_user
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.billing.models.schemas.order import (
    CreateOrderRequest,
    CreateOrderResponse,
    OrderListItem,
    OrderListResponse,
    OrderSummary,
)
from packages.billing.services.order_service import OrderService

router = APIRouter()


@router.post("/create", response_model=CreateOrderResponse)
@trace_span
async def create_order(
    request: CreateOrderRequest,
    current_user: AuthenticatedUser = Depends(get_current_active_user),
    db_session: AsyncSession = Depends(get_db),
):
    """Create a PENDING membership or quota order."""
    order = await OrderService(db_session).create_order(
        current_user.user_id,
        request.type,
        membership_id=request.membership_id,
        duration=request.duration,
        quota_amount=request.quota_amount,
    )
    return CreateOrderResponse(
        message="Order created", order=OrderSummary.model_validate(order)
    )


@router.get("/list", response_model=OrderListResponse)
@trace_span
async def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
    db_session: AsyncSession = Depends(get_db_readonly),
):
    orders, total = await OrderService(db_session).list_orders(
        current_user.user_id, page=page, limit=limit
    )
    return OrderListResponse(
        orders=[OrderListItem.model_validate(order) for order in orders],
        pagination=Pagination.build(page, limit, total),
    )
