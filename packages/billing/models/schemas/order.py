"""
API schemas for order endpoints.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from common.models.pagination import Pagination
from packages.billing.models.domain.enums import OrderStatus, OrderType, PayStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CreateOrderRequest(_CamelModel):
    """Type is validated by the service so the error message stays stable."""

    type: Optional[str] = None
    membership_id: Optional[int] = None
    duration: Optional[int] = None
    quota_amount: Optional[int] = None


class OrderSummary(_CamelModel):
    id: int
    order_no: str
    type: OrderType
    amount: float
    currency: str
    status: OrderStatus
    pay_status: PayStatus
    expire_at: datetime


class CreateOrderResponse(BaseModel):
    message: str
    order: OrderSummary


class OrderMembershipSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    level: str


class OrderListItem(OrderSummary):
    membership_id: Optional[int] = None
    duration: Optional[int] = None
    quota_amount: Optional[int] = None
    pay_time: Optional[datetime] = None
    pay_trade_no: Optional[str] = None
    created_at: datetime
    membership: Optional[OrderMembershipSchema] = None


class OrderListResponse(BaseModel):
    orders: List[OrderListItem]
    pagination: Pagination
