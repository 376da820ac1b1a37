"""
Domain models for orders.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict

from common.core.timeutils import ensure_utc, utcnow
from packages.billing.models.domain.enums import OrderStatus, OrderType, PayStatus


class Order(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_no: str
    user_id: int
    type: OrderType
    amount: Decimal
    currency: str
    status: OrderStatus
    pay_status: PayStatus
    membership_id: Optional[int] = None
    duration: Optional[int] = None
    quota_amount: Optional[int] = None
    expire_at: datetime
    pay_time: Optional[datetime] = None
    pay_trade_no: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return ensure_utc(self.expire_at) <= (now or utcnow())

    def is_payable(self, now: Optional[datetime] = None) -> bool:
        return (
            self.status == OrderStatus.PENDING
            and self.pay_status == PayStatus.PENDING
            and not self.is_expired(now)
        )


class OrderMembership(BaseModel):
    name: str
    level: str


class OrderWithMembership(Order):
    """Order as listed, with the purchased level's display fields."""

    membership: Optional[OrderMembership] = None


class OrderCreateModel(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    order_no: str
    user_id: int
    type: OrderType
    amount: Decimal
    currency: str
    membership_id: Optional[int] = None
    duration: Optional[int] = None
    quota_amount: Optional[int] = None
    expire_at: datetime


class OrderUpdateModel(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    status: Optional[OrderStatus] = None
    pay_status: Optional[PayStatus] = None
    pay_time: Optional[datetime] = None
    pay_trade_no: Optional[str] = None
