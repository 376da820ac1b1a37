"""
Domain models for payments.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict

from packages.billing.models.domain.enums import (
    OrderType,
    PayMethod,
    PaymentStatus,
    TradeOutcome,
)


class Payment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    user_id: int
    amount: Decimal
    currency: str
    pay_method: PayMethod
    status: PaymentStatus
    pay_data: Optional[Dict[str, Any]] = None
    pay_trade_no: Optional[str] = None
    notify_data: Optional[Dict[str, Any]] = None
    paid_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class PaymentCreateModel(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    order_id: int
    user_id: int
    amount: Decimal
    currency: str
    pay_method: PayMethod
    pay_data: Optional[Dict[str, Any]] = None


class PaymentUpdateModel(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    status: Optional[PaymentStatus] = None
    pay_trade_no: Optional[str] = None
    notify_data: Optional[Dict[str, Any]] = None
    paid_at: Optional[datetime] = None


class SettlementResult(BaseModel):
    """Outcome of a successful settlement."""

    order_id: int
    payment_id: int
    order_type: OrderType
    credited: int
    remaining_before: int
    remaining_after: int


class GatewayNotification(BaseModel):
    """A verified asynchronous payment notification from a gateway."""

    pay_method: PayMethod
    order_no: str
    trade_no: Optional[str] = None
    trade_status: str
    outcome: TradeOutcome
    amount: Decimal
    raw: Dict[str, Any]
