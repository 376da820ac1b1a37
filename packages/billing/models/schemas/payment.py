"""
API schemas for payment endpoints.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from packages.billing.models.domain.enums import PayMethod, PaymentStatus


class PayRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    order_id: int
    pay_method: PayMethod
    device_type: Optional[str] = None

    @field_validator("pay_method")
    @classmethod
    def gateway_method_only(cls, v):
        if v == PayMethod.MOCK:
            raise ValueError("payMethod must be ALIPAY or WECHAT")
        return v


class PaymentSummary(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int
    amount: float
    pay_method: PayMethod
    status: PaymentStatus


class PayResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    payment: PaymentSummary
    mock_pay_url: Optional[str] = None


class MockPaymentResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    order_id: int
    payment_id: int
