"""
API schemas for membership endpoints.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from packages.membership.models.domain.enums import SubscriptionStatus


class MembershipLevelResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: int
    level: str
    name: str
    price: float
    yearly_price: float
    monthly_quota: int
    max_resolution: str
    priority: int
    commercial_use: bool
    watermark: bool
    features: List[str]
    is_active: bool
    sort_order: int


class MembershipLevelsResponse(BaseModel):
    levels: List[MembershipLevelResponse]


class SubscriptionResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    plan: str
    status: SubscriptionStatus
    current_period_start: datetime
    current_period_end: datetime
    cancel_at_period_end: bool


class CurrentSubscriptionResponse(BaseModel):
    subscription: Optional[SubscriptionResponse] = None
