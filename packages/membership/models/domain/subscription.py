"""
Domain models for subscriptions.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from common.core.timeutils import ensure_utc, utcnow
from packages.membership.models.domain.enums import SubscriptionStatus


class Subscription(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    plan: str
    status: SubscriptionStatus
    current_period_start: datetime
    current_period_end: datetime
    cancel_at_period_end: bool = False
    created_at: datetime
    updated_at: datetime

    def is_active(self, now: Optional[datetime] = None) -> bool:
        """ACTIVE and the current period has not ended yet."""
        now = now or utcnow()
        return (
            self.status == SubscriptionStatus.ACTIVE
            and ensure_utc(self.current_period_end) > now
        )


class SubscriptionCreateModel(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    user_id: int
    plan: str
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    current_period_start: datetime
    current_period_end: datetime
    cancel_at_period_end: bool = False


class SubscriptionUpdateModel(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    plan: Optional[str] = None
    status: Optional[SubscriptionStatus] = None
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    cancel_at_period_end: Optional[bool] = None
