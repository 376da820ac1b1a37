"""
Service for membership subscriptions.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.telemetry import trace_span, get_logger
from common.core.timeutils import add_months, utcnow
from packages.membership.models.domain.enums import SubscriptionStatus
from packages.membership.models.domain.subscription import (
    Subscription,
    SubscriptionCreateModel,
    SubscriptionUpdateModel,
)
from packages.membership.repositories.subscription_repository import (
    SubscriptionRepository,
)

logger = get_logger(__name__)


class SubscriptionService:
    def __init__(self, db_session: Optional[AsyncSession] = None):
        self.db_session = db_session
        self.subscription_repo = SubscriptionRepository(db_session)

    @trace_span
    async def get_for_user(self, user_id: int) -> Optional[Subscription]:
        return await self.subscription_repo.get_by_user_id(user_id)

    @trace_span
    async def activate(
        self,
        user_id: int,
        plan: str,
        duration_months: int,
        now: Optional[datetime] = None,
    ) -> Subscription:
        """
        Start a subscription period of `duration_months` from `now`.

        A renewal replaces the current period instead of extending it, so
        unused time on an active subscription is not carried over.
        """
        now = now or utcnow()
        period_end = add_months(now, duration_months)

        existing = await self.subscription_repo.get_by_user_id(user_id)
        if existing:
            subscription = await self.subscription_repo.update(
                existing.id,
                SubscriptionUpdateModel(
                    plan=plan,
                    status=SubscriptionStatus.ACTIVE,
                    current_period_start=now,
                    current_period_end=period_end,
                    cancel_at_period_end=False,
                ),
            )
        else:
            subscription = await self.subscription_repo.create(
                SubscriptionCreateModel(
                    user_id=user_id,
                    plan=plan,
                    current_period_start=now,
                    current_period_end=period_end,
                )
            )

        logger.info(
            "Subscription activated",
            extra={
                "user_id": user_id,
                "plan": plan,
                "renewal": existing is not None,
                "period_end": period_end.isoformat(),
            },
        )
        return subscription
