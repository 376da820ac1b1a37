"""
Current-user profile route.

Login and registration live in the account service; this endpoint only
resolves the token's user and bundles their billing state.
"""

from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.exceptions import NotFoundError
from common.core.telemetry import trace_span
from common.db.session import get_db
from packages.auth.dependencies import get_current_active_user
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.membership.models.schemas.membership import SubscriptionResponse
from packages.membership.services.subscription_service import SubscriptionService
from packages.quota.models.schemas.quota import QuotaSchema
from packages.quota.services.quota_service import QuotaService
from packages.users.models.schemas.user import UserResponse
from packages.users.services.user_service import UserService

router = APIRouter()


class MeResponse(BaseModel):
    user: UserResponse
    subscription: Optional[SubscriptionResponse] = None
    quota: QuotaSchema


@router.get("/me", response_model=MeResponse)
@trace_span
async def get_me(
    current_user: AuthenticatedUser = Depends(get_current_active_user),
    db_session: AsyncSession = Depends(get_db),
):
    user = await UserService(db_session).get_user(current_user.user_id)
    if not user or not user.is_active:
        raise NotFoundError("User not found")

    subscription = await SubscriptionService(db_session).get_for_user(user.id)
    quota = await QuotaService(db_session).get_quota(user.id)
    return MeResponse(
        user=UserResponse.model_validate(user),
        subscription=(
            SubscriptionResponse.model_validate(subscription) if subscription else None
        ),
        quota=QuotaSchema.model_validate(quota),
    )
