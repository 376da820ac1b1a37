"""
Membership API routes.

The level catalog is public (pricing page); the subscription endpoint needs auth.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.telemetry import trace_span
from common.db.session import get_db_readonly
from packages.auth.dependencies import get_current_active_user
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.membership.models.schemas.membership import (
    CurrentSubscriptionResponse,
    MembershipLevelResponse,
    MembershipLevelsResponse,
    SubscriptionResponse,
)
from packages.membership.services.membership_service import MembershipService
from packages.membership.services.subscription_service import SubscriptionService

router = APIRouter()


@router.get("/levels", response_model=MembershipLevelsResponse)
@trace_span
async def list_membership_levels():
    """Active membership levels ordered for display, features decoded."""
    levels = await MembershipService().list_levels()
    return MembershipLevelsResponse(
        levels=[MembershipLevelResponse.model_validate(level) for level in levels]
    )


@router.get("/subscription", response_model=CurrentSubscriptionResponse)
@trace_span
async def get_current_subscription(
    current_user: AuthenticatedUser = Depends(get_current_active_user),
    db_session: AsyncSession = Depends(get_db_readonly),
):
    subscription = await SubscriptionService(db_session).get_for_user(
        current_user.user_id
    )
    return CurrentSubscriptionResponse(
        subscription=(
            SubscriptionResponse.model_validate(subscription) if subscription else None
        )
    )
