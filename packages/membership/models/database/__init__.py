"""Database models for membership."""

from packages.membership.models.database.membership_level import MembershipLevelEntity
from packages.membership.models.database.subscription import SubscriptionEntity

__all__ = [
    "MembershipLevelEntity",
    "SubscriptionEntity",
]
