from enum import Enum


class SubscriptionStatus(str, Enum):
    """Subscription status lifecycle: ACTIVE -> CANCELLED | EXPIRED."""

    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"
