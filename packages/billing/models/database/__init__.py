"""Database models for billing."""

from packages.billing.models.database.order import OrderEntity
from packages.billing.models.database.payment import PaymentEntity

__all__ = [
    "OrderEntity",
    "PaymentEntity",
]
