"""
Database entity for orders.
"""

from sqlalchemy import (
    Column,
    String,
    Integer,
    Numeric,
    DateTime,
    ForeignKey,
    Index,
    CheckConstraint,
)
from sqlalchemy.sql import func

from common.db.base import Base, BigIntegerType


class OrderEntity(Base):
    """
    Purchase intent for a membership or a quota top-up.

    The check constraint keeps the payload consistent with the type:
    membership orders carry membership_id and duration, quota orders
    carry quota_amount, never both.
    """

    __tablename__ = "orders"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    order_no = Column(String(64), nullable=False, unique=True, index=True)
    user_id = Column(
        BigIntegerType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    type = Column(String(20), nullable=False)  # MEMBERSHIP, QUOTA
    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(10), nullable=False, server_default="CNY")
    status = Column(String(20), nullable=False, server_default="PENDING")
    pay_status = Column(String(20), nullable=False, server_default="PENDING")

    membership_id = Column(
        BigIntegerType,
        ForeignKey("membership_levels.id", ondelete="RESTRICT"),
        nullable=True,
    )
    duration = Column(Integer, nullable=True)  # months
    quota_amount = Column(Integer, nullable=True)

    expire_at = Column(DateTime(timezone=True), nullable=False)
    pay_time = Column(DateTime(timezone=True), nullable=True)
    pay_trade_no = Column(String(128), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint(
            "(type = 'MEMBERSHIP' AND membership_id IS NOT NULL "
            "AND duration IS NOT NULL AND quota_amount IS NULL) OR "
            "(type = 'QUOTA' AND quota_amount IS NOT NULL "
            "AND membership_id IS NULL AND duration IS NULL)",
            name="ck_orders_type_payload",
        ),
        Index("idx_orders_user_created", "user_id", "created_at"),
    )
