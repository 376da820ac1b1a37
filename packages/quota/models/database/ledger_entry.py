"""
Database entity for quota ledger entries.
"""

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Index
from sqlalchemy.sql import func

from common.db.base import Base, BigIntegerType


class QuotaLedgerEntryEntity(Base):
    """
    Append-only record of one change to a user's quota.

    `amount` is the signed change in remaining_quota. `order_id` is unique:
    an order can credit quota once, which makes the ledger the settlement
    marker for payments.
    """

    __tablename__ = "quota_ledger_entries"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    user_id = Column(
        BigIntegerType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    entry_type = Column(String(30), nullable=False, index=True)
    bucket = Column(String(10), nullable=True)  # FREE, PAID, EXTRA; NULL for adjustments
    amount = Column(Integer, nullable=False)
    remaining_after = Column(Integer, nullable=False)

    order_id = Column(
        BigIntegerType,
        ForeignKey("orders.id", ondelete="RESTRICT"),
        nullable=True,
        unique=True,
    )
    generation_id = Column(BigIntegerType, nullable=True, index=True)
    description = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    __table_args__ = (Index("idx_quota_ledger_user_created", "user_id", "created_at"),)
