"""
Database entity for the per-user quota counters.
"""

from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.sql import func

from common.db.base import Base, BigIntegerType


class QuotaEntity(Base):
    """
    Allowance and consumption counters per bucket (free, paid, extra).

    total_quota and remaining_quota are cached aggregates of the bucket
    columns, recomputed on every write by QuotaService.
    """

    __tablename__ = "quotas"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    user_id = Column(
        BigIntegerType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    free_quota = Column(Integer, nullable=False, default=0, server_default="0")
    free_quota_used = Column(Integer, nullable=False, default=0, server_default="0")
    paid_quota = Column(Integer, nullable=False, default=0, server_default="0")
    paid_quota_used = Column(Integer, nullable=False, default=0, server_default="0")
    extra_quota = Column(Integer, nullable=False, default=0, server_default="0")
    extra_quota_used = Column(Integer, nullable=False, default=0, server_default="0")

    total_quota = Column(Integer, nullable=False, default=0, server_default="0")
    remaining_quota = Column(Integer, nullable=False, default=0, server_default="0")

    reset_at = Column(DateTime(timezone=True), nullable=True)  # paid allowance period end

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
