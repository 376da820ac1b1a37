"""
Database entity for the membership level catalog.
"""

from sqlalchemy import Column, String, Integer, Boolean, DateTime, Numeric, Text, Index
from sqlalchemy.sql import func

from common.db.base import Base, BigIntegerType


class MembershipLevelEntity(Base):
    """
    Priced membership tier. Reference data, seeded by packages.membership.seed.
    """

    __tablename__ = "membership_levels"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    level = Column(String(50), nullable=False, unique=True)  # BRONZE, SILVER, ...
    name = Column(String(100), nullable=False)

    # Pricing
    price = Column(Numeric(10, 2), nullable=False)  # per month
    yearly_price = Column(Numeric(10, 2), nullable=False)  # 12-month bundle

    # Entitlements
    monthly_quota = Column(Integer, nullable=False)
    max_resolution = Column(String(20), nullable=False)
    priority = Column(Integer, nullable=False, default=0, server_default="0")
    commercial_use = Column(Boolean, nullable=False, default=False, server_default="false")
    watermark = Column(Boolean, nullable=False, default=True, server_default="true")
    features = Column(Text, nullable=False, default="[]", server_default="[]")  # JSON list

    is_active = Column(Boolean, nullable=False, default=True, server_default="true")
    sort_order = Column(Integer, nullable=False, default=0, server_default="0")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (Index("idx_membership_level_active_sort", "is_active", "sort_order"),)
