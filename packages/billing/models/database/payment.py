"""
Database entity for payments.
"""

from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func

from common.db.base import Base, BigIntegerType


class PaymentEntity(Base):
    """One gateway attempt to pay an order."""

    __tablename__ = "payments"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    order_id = Column(
        BigIntegerType,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        BigIntegerType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(10), nullable=False, server_default="CNY")
    pay_method = Column(String(20), nullable=False)  # ALIPAY, WECHAT, MOCK
    status = Column(String(20), nullable=False, server_default="PENDING", index=True)

    pay_data = Column(JSON, nullable=True)  # request-side gateway params
    pay_trade_no = Column(String(128), nullable=True)
    notify_data = Column(JSON, nullable=True)  # raw gateway callback payload
    paid_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
