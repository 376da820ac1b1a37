"""
Database entity for generation history.
"""

from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, JSON, Index
from sqlalchemy.sql import func

from common.db.base import Base, BigIntegerType


class GenerationEntity(Base):
    __tablename__ = "generations"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    user_id = Column(
        BigIntegerType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    model_image = Column(Text, nullable=True)
    outfit_images = Column(JSON, nullable=False, default=list)
    pose = Column(String(100), nullable=True)
    style = Column(String(100), nullable=True)
    lighting = Column(String(100), nullable=True)
    background = Column(String(100), nullable=True)
    color_tone = Column(String(100), nullable=False, server_default="冷暖平衡")
    count = Column(Integer, nullable=False, server_default="1")
    generated_images = Column(JSON, nullable=False, default=list)
    time = Column(String(32), nullable=False, server_default="0")  # elapsed seconds, as sent by the client
    status = Column(String(20), nullable=False, server_default="COMPLETED")

    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (Index("idx_generations_user_created", "user_id", "created_at"),)
