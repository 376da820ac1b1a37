from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.sql import func

from common.db.base import Base, BigIntegerType


class UserEntity(Base):
    __tablename__ = "users"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=True)
    hashed_password = Column(String(255), nullable=True)  # Owned by the account service
    avatar = Column(String(500), nullable=True)
    role = Column(String(20), nullable=False, default="USER", server_default="USER")
    is_active = Column(Boolean, default=True, nullable=False)
    deleted = Column(
        Boolean, nullable=False, default=False, server_default="false", index=True
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
