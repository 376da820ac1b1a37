from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr

from packages.users.models.domain.enums import UserRole


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: EmailStr
    name: Optional[str] = None
    avatar: Optional[str] = None
    role: UserRole = UserRole.USER
    is_active: bool = True
    deleted: bool = False
    created_at: datetime
    updated_at: datetime


class UserCreateModel(BaseModel):
    """Model for creating a new user."""

    model_config = ConfigDict(use_enum_values=True)

    email: EmailStr
    name: Optional[str] = None
    avatar: Optional[str] = None
    role: UserRole = UserRole.USER
    is_active: bool = True


class UserUpdateModel(BaseModel):
    """Model for updating a user."""

    model_config = ConfigDict(use_enum_values=True)

    name: Optional[str] = None
    avatar: Optional[str] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
