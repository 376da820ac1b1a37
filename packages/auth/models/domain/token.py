from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from packages.users.models.domain.enums import UserRole


class TokenClaims(BaseModel):
    """JWT payload shared with the account service."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId")
    email: str
    role: UserRole = UserRole.USER
    exp: datetime
