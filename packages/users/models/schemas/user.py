from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from packages.users.models.domain.enums import UserRole


class UserResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: int
    email: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    role: UserRole
    created_at: datetime
