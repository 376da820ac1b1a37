from pydantic import BaseModel, ConfigDict

from packages.users.models.domain.enums import UserRole


class AuthenticatedUser(BaseModel):
    """User context passed through authentication dependencies"""

    model_config = ConfigDict(from_attributes=True)

    user_id: int
    email: str
    role: UserRole = UserRole.USER
