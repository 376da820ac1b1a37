from enum import Enum


class UserRole(str, Enum):
    """Account roles. VIP is granted by a paid membership."""

    USER = "USER"
    VIP = "VIP"
    ADMIN = "ADMIN"

    def is_privileged(self) -> bool:
        return self in (UserRole.VIP, UserRole.ADMIN)
