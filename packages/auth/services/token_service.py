from datetime import timedelta
from typing import Optional

import jwt

from common.core.config import settings
from common.core.exceptions import AuthError
from common.core.telemetry import get_logger
from common.core.timeutils import utcnow
from packages.auth.models.domain.token import TokenClaims
from packages.users.models.domain.enums import UserRole

logger = get_logger(__name__)


class TokenService:
    """HS256 session tokens: `{userId, email, role, exp}` signed with the shared secret."""

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_days: Optional[int] = None,
    ):
        self.secret = secret or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm
        self.expire_days = expire_days or settings.jwt_expire_days

    def issue_token(self, user_id: int, email: str, role: UserRole = UserRole.USER) -> str:
        payload = {
            "userId": user_id,
            "email": email,
            "role": role.value,
            "exp": utcnow() + timedelta(days=self.expire_days),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_token(self, token: str) -> TokenClaims:
        """Verify signature and expiry. Raises AuthError for anything invalid."""
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthError("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.info(f"Rejected token: {e}")
            raise AuthError("Invalid authentication token")

        try:
            return TokenClaims.model_validate(payload)
        except ValueError:
            raise AuthError("Invalid authentication token")
