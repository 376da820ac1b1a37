from typing import Annotated, Optional
from fastapi import Cookie, Depends, Header

from common.core.config import settings
from common.core.exceptions import AuthError
from common.core.telemetry import trace_span, get_logger
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.auth.services.token_service import TokenService

logger = get_logger(__name__)


def get_token_service() -> TokenService:
    return TokenService()


def extract_token(
    authorization: Optional[str], cookie_token: Optional[str]
) -> Optional[str]:
    """Bearer header wins over the session cookie."""
    if authorization and authorization.startswith("Bearer "):
        return authorization[len("Bearer ") :].strip() or None
    return cookie_token or None


@trace_span
async def get_current_user(
    authorization: Annotated[Optional[str], Header()] = None,
    token: Annotated[Optional[str], Cookie(alias=settings.auth_cookie_name)] = None,
    token_service: TokenService = Depends(get_token_service),
) -> AuthenticatedUser:
    """Get current authenticated user from a Bearer token or the session cookie."""
    raw_token = extract_token(authorization, token)
    if not raw_token:
        raise AuthError("Authentication token missing")

    claims = token_service.decode_token(raw_token)
    return AuthenticatedUser(
        user_id=claims.user_id, email=claims.email, role=claims.role
    )


@trace_span
async def get_current_active_user(
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> AuthenticatedUser:
    """Get current active user."""
    logger.debug(f"Authenticated request user_id={current_user.user_id}")
    return current_user
