"""
Authentication dependencies for API endpoints.
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ..core.config import settings
from ..core.exceptions import AuthorizationError
from ..core.logging_config import set_request_context
from ..services.auth_service import AuthService

# Security scheme
security = HTTPBearer(auto_error=False)


def get_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[str]:
    """Session token from the auth cookie, falling back to a bearer header"""
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if token:
        return token
    if credentials:
        return credentials.credentials
    return None


async def require_auth(token: Optional[str] = Depends(get_token)) -> dict:
    """
    Require an authenticated admin session.
    Returns the decoded token payload.
    """
    if not token:
        raise AuthorizationError("No token provided")

    payload = AuthService.verify_token(token)
    set_request_context(user_id=payload["sub"])
    return payload
