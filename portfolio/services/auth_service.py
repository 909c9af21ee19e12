"""
Authentication service for JWT session tokens and admin users.
"""

import jwt
from jwt.exceptions import InvalidTokenError, ExpiredSignatureError
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from pymongo.errors import DuplicateKeyError

from ..core.config import settings
from ..core.exceptions import AuthorizationError, ConflictError
from ..core.logging_config import get_logger
from ..models.user import AdminUser

logger = get_logger(__name__)


class AuthService:
    """Issues and verifies session tokens for admin users"""

    @staticmethod
    def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        """Create JWT access token"""
        to_encode = data.copy()
        expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
        to_encode.update({"exp": expire, "type": "access"})
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def verify_token(token: str) -> Dict[str, Any]:
        """Verify JWT token and return payload"""
        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except ExpiredSignatureError:
            raise AuthorizationError("Token has expired")
        except InvalidTokenError:
            raise AuthorizationError("Invalid or expired token")

        if payload.get("type") != "access" or not payload.get("sub"):
            raise AuthorizationError("Invalid or expired token")
        return payload

    @staticmethod
    def token_for_user(user: AdminUser) -> str:
        return AuthService.create_access_token(
            data={"sub": str(user.id), "email": user.email, "role": user.role}
        )

    @staticmethod
    async def authenticate_user(email: str, password: str) -> AdminUser:
        """Return the admin matching the credentials or raise AuthorizationError"""
        user = await AdminUser.find_one({"email": email.strip().lower()})
        if not user or not user.verify_password(password):
            logger.warning("Failed login attempt", user_email=email)
            raise AuthorizationError("Invalid email or password")
        return user

    @staticmethod
    async def create_admin_user(name: str, email: str, password: str) -> AdminUser:
        email = email.strip().lower()
        if await AdminUser.find_one({"email": email}):
            raise ConflictError("Admin user already exists")

        user = AdminUser(
            name=name.strip(),
            email=email,
            hashed_password=AdminUser.hash_password(password),
        )
        try:
            await user.insert()
        except DuplicateKeyError as e:
            raise ConflictError("Admin user already exists") from e

        logger.info("Created admin user", user_id=str(user.id))
        return user
