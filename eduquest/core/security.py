"""
Security utilities for authentication and authorization
Handles JWT bearer tokens and role checks
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from eduquest.core.config import settings
from eduquest.core.database import get_db
from eduquest.core.exceptions import (
    AuthenticationException,
    InsufficientPermissionsException,
    NotFoundException,
)

# HTTP Bearer scheme
security = HTTPBearer(auto_error=False)


class SecurityUtils:
    """Security utility functions"""

    @staticmethod
    def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        """
        Create JWT access token

        Args:
            data: Data to encode in token
            expires_delta: Token expiration time

        Returns:
            Encoded JWT token
        """
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        to_encode.update({"exp": expire, "type": "access"})

        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """
        Decode JWT token

        Raises:
            AuthenticationException: If token is invalid or expired
        """
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError as e:
            raise AuthenticationException() from e


class TokenData:
    """Token data model"""

    def __init__(self, user_id: int, role: Optional[str] = None):
        self.user_id = user_id
        self.role = role


def get_current_user_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> TokenData:
    """Get current user identity from the bearer token"""
    if credentials is None:
        raise AuthenticationException("Not authenticated")

    payload = SecurityUtils.decode_token(credentials.credentials)
    user_id = payload.get("sub")
    if user_id is None:
        raise AuthenticationException("Invalid authentication credentials")

    try:
        return TokenData(user_id=int(user_id), role=payload.get("role"))
    except (TypeError, ValueError) as e:
        raise AuthenticationException("Invalid authentication credentials") from e


def get_current_active_user(
    token_data: TokenData = Depends(get_current_user_token), db: Session = Depends(get_db)
):
    """
    Get current active user from database

    Raises:
        NotFoundException: If the token's user no longer exists
        InsufficientPermissionsException: If the user is deactivated
    """
    from eduquest.models import User

    user = db.get(User, token_data.user_id)

    if not user:
        raise NotFoundException("User")

    if not user.is_active:
        raise InsufficientPermissionsException("Inactive user")

    return user


def require_role(allowed_roles: list[str]):
    """
    Dependency to require specific user roles

    Args:
        allowed_roles: List of allowed role values

    Returns:
        Dependency function
    """

    def role_checker(current_user=Depends(get_current_active_user)):
        if current_user.role.value not in allowed_roles:
            raise InsufficientPermissionsException()
        return current_user

    return role_checker


require_teacher = require_role(["teacher", "admin"])
