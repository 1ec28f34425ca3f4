"""Security utilities for the admin surface: API key checks and JWT session cookies."""

import hashlib
import hmac
import logging
from typing import Optional
from datetime import datetime, timedelta
import jwt
from .config import settings
from fastapi import HTTPException, Request, status

logger = logging.getLogger(__name__)

ADMIN_COOKIE_NAME = "auth_token"
ADMIN_ROLE = "admin"


def hash_key(key: str) -> str:
    """Hash the key using SHA-256."""
    key = key or ""
    return hashlib.sha256(key.encode()).hexdigest()


def verify_api_key(api_key: Optional[str] = None) -> bool:
    """
    Verify the API key hashed is the same as the one in the settings.

    Args:
        - api_key (Optional[str]): The API key to verify.

    Returns:
        - bool: Whether the API key is valid.
    """
    if not api_key:
        return False
    return hmac.compare_digest(hash_key(api_key), settings.HASHED_API_KEY)


def create_jwt_token(data: dict, expires_delta: Optional[timedelta] = None):
    """
    Creates a JWT (JSON Web Token) with the provided data and expiration time.

    Args:
        data (dict): The payload data to be encoded in the JWT.
        expires_delta (timedelta, optional): The time until the token expires.
            Defaults to ACCESS_TOKEN_EXPIRE_MINUTES.

    Returns:
        str: The encoded JWT string.

    Note:
        The token includes standard JWT claims:
        - exp (expiration time)
        - iat (issued at time)
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = data.copy()
    now = datetime.utcnow()
    to_encode.update({
        "exp": now + expires_delta,
        "iat": now
    })
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_jwt_token(token: str):
    """Decodes and validates a JWT token.

    Raises:
        jwt.InvalidTokenError: If the token is invalid, expired, or improperly formatted.
    """
    return jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.ALGORITHM]
    )


async def require_admin(request: Request) -> str:
    """
    Dependency guarding the admin routes.

    Accepts either an ``X-API-Key`` header matching HASHED_API_KEY or an
    admin session cookie issued by ``POST /admin/session``.
    Raises 401 if neither is present and valid.
    """
    if verify_api_key(request.headers.get("X-API-Key")):
        return ADMIN_ROLE

    token = request.cookies.get(ADMIN_COOKIE_NAME)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )

    try:
        payload = decode_jwt_token(token)
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected admin session token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token"
        )

    if payload.get("role") != ADMIN_ROLE:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token"
        )

    return payload["role"]
