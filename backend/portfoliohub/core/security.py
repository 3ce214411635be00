"""
Security utilities for password hashing and JWT session token management.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from portfoliohub.config import get_settings

# Password hashing context using bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    """
    Hash a plain password using bcrypt.

    Args:
        plain_password: The plain text password to hash

    Returns:
        Hashed password string
    """
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    account_id: str,
    email: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT session token.

    Args:
        account_id: Principal / account identifier
        email: Verified email of the principal
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    settings = get_settings()

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_access_token_expire_minutes)

    now = datetime.now(timezone.utc)
    payload = {
        "sub": account_id,
        "email": email,
        "jti": uuid.uuid4().hex,
        "exp": now + expires_delta,
        "iat": now,
    }

    return jwt.encode(
        payload,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT session token.

    Args:
        token: The JWT token string to decode

    Returns:
        Decoded payload dictionary with keys: sub, email, jti, exp, iat

    Raises:
        JWTError: If token is invalid or expired
    """
    settings = get_settings()
    return jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
    )


def seconds_until_expiry(payload: dict[str, Any]) -> int:
    """Remaining lifetime of a decoded token, never negative."""
    exp = payload.get("exp")
    if exp is None:
        return 0
    remaining = exp - datetime.now(timezone.utc).timestamp()
    return max(int(remaining), 0)


__all__ = [
    "JWTError",
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
    "seconds_until_expiry",
]
