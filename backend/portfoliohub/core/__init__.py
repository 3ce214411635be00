"""
Core module - Security, rate limiting, token revocation and the error taxonomy.
"""
from portfoliohub.core.exceptions import (
    PortfolioHubError,
    AuthenticationError,
    EmailAlreadyRegisteredError,
    ValidationError,
    UsernameTakenError,
    StorageError,
    NotFoundError,
)
from portfoliohub.core.security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_token,
)
from portfoliohub.core.rate_limit import check_rate_limit
from portfoliohub.core.token_denylist import revoke_token, is_token_revoked

__all__ = [
    "PortfolioHubError",
    "AuthenticationError",
    "EmailAlreadyRegisteredError",
    "ValidationError",
    "UsernameTakenError",
    "StorageError",
    "NotFoundError",
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
    "check_rate_limit",
    "revoke_token",
    "is_token_revoked",
]
