"""
Identity provider boundary.

Password principals are stored in identity_db with bcrypt hashes; federated
principals are created from verified Google ID tokens. Both kinds get an
opaque, stable id which the rest of the system uses as the account id.

Google ID token payload structure:
    {
        "iss": "https://accounts.google.com",
        "aud": "<client id>",
        "sub": "1094...",
        "email": "user@example.com",
        "email_verified": true,
        "name": "Jane Doe",
        "picture": "https://lh3.googleusercontent.com/...",
        "exp": 1234567890
    }
"""
import logging
import uuid
from typing import Any, Optional

import httpx
from jose import JWTError, jwt
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from portfoliohub.config import get_settings
from portfoliohub.core.exceptions import AuthenticationError, EmailAlreadyRegisteredError
from portfoliohub.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    seconds_until_expiry,
    verify_password,
)
from portfoliohub.core.token_denylist import is_token_revoked, revoke_token
from portfoliohub.database.databases import identity_db
from portfoliohub.models.principal import IdentityProviderKind, Principal

logger = logging.getLogger(__name__)

# Module-level JWKS cache (fetched once, reused across requests)
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys(jwks_url: str) -> dict[str, Any]:
    """Fetch and cache the federated provider's signing keys, keyed by kid."""
    global _jwks_cache
    if _jwks_cache is not None:
        return _jwks_cache

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            jwks_data = response.json()
    except httpx.HTTPError:
        logger.exception("Failed to fetch JWKS from %s", jwks_url)
        return {}

    _jwks_cache = {
        key_data["kid"]: key_data
        for key_data in jwks_data.get("keys", [])
        if key_data.get("kid")
    }
    logger.info("Fetched %d JWKS keys from %s", len(_jwks_cache), jwks_url)
    return _jwks_cache


def clear_jwks_cache() -> None:
    """Forget cached signing keys (key rotation, tests)."""
    global _jwks_cache
    _jwks_cache = None


class IdentityProvider:
    """Creates and authenticates principals; issues and revokes session tokens."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """Initialize with identity database."""
        self.db = db
        self.principals = db[identity_db.Collections.PRINCIPALS]
        self.settings = get_settings()

    # ==================== Password principals ====================

    async def create_principal_with_password(self, email: str, password: str) -> Principal:
        """
        Create a password principal.

        Raises:
            AuthenticationError: password too short
            EmailAlreadyRegisteredError: a password principal exists for the email
        """
        if len(password) < self.settings.password_min_length:
            raise AuthenticationError(
                f"Password should be at least {self.settings.password_min_length} characters."
            )

        subject = email.strip().lower()
        if await self._find(IdentityProviderKind.PASSWORD, subject):
            raise EmailAlreadyRegisteredError(email)

        principal = Principal(
            _id=uuid.uuid4().hex,
            email=email.strip(),
            provider=IdentityProviderKind.PASSWORD,
            provider_subject=subject,
            hashed_password=hash_password(password),
        )
        try:
            await self.principals.insert_one(principal.model_dump(by_alias=True))
        except DuplicateKeyError:
            raise EmailAlreadyRegisteredError(email)
        except PyMongoError as e:
            logger.error("Could not create principal for %s: %s", subject, e)
            raise AuthenticationError("Authentication service unavailable") from e

        logger.info("Created password principal %s", principal.id)
        return principal

    async def authenticate_with_password(self, email: str, password: str) -> Principal:
        """
        Verify email + password.

        Raises:
            AuthenticationError: unknown email or wrong password
        """
        principal = await self._find(IdentityProviderKind.PASSWORD, email.strip().lower())
        if principal is None or not principal.hashed_password:
            raise AuthenticationError("Invalid email or password")
        if not verify_password(password, principal.hashed_password):
            raise AuthenticationError("Invalid email or password")
        return principal

    # ==================== Federated principals ====================

    async def authenticate_with_federated_provider(self, id_token: str) -> Principal:
        """
        Verify a Google ID token and return its principal, creating it on first sign-in.

        Raises:
            AuthenticationError: token invalid, expired, for another audience,
                or carrying an unverified email
        """
        claims = await self._verify_id_token(id_token)

        subject = claims.get("sub")
        email = claims.get("email")
        if not subject or not email:
            raise AuthenticationError("Federated credential is missing subject or email")
        if claims.get("email_verified") is False:
            raise AuthenticationError("Federated account email is not verified")

        existing = await self._find(IdentityProviderKind.GOOGLE, subject)
        if existing:
            return existing

        principal = Principal(
            _id=uuid.uuid4().hex,
            email=email,
            provider=IdentityProviderKind.GOOGLE,
            provider_subject=subject,
            display_name=claims.get("name"),
            photo_url=claims.get("picture"),
        )
        try:
            await self.principals.insert_one(principal.model_dump(by_alias=True))
        except DuplicateKeyError:
            # Concurrent first sign-in: the other request created it
            existing = await self._find(IdentityProviderKind.GOOGLE, subject)
            if existing is None:
                raise AuthenticationError("Federated sign-in failed")
            return existing
        except PyMongoError as e:
            logger.error("Could not create federated principal: %s", e)
            raise AuthenticationError("Authentication service unavailable") from e

        logger.info("Created federated principal %s", principal.id)
        return principal

    async def _verify_id_token(self, id_token: str) -> dict[str, Any]:
        if not self.settings.google_client_id:
            raise AuthenticationError("Federated sign-in is not configured")

        try:
            header = jwt.get_unverified_header(id_token)
        except JWTError:
            raise AuthenticationError("Invalid federated credential")

        kid = header.get("kid")
        if not kid:
            raise AuthenticationError("Invalid federated credential")

        keys = await _get_jwks_keys(self.settings.google_jwks_url)
        key_data = keys.get(kid)
        if key_data is None:
            # Unknown kid: the provider may have rotated keys
            clear_jwks_cache()
            keys = await _get_jwks_keys(self.settings.google_jwks_url)
            key_data = keys.get(kid)
            if key_data is None:
                logger.warning("JWKS key not found for kid=%s", kid)
                raise AuthenticationError("Invalid federated credential")

        try:
            return jwt.decode(
                id_token,
                key_data,
                algorithms=["RS256"],
                audience=self.settings.google_client_id,
                issuer=self.settings.google_issuers,
                options={"verify_at_hash": False},
            )
        except JWTError as e:
            logger.info("Rejected federated credential: %s", e)
            raise AuthenticationError("Invalid federated credential")

    # ==================== Lookups ====================

    async def get_principal(self, account_id: str) -> Optional[Principal]:
        """Get a principal by its account identifier."""
        doc = await self.principals.find_one({"_id": account_id})
        return Principal(**doc) if doc else None

    async def _find(self, provider: IdentityProviderKind, subject: str) -> Optional[Principal]:
        doc = await self.principals.find_one(
            {"provider": provider.value, "provider_subject": subject}
        )
        return Principal(**doc) if doc else None

    # ==================== Session tokens ====================

    def issue_session_token(self, principal: Principal) -> str:
        """Create a session token for an authenticated principal."""
        return create_access_token(account_id=principal.id, email=principal.email)

    async def verify_session_token(self, token: str) -> dict[str, Any]:
        """
        Decode a session token and make sure it was not signed out.

        Raises:
            AuthenticationError: invalid, expired or revoked token
            SessionStoreError: the revoked-token store is unreachable
        """
        try:
            payload = decode_token(token)
        except JWTError:
            raise AuthenticationError("Invalid or expired session")

        if not payload.get("sub") or not payload.get("jti"):
            raise AuthenticationError("Invalid or expired session")
        if await is_token_revoked(payload["jti"]):
            raise AuthenticationError("Session has been signed out")
        return payload

    async def sign_out(self, payload: dict[str, Any]) -> None:
        """Revoke the session token described by `payload` until it expires."""
        await revoke_token(payload["jti"], seconds_until_expiry(payload))
        logger.info("Signed out session %s for %s", payload["jti"], payload.get("sub"))
