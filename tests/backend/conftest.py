"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with helpers for the
registration workflow, federated ID tokens, and authenticated API calls.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwk, jwt

from portfoliohub.services.identity_provider import clear_jwks_cache
from portfoliohub.services.registration_service import RegistrationService

TEST_KID = "test-key-1"
TEST_CLIENT_ID = "test-client-id.apps.googleusercontent.com"


# =============================================================================
# Federated ID Token Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def rsa_private_pem() -> bytes:
    """Throwaway RSA key standing in for the provider's signing key."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture(scope="session")
def provider_jwks(rsa_private_pem) -> dict:
    """JWKS (keyed by kid) publishing the public half of the test key."""
    private_key = serialization.load_pem_private_key(rsa_private_pem, password=None)
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    public_jwk = jwk.construct(public_pem, "RS256").to_dict()
    public_jwk["kid"] = TEST_KID
    return {TEST_KID: public_jwk}


@pytest.fixture
def make_id_token(rsa_private_pem, federated_claims):
    """
    Build a signed ID token.

    Usage:
        token = make_id_token(email_verified=False)
    """
    def _make(kid: str = TEST_KID, expires_in: int = 3600, **overrides) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            **federated_claims,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=expires_in)).timestamp()),
        }
        claims.update(overrides)
        return jwt.encode(
            claims,
            rsa_private_pem.decode(),
            algorithm="RS256",
            headers={"kid": kid},
        )

    return _make


@pytest.fixture
def federated_identity(identity, provider_jwks):
    """IdentityProvider configured for federated sign-in against the test JWKS."""
    identity.settings = identity.settings.model_copy(
        update={"google_client_id": TEST_CLIENT_ID}
    )
    clear_jwks_cache()
    with patch(
        "portfoliohub.services.identity_provider._get_jwks_keys",
        AsyncMock(return_value=provider_jwks),
    ):
        yield identity
    clear_jwks_cache()


# =============================================================================
# Registration Service Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def registration(identity, store) -> RegistrationService:
    """RegistrationService with the default (exclusive) claim mode."""
    return RegistrationService(identity=identity, store=store, claim_mode="exclusive")


@pytest_asyncio.fixture
async def overwrite_registration(identity, store) -> RegistrationService:
    """RegistrationService with last-write-wins username claims."""
    return RegistrationService(identity=identity, store=store, claim_mode="overwrite")


# =============================================================================
# API Helpers
# =============================================================================

@pytest.fixture
def register_user(client):
    """
    Register through the API and return the parsed AuthResponse.

    Usage:
        auth = register_user("alice", "alice@example.com")
    """
    def _register(username: str, email: str, password: str = "SecurePassword123!") -> dict:
        response = client.post(
            "/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def assert_error_response():
    """Helper to assert error response structure."""
    def _assert(response, status_code: int, detail_contains: str = None):
        assert response.status_code == status_code
        data = response.json()
        assert "detail" in data
        if detail_contains:
            detail = data["detail"]
            if isinstance(detail, dict):
                detail = detail.get("message", "")
            assert detail_contains.lower() in str(detail).lower()
    return _assert
