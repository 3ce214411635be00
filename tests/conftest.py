"""
Global test fixtures for PortfolioHub.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor)
- Mock Redis (fakeredis)
- Service instances wired to the mocks
- FastAPI TestClient with database connections patched
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import fakeredis
import fakeredis.aioredis
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from portfoliohub.database.databases import identity_db, portfolio_db  # noqa: E402
from portfoliohub.database.registry import create_indexes  # noqa: E402
from portfoliohub.services.document_store import DocumentStore  # noqa: E402
from portfoliohub.services.identity_provider import IdentityProvider  # noqa: E402


# =============================================================================
# MongoDB Fixtures (mongomock-motor)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor,
    indexed like the real databases.
    """
    client = AsyncMongoMockClient()
    await create_indexes(client)
    yield client
    client.close()


@pytest_asyncio.fixture
async def mock_identity_db(mock_async_mongo_client):
    """Provide mock identity_db database."""
    yield mock_async_mongo_client[identity_db.DB_NAME]


@pytest_asyncio.fixture
async def mock_portfolio_db(mock_async_mongo_client):
    """Provide mock portfolio_db database."""
    yield mock_async_mongo_client[portfolio_db.DB_NAME]


# =============================================================================
# Redis Fixtures (fakeredis)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_redis():
    """Create an async mock Redis client using fakeredis."""
    redis_client = fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
    yield redis_client
    await redis_client.flushall()
    await redis_client.aclose()


@pytest.fixture
def patch_redis(mock_async_redis):
    """
    Route the token denylist and the rate limiter to fakeredis.

    Both modules import get_redis_client by name, so each is patched where
    it is used.
    """
    async def _get_redis():
        return mock_async_redis

    with patch("portfoliohub.core.token_denylist.get_redis_client", _get_redis), \
         patch("portfoliohub.core.rate_limit.get_redis_client", _get_redis):
        yield mock_async_redis


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def store(mock_portfolio_db) -> DocumentStore:
    """DocumentStore over the mock portfolio database."""
    return DocumentStore(mock_portfolio_db)


@pytest_asyncio.fixture
async def identity(mock_identity_db, patch_redis) -> IdentityProvider:
    """IdentityProvider over the mock identity database."""
    return IdentityProvider(mock_identity_db)


# =============================================================================
# User Fixtures
# =============================================================================

@pytest.fixture
def test_user_data() -> dict:
    """Basic registration body."""
    return {
        "username": "new_user_1",
        "email": "testuser@example.com",
        "password": "SecurePassword123!",
    }


@pytest.fixture
def federated_claims() -> dict:
    """Verified claims of a first-time Google sign-in."""
    return {
        "iss": "https://accounts.google.com",
        "aud": "test-client-id.apps.googleusercontent.com",
        "sub": "109876543210",
        "email": "federated@example.com",
        "email_verified": True,
        "name": "Fed User",
        "picture": "https://lh3.googleusercontent.com/a/avatar.png",
    }


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================

@pytest.fixture
def api_mongo_client():
    """
    Mongo mock for the TestClient.

    Created outside pytest-asyncio's loop; the app's lifespan builds the
    indexes inside the TestClient loop.
    """
    client = AsyncMongoMockClient()
    yield client
    client.close()


@pytest.fixture
def api_redis_client():
    """fakeredis instance used only from the TestClient loop."""
    return fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def app(api_mongo_client, api_redis_client):
    """
    Create FastAPI app for testing with database connections mocked.
    """
    async def get_mongo():
        return api_mongo_client

    async def get_redis():
        return api_redis_client

    async def close():
        return None

    with patch("portfoliohub.main.get_mongo_client", get_mongo), \
         patch("portfoliohub.main.close_connections", close), \
         patch("portfoliohub.dependencies.services.get_mongo_client", get_mongo), \
         patch("portfoliohub.routers.health.get_mongo_client", get_mongo), \
         patch("portfoliohub.routers.health.get_redis_client", get_redis), \
         patch("portfoliohub.core.token_denylist.get_redis_client", get_redis), \
         patch("portfoliohub.core.rate_limit.get_redis_client", get_redis):
        from portfoliohub.main import app
        yield app


@pytest.fixture
def client(app) -> Generator:
    """
    Create a TestClient for the FastAPI app.

    Entering the context runs the lifespan (registry sync, indexes).
    """
    with TestClient(app) as c:
        yield c


# =============================================================================
# Utility Fixtures
# =============================================================================

@pytest.fixture
def assert_datetime_recent():
    """
    Fixture providing a helper to assert a datetime is recent.

    Usage:
        def test_something(assert_datetime_recent):
            assert_datetime_recent(doc["created_at"], max_age_seconds=60)
    """
    def _assert_recent(value, max_age_seconds: int = 60):
        if isinstance(value, str):
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)

        age = (datetime.now(timezone.utc) - value).total_seconds()

        assert age < max_age_seconds, f"Datetime {value} is {age}s old, expected < {max_age_seconds}s"
        assert age >= -1, f"Datetime {value} is in the future"

    return _assert_recent
