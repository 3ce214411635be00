"""
Database connection management for MongoDB and Redis.
"""
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient
from redis.asyncio import Redis

from portfoliohub.config import get_settings

logger = logging.getLogger(__name__)

# Process-wide clients, created lazily and closed on shutdown
_mongo_client: Optional[AsyncIOMotorClient] = None
_redis_client: Optional[Redis] = None


async def get_mongo_client() -> AsyncIOMotorClient:
    """Get or create MongoDB client."""
    global _mongo_client
    if _mongo_client is None:
        settings = get_settings()
        _mongo_client = AsyncIOMotorClient(settings.mongo_uri)
        logger.info("MongoDB client created")
    return _mongo_client


async def get_redis_client() -> Redis:
    """Get or create Redis client."""
    global _redis_client
    if _redis_client is None:
        settings = get_settings()
        _redis_client = Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            decode_responses=True,
        )
        logger.info("Redis client created for %s:%s", settings.redis_host, settings.redis_port)
    return _redis_client


async def close_connections():
    """Close all database connections."""
    global _mongo_client, _redis_client

    if _mongo_client is not None:
        _mongo_client.close()
        _mongo_client = None

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
