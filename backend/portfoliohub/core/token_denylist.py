"""
Revoked session tokens, kept in Redis until they would have expired anyway.
"""
import logging

from redis.exceptions import RedisError

from portfoliohub.core.exceptions import SessionStoreError
from portfoliohub.database.connections import get_redis_client

logger = logging.getLogger(__name__)


def _key(jti: str) -> str:
    return f"revoked:{jti}"


async def revoke_token(jti: str, ttl_seconds: int) -> None:
    """Mark a token id as revoked for the rest of its lifetime."""
    if ttl_seconds <= 0:
        return
    try:
        redis = await get_redis_client()
        await redis.setex(_key(jti), ttl_seconds, "1")
    except RedisError as e:
        logger.error("Revoking token %s failed: %s", jti, e)
        raise SessionStoreError() from e


async def is_token_revoked(jti: str) -> bool:
    """Check whether a token id was signed out."""
    try:
        redis = await get_redis_client()
        return bool(await redis.exists(_key(jti)))
    except RedisError as e:
        logger.error("Denylist lookup for %s failed: %s", jti, e)
        raise SessionStoreError() from e
