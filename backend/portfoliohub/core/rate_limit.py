"""
Rate limiting backed by Redis fixed windows.
"""
import logging
from typing import Optional

from redis.exceptions import RedisError

from portfoliohub.config import get_settings
from portfoliohub.core.exceptions import SessionStoreError
from portfoliohub.database.connections import get_redis_client

logger = logging.getLogger(__name__)


async def check_rate_limit(
    ip: str,
    endpoint: str,
    limit: Optional[int] = None,
    window_seconds: Optional[int] = None,
) -> bool:
    """
    Check if a request should be rate limited.

    Key pattern: "ratelimit:{endpoint}:{ip}", INCR with EXPIRE on the
    first hit of each window.

    Args:
        ip: Client IP address
        endpoint: Endpoint identifier (e.g., "/auth/login")
        limit: Max requests allowed (defaults to config value)
        window_seconds: Time window in seconds (defaults to config value)

    Returns:
        True if request is allowed, False if rate limited

    Raises:
        SessionStoreError: Redis is unreachable
    """
    settings = get_settings()
    if not settings.rate_limit_enabled:
        return True

    if limit is None:
        limit = settings.login_rate_limit_attempts
    if window_seconds is None:
        window_seconds = settings.rate_limit_window_seconds

    key = f"ratelimit:{endpoint}:{ip}"
    try:
        redis = await get_redis_client()
        current = await redis.incr(key)
        if current == 1:
            await redis.expire(key, window_seconds)
    except RedisError as e:
        logger.error("Rate limit check for %s failed: %s", key, e)
        raise SessionStoreError() from e

    if current > limit:
        logger.info("Rate limit exceeded for %s on %s (%d/%d)", ip, endpoint, current, limit)
        return False
    return True
