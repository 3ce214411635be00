"""
Health check router for liveness and readiness probes.
"""
import logging
from typing import Awaitable, Callable

from fastapi import APIRouter, status

from portfoliohub.database.connections import get_mongo_client, get_redis_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


async def _ping_mongo() -> None:
    client = await get_mongo_client()
    await client.admin.command("ping")


async def _ping_redis() -> None:
    redis = await get_redis_client()
    await redis.ping()


async def _probe(name: str, ping: Callable[[], Awaitable[None]]) -> str:
    try:
        await ping()
    except Exception as e:
        logger.warning("Readiness probe for %s failed: %s", name, e)
        return f"unhealthy: {e}"
    return "healthy"


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check():
    """Liveness: 200 as long as the process serves requests."""
    return {"status": "healthy"}


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness check with dependencies",
)
async def readiness_check():
    """
    Readiness of the document store (MongoDB) and of the session and
    rate-limit store (Redis).

    Always answers 200; `status` is "degraded" when a dependency is down,
    with the failure reason under `checks`.
    """
    checks = {
        "api": "healthy",
        "mongodb": await _probe("mongodb", _ping_mongo),
        "redis": await _probe("redis", _ping_redis),
    }
    degraded = any(value != "healthy" for value in checks.values())
    return {"status": "degraded" if degraded else "healthy", "checks": checks}
