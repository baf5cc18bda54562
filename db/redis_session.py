"""
Redis holds the ids of logged-out tokens until those tokens expire.
"""

import logging

import redis.asyncio as redis

from core.config import settings

logger = logging.getLogger(__name__)

_redis_client: redis.Redis | None = None

REVOKED_PREFIX = "revoked:"


def build_redis_client() -> redis.Redis:
    return redis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
        socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
        health_check_interval=30,
    )


async def get_redis_client() -> redis.Redis:
    global _redis_client

    if _redis_client is None:
        client = build_redis_client()
        await client.ping()
        logger.info("Connected to Redis for token revocation")
        _redis_client = client

    return _redis_client


async def close_redis() -> None:
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


async def revoke_token(client: redis.Redis, jti: str, ttl_seconds: int) -> None:
    """Remember a token id until the token would have expired anyway."""
    if ttl_seconds <= 0:
        return
    await client.set(f"{REVOKED_PREFIX}{jti}", "1", ex=ttl_seconds)


async def is_token_revoked(client: redis.Redis, jti: str) -> bool:
    return bool(await client.exists(f"{REVOKED_PREFIX}{jti}"))
