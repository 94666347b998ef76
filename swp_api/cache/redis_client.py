"""
Redis client - backs the per-client rate limit of the search endpoint.
Design: Single lazily created client, closed on shutdown; callers degrade gracefully when Redis is down.
"""

from redis.asyncio import Redis

from swp_api.config import get_settings

# Shared async Redis client (connection pool managed by redis-py)
_redis: Redis | None = None


async def get_redis() -> Redis:
    """Get Redis connection (created on first use)."""
    global _redis
    if _redis is None:
        settings = get_settings()
        _redis = Redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
    return _redis


async def close_redis() -> None:
    """Release the pool at application shutdown."""
    global _redis
    if _redis is not None:
        await _redis.aclose()
        _redis = None
