"""Optional Redis client backing the estimate cache and the rate limiter.

With ``REDIS_URL`` unset, or when the server cannot be reached at startup,
the client stays ``None`` and callers skip caching and rate limiting.
"""
import logging
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from freight_pricing.core.config import settings

logger = logging.getLogger(__name__)

redis: Optional[Redis] = None


async def init_redis() -> Optional[Redis]:
    global redis
    if not settings.REDIS_URL:
        logger.info("REDIS_URL not set, estimate caching and rate limiting disabled")
        return None

    client = Redis.from_url(settings.REDIS_URL, decode_responses=False)
    try:
        await client.ping()
    except (RedisError, OSError) as e:
        logger.error(f"Redis at {settings.REDIS_URL} unreachable: {e}")
        await client.aclose()
        raise

    redis = client
    logger.info("Estimate cache connected")
    return redis


async def close_redis():
    global redis
    if redis is not None:
        await redis.aclose()
        redis = None


def get_redis() -> Optional[Redis]:
    return redis
