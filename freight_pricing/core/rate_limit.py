import logging
from fastapi import HTTPException
from redis.exceptions import RedisError
from freight_pricing.core.redis import get_redis
from freight_pricing.core.config import settings
from freight_pricing.core.metrics import rate_limit_exceeded

logger = logging.getLogger(__name__)


async def check_rate_limit(client: str):
    redis = get_redis()
    if redis is None:
        return
    key = f"rl:{client}"
    try:
        current = await redis.get(key)
        if current is None:
            await redis.set(key, "1", ex=settings.RATE_LIMIT_WINDOW)
            return
        count = int(current)
        if count < settings.RATE_LIMIT:
            await redis.incr(key)
            return
    except (RedisError, OSError) as e:
        logger.warning(f"Rate limit check skipped for {client}: {e}")
        return

    rate_limit_exceeded.labels(client=client).inc()
    logger.warning(f"Rate limit exceeded for {client}")
    raise HTTPException(status_code=429, detail="Rate limit exceeded")
