"""Quote estimate endpoints with Redis caching"""
import json
import logging
from typing import Type, TypeVar

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from freight_pricing.api.deps import get_quote_service
from freight_pricing.core.config import settings
from freight_pricing.core.metrics import cache_hits, cache_misses
from freight_pricing.core.rate_limit import check_rate_limit
from freight_pricing.core.redis import get_redis
from freight_pricing.schemas.quote import (
    MultiPackageEstimateRequest,
    MultiPackageEstimateResult,
    QuoteEstimateRequest,
    QuoteEstimateResult,
)
from freight_pricing.services.quote_service import QuoteService
from freight_pricing.utils.hashing import cache_key

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/quotes", tags=["quotes"])

T = TypeVar("T", bound=BaseModel)


def _generate_cache_key(prefix: str, req: BaseModel) -> str:
    return cache_key(prefix, req.model_dump(mode="json"))


async def _cached(key: str, model: Type[T]):
    redis = get_redis()
    if redis is None:
        return None
    try:
        cached = await redis.get(key)
    except Exception as e:
        logger.warning(f"Cache retrieval failed: {e}")
        return None
    if not cached:
        cache_misses.labels(cache_key=key.split(":", 1)[0]).inc()
        return None
    cache_hits.labels(cache_key=key.split(":", 1)[0]).inc()
    return model.model_validate(json.loads(cached))


async def _store(key: str, result: BaseModel) -> None:
    redis = get_redis()
    if redis is None:
        return
    try:
        await redis.set(
            key,
            result.model_dump_json(),
            ex=settings.PRICE_CACHE_TTL
        )
    except Exception as e:
        logger.warning(f"Cache write failed: {e}")


def _client_id(request: Request) -> str:
    return request.client.host if request.client else "anonymous"


@router.post("/estimate", response_model=QuoteEstimateResult)
async def estimate_quote(
    req: QuoteEstimateRequest,
    request: Request,
    service: QuoteService = Depends(get_quote_service),
):
    await check_rate_limit(_client_id(request))

    key = _generate_cache_key("estimate", req)
    cached = await _cached(key, QuoteEstimateResult)
    if cached is not None:
        return cached

    result = await service.estimate(req)
    await _store(key, result)
    return result


@router.post("/estimate/packages", response_model=MultiPackageEstimateResult)
async def estimate_packages(
    req: MultiPackageEstimateRequest,
    request: Request,
    service: QuoteService = Depends(get_quote_service),
):
    await check_rate_limit(_client_id(request))

    key = _generate_cache_key("estimate-packages", req)
    cached = await _cached(key, MultiPackageEstimateResult)
    if cached is not None:
        return cached

    result = await service.estimate_packages(req)
    await _store(key, result)
    return result
