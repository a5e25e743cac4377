from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from starlette.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from freight_pricing.api import pricing_config, quotes
from freight_pricing.core.config import settings
from freight_pricing.core.exceptions import PricingError, QuoteValidationError
from freight_pricing.core.redis import init_redis, close_redis, get_redis
from freight_pricing.core.metrics import request_count, request_duration, db_connected, redis_connected, get_metrics_text
from freight_pricing.db.session import engine
import time
import logging

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            path = request.url.path
            request_count.labels(method=request.method, endpoint=path, status=status).inc()
            request_duration.labels(method=request.method, endpoint=path).observe(
                time.perf_counter() - started
            )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.API_TITLE} {settings.API_VERSION} starting")

    try:
        redis_connected.set(1 if await init_redis() is not None else 0)
    except Exception as e:
        logger.error(f"Continuing without estimate cache: {e}")
        redis_connected.set(0)

    db_connected.set(1)

    yield

    logger.info("Shutting down")
    await close_redis()
    await engine.dispose()
    redis_connected.set(0)
    db_connected.set(0)


app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    lifespan=lifespan
)

app.add_middleware(MetricsMiddleware)

app.include_router(quotes.router)
app.include_router(pricing_config.router)


@app.exception_handler(QuoteValidationError)
async def quote_validation_error_handler(request: Request, exc: QuoteValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": exc.message, "field": exc.field, "code": exc.code},
    )


@app.exception_handler(PricingError)
async def pricing_error_handler(request: Request, exc: PricingError):
    logger.error(f"Pricing failed on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": exc.message, "code": exc.code},
    )


@app.get("/metrics", tags=["monitoring"])
async def metrics():
    return Response(
        content=get_metrics_text(),
        media_type="text/plain; version=0.0.4; charset=utf-8"
    )


@app.get("/health", tags=["monitoring"])
async def health_check():
    return {
        "status": "healthy",
        "service": settings.API_TITLE,
        "version": settings.API_VERSION,
        "dependencies": {
            "cache": "connected" if get_redis() is not None else "disabled",
            "database": "configured",
        },
    }


@app.get("/", tags=["root"])
async def root():
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "endpoints": ["/quotes/estimate", "/quotes/estimate/packages", "/pricing-config"],
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics",
    }
