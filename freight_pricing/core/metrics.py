"""Prometheus metrics for the pricing service"""
from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry, generate_latest
import time
from functools import wraps
from typing import Callable

registry = CollectorRegistry()

# HTTP

request_count = Counter(
    'http_requests_total',
    'HTTP requests served, by route and status code',
    ['method', 'endpoint', 'status'],
    registry=registry
)

request_duration = Histogram(
    'http_request_duration_seconds',
    'Time spent serving an HTTP request',
    ['method', 'endpoint'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
    registry=registry
)

rate_limit_exceeded = Counter(
    'rate_limit_exceeded_total',
    'Requests refused because the client exceeded its window',
    ['client'],
    registry=registry
)

# Storage

db_operations = Counter(
    'db_operations_total',
    'Pricing table reads, by outcome',
    ['operation', 'table', 'status'],
    registry=registry
)

db_query_duration = Histogram(
    'db_query_duration_seconds',
    'Time spent on a single pricing table read',
    ['table', 'operation'],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.5, 1.0),
    registry=registry
)

cache_hits = Counter(
    'cache_hits_total',
    'Estimates answered from the Redis cache',
    ['cache_key'],
    registry=registry
)

cache_misses = Counter(
    'cache_misses_total',
    'Estimates not found in the Redis cache',
    ['cache_key'],
    registry=registry
)

# Estimates

quote_estimates = Counter(
    'quote_estimates_total',
    'Quote estimates computed or rejected',
    ['transport_mode', 'status'],
    registry=registry
)

quote_distance_fallbacks = Counter(
    'quote_distance_fallbacks_total',
    'Estimates priced on the default distance because the route distance is unknown',
    registry=registry
)

quote_default_rate = Counter(
    'quote_default_rate_total',
    'Estimates priced on the default rate because no route rate is configured',
    ['transport_mode'],
    registry=registry
)

# Dependencies

redis_connected = Gauge(
    'redis_connected',
    'Whether the estimate cache is reachable (1) or disabled (0)',
    registry=registry
)

db_connected = Gauge(
    'db_connected',
    'Whether the pricing database is reachable (1) or not (0)',
    registry=registry
)


def track_db_operation(operation: str, table: str):
    """Count and time an async repository read, labelled by outcome."""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            status = 'error'
            started = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
                status = 'success'
                return result
            finally:
                db_operations.labels(operation=operation, table=table, status=status).inc()
                db_query_duration.labels(table=table, operation=operation).observe(
                    time.perf_counter() - started
                )
        return wrapper
    return decorator


def get_metrics_text() -> str:
    return generate_latest(registry).decode('utf-8')
