import logging

from freight_pricing.core.config import Settings, settings as default_settings
from freight_pricing.core.enums import QuoteNotice
from freight_pricing.core.exceptions import QuoteValidationError
from freight_pricing.core.metrics import quote_default_rate, quote_distance_fallbacks, quote_estimates
from freight_pricing.schemas.quote import (
    MultiPackageEstimateRequest,
    MultiPackageEstimateResult,
    QuoteEstimateRequest,
    QuoteEstimateResult,
)
from freight_pricing.services.estimator import estimate_packages, estimate_quote
from freight_pricing.services.pricing import select_transport_mode

logger = logging.getLogger(__name__)


class QuoteService:

    def __init__(self, repository, settings: Settings = default_settings):
        self.repository = repository
        self.settings = settings

    async def _load(self, origin: str, destination: str, mode):
        config = await self.repository.get_pricing_config()
        distances = await self.repository.get_distances(origin, destination)
        route_rate = await self.repository.get_route_rate(origin, destination, mode)
        return config, distances, route_rate

    def _engine_options(self) -> dict:
        return {
            "default_distance_km": self.settings.DEFAULT_DISTANCE_KM,
            "delivery_reference_km": self.settings.DELIVERY_REFERENCE_DISTANCE_KM,
            "currency": self.settings.CURRENCY,
        }

    def _record(self, mode, notices) -> None:
        quote_estimates.labels(transport_mode=str(mode), status="ok").inc()
        if QuoteNotice.ESTIMATED_DISTANCE in notices:
            quote_distance_fallbacks.inc()
        if QuoteNotice.DEFAULT_RATE in notices:
            quote_default_rate.labels(transport_mode=str(mode)).inc()

    async def estimate(self, request: QuoteEstimateRequest) -> QuoteEstimateResult:
        try:
            mode = select_transport_mode(request.transport_mode)
            config, distances, route_rate = await self._load(
                request.origin_country, request.destination_country, mode
            )
            result = estimate_quote(request, config, distances, route_rate, **self._engine_options())
        except QuoteValidationError as e:
            logger.warning(f"Quote estimate rejected: {e}")
            quote_estimates.labels(transport_mode="unknown", status="rejected").inc()
            raise

        self._record(result.transport_mode, result.notices)
        logger.info(
            f"Estimated {request.origin_country} -> {request.destination_country} "
            f"({result.transport_mode}): {result.estimated_cost} {result.currency}, "
            f"{result.estimated_delivery_days} days, notices={[str(n) for n in result.notices]}"
        )
        return result

    async def estimate_packages(self, request: MultiPackageEstimateRequest) -> MultiPackageEstimateResult:
        try:
            mode = select_transport_mode(request.transport_mode)
            config, distances, route_rate = await self._load(
                request.origin_country, request.destination_country, mode
            )
            result = estimate_packages(request, config, distances, route_rate, **self._engine_options())
        except QuoteValidationError as e:
            logger.warning(f"Multi-package estimate rejected: {e}")
            quote_estimates.labels(transport_mode="unknown", status="rejected").inc()
            raise

        self._record(result.transport_mode, result.notices)
        logger.info(
            f"Estimated {result.total_package_count} packages {request.origin_country} -> "
            f"{request.destination_country} ({result.transport_mode}): "
            f"{result.estimated_cost} {result.currency}"
        )
        return result
