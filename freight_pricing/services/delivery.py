import math
from typing import Optional

from freight_pricing.core.enums import TransportMode
from freight_pricing.schemas.pricing_config import DeliverySpeed, PricingConfiguration
from freight_pricing.services.pricing_config import DEFAULT_PRICING_CONFIG, lookup_with_default

# Distance at which a shipment is expected to take the slowest time of its range.
DELIVERY_REFERENCE_DISTANCE_KM = 15000.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def delivery_speed(mode: TransportMode, config: PricingConfiguration) -> DeliverySpeed:
    return lookup_with_default(
        config.delivery_speeds_per_mode,
        mode,
        DeliverySpeed(**DEFAULT_PRICING_CONFIG["delivery_speeds_per_mode"][mode]),
    )


def estimate_delivery_days(
    mode: TransportMode,
    distance_km: Optional[float],
    config: PricingConfiguration,
    estimated: bool = False,
    reference_km: float = DELIVERY_REFERENCE_DISTANCE_KM,
) -> int:
    """Whole days within the mode's configured range.

    A defaulted distance carries no information about where in the range the
    shipment falls, so the midpoint is used instead.
    """
    speed = delivery_speed(mode, config)

    if estimated or distance_km is None or not math.isfinite(distance_km):
        days = _round_half_up((speed.min + speed.max) / 2)
    else:
        position = min(max(distance_km, 0.0) / reference_km, 1.0)
        days = _round_half_up(speed.min + (speed.max - speed.min) * position)

    return min(max(days, speed.min), speed.max)
