"""Cost estimator.

Each breakdown line is computed independently, in a fixed order, from the
full-precision values of the lines before it:

    base_cost            = chargeable_weight * rate
    distance_factor      = base_cost * f(distance)
    transport_mode_cost  = (base_cost + distance_factor) * (multiplier - 1)
    cargo_type_surcharge = subtotal * cargo surcharge
    priority_surcharge   = subtotal * priority surcharge

where ``subtotal = base_cost + distance_factor + transport_mode_cost``.
Lines are rounded half-up to cents for display only; the total is the
full-precision sum rounded once. The cent or two by which the rounded lines
can disagree with the rounded total is added to ``base_cost``, so the
displayed ``base_cost`` may differ from ``round(chargeable_weight * rate)``
by that residual while the breakdown always sums to the total.
"""
import math
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Iterable, NamedTuple, Optional, Type

from freight_pricing.core.enums import CargoType, Priority, TransportMode
from freight_pricing.core.exceptions import QuoteValidationError
from freight_pricing.schemas.pricing_config import PricingConfiguration
from freight_pricing.schemas.quote import PriceBreakdown
from freight_pricing.services.pricing_config import DEFAULT_PRICING_CONFIG, lookup_with_default

D = Decimal
CENT = D("0.01")


class CostEstimate(NamedTuple):
    estimated_cost: float
    breakdown: PriceBreakdown
    subtotal: float


def round_money(value: float) -> Decimal:
    return D(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def require_positive(value: Any, field: str) -> float:
    if not _is_finite_number(value) or value <= 0:
        raise QuoteValidationError(f"{field} must be a positive number", field=field, value=value)
    return float(value)


def coerce_enum(enum_cls: Type[Enum], value: Any, field: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).upper())
    except ValueError:
        raise QuoteValidationError(f"Unknown {field}: {value!r}", field=field, value=value)


def select_transport_mode(modes: Optional[Iterable[Any]]) -> TransportMode:
    """The first selected mode prices the whole request."""
    modes = list(modes or [])
    if not modes:
        raise QuoteValidationError("At least one transport mode is required", field="transport_mode")
    return coerce_enum(TransportMode, modes[0], "transport_mode")


def distance_rate(distance_km: float, config: PricingConfiguration) -> float:
    """Fraction of base cost added for distance; linear so it never decreases."""
    return config.distance_rate_per_1000_km * distance_km / 1000


def estimate_cost(
    request,
    config: PricingConfiguration,
    chargeable_weight: float,
    distance_km: float,
    route_rate: Optional[float] = None,
) -> CostEstimate:
    require_positive(request.weight, "weight")
    mode = select_transport_mode(request.transport_mode)
    cargo_type = coerce_enum(CargoType, request.cargo_type, "cargo_type")
    priority = coerce_enum(Priority, request.priority or Priority.STANDARD, "priority")
    chargeable_weight = require_positive(chargeable_weight, "chargeable_weight")
    if not _is_finite_number(distance_km) or distance_km < 0:
        raise QuoteValidationError("distance_km must be a non-negative number", field="distance_km", value=distance_km)

    if route_rate is None:
        rate = config.default_rate_per_kg
    else:
        rate = require_positive(route_rate, "route_rate")

    multiplier = lookup_with_default(
        config.transport_multipliers, mode, DEFAULT_PRICING_CONFIG["transport_multipliers"][mode]
    )
    cargo_coefficient = lookup_with_default(
        config.cargo_type_surcharges, cargo_type, DEFAULT_PRICING_CONFIG["cargo_type_surcharges"][cargo_type]
    )
    priority_coefficient = lookup_with_default(
        config.priority_surcharges, priority, DEFAULT_PRICING_CONFIG["priority_surcharges"][priority]
    )

    base_cost = chargeable_weight * rate
    distance_factor = base_cost * distance_rate(distance_km, config)
    transport_mode_cost = (base_cost + distance_factor) * (multiplier - 1)
    subtotal = base_cost + distance_factor + transport_mode_cost
    cargo_type_surcharge = subtotal * cargo_coefficient
    priority_surcharge = subtotal * priority_coefficient
    total = subtotal + cargo_type_surcharge + priority_surcharge

    lines = [
        round_money(base_cost),
        round_money(distance_factor),
        round_money(transport_mode_cost),
        round_money(cargo_type_surcharge),
        round_money(priority_surcharge),
    ]
    estimated_cost = round_money(total)
    # cents lost to per-line rounding go on the base cost line
    lines[0] += estimated_cost - sum(lines)

    breakdown = PriceBreakdown(
        base_cost=float(lines[0]),
        distance_factor=float(lines[1]),
        transport_mode_cost=float(lines[2]),
        cargo_type_surcharge=float(lines[3]),
        priority_surcharge=float(lines[4]),
    )
    return CostEstimate(float(estimated_cost), breakdown, subtotal)
