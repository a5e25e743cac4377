"""Estimate orchestration: wires the calculators together for one request.

Everything here is pure. Configuration, distance rows and the route rate are
loaded by the caller and passed in as plain data.
"""
import math
from decimal import Decimal
from typing import Any, List, Optional

from freight_pricing.core.enums import CargoType, Priority, QuoteNotice, TransportMode
from freight_pricing.core.exceptions import QuoteValidationError
from freight_pricing.schemas.pricing_config import PricingConfiguration
from freight_pricing.schemas.quote import (
    Dimensions,
    MultiPackageEstimateRequest,
    MultiPackageEstimateResult,
    PackageLineResult,
    QuoteEstimateRequest,
    QuoteEstimateResult,
    normalise_country,
)
from freight_pricing.services.delivery import DELIVERY_REFERENCE_DISTANCE_KM, estimate_delivery_days
from freight_pricing.services.distance import DEFAULT_DISTANCE_KM, DistanceTable, resolve_distance
from freight_pricing.services.pricing import (
    coerce_enum,
    estimate_cost,
    require_positive,
    round_money,
    select_transport_mode,
)
from freight_pricing.services.pricing_config import DEFAULT_PRICING_CONFIG, lookup_with_default
from freight_pricing.services.volumetric import (
    chargeable_weight,
    compute_volume_m3,
    is_billed_on_volume,
    payable_units,
)

D = Decimal


def require_country(value: Any, field: str) -> str:
    try:
        return normalise_country(value)
    except ValueError:
        raise QuoteValidationError(f"{field} must be an ISO 3166-1 alpha-2 code", field=field, value=value)


def check_dimensions(dims: Optional[Dimensions]) -> None:
    if dims is None:
        return
    for name in ("length", "width", "height"):
        side = getattr(dims, name)
        if isinstance(side, bool) or not isinstance(side, (int, float)) or not math.isfinite(side):
            raise QuoteValidationError(f"{name} must be a finite number", field=name, value=side)


def build_notices(
    mode: TransportMode,
    cargo_types: List[CargoType],
    billed_on_volume: bool,
    distance_estimated: bool,
    default_rate: bool,
) -> List[QuoteNotice]:
    notices = []
    if billed_on_volume:
        notices.append(QuoteNotice.BILLED_ON_VOLUME)
    if mode == TransportMode.SEA:
        notices.append(QuoteNotice.MARITIME_PAYABLE_UNIT)
    if distance_estimated:
        notices.append(QuoteNotice.ESTIMATED_DISTANCE)
    if default_rate:
        notices.append(QuoteNotice.DEFAULT_RATE)
    if CargoType.DANGEROUS in cargo_types:
        notices.append(QuoteNotice.DANGEROUS_GOODS)
    if CargoType.PERISHABLE in cargo_types:
        notices.append(QuoteNotice.PERISHABLE_GOODS)
    return notices


def estimate_quote(
    request: QuoteEstimateRequest,
    config: PricingConfiguration,
    distances: Optional[DistanceTable] = None,
    route_rate: Optional[float] = None,
    default_distance_km: float = DEFAULT_DISTANCE_KM,
    delivery_reference_km: float = DELIVERY_REFERENCE_DISTANCE_KM,
    currency: str = "EUR",
) -> QuoteEstimateResult:
    mode = select_transport_mode(request.transport_mode)
    weight = require_positive(request.weight, "weight")
    cargo_type = coerce_enum(CargoType, request.cargo_type, "cargo_type")
    origin = require_country(request.origin_country, "origin_country")
    destination = require_country(request.destination_country, "destination_country")
    dims = request.dimensions
    check_dimensions(dims)

    weight_billed = chargeable_weight(mode, weight, dims, config)
    resolution = resolve_distance(origin, destination, distances, default_distance_km)
    cost = estimate_cost(request, config, weight_billed, resolution.distance_km, route_rate)
    days = estimate_delivery_days(
        mode,
        resolution.distance_km,
        config,
        estimated=resolution.estimated,
        reference_km=delivery_reference_km,
    )

    volume = compute_volume_m3(dims)
    return QuoteEstimateResult(
        estimated_cost=cost.estimated_cost,
        estimated_delivery_days=days,
        breakdown=cost.breakdown,
        currency=currency,
        transport_mode=mode,
        chargeable_weight=float(round_money(weight_billed)),
        volume_m3=None if volume is None else round(volume, 3),
        payable_units=round(payable_units(weight, dims), 3) if mode == TransportMode.SEA else None,
        distance_km=resolution.distance_km,
        notices=build_notices(
            mode,
            [cargo_type],
            is_billed_on_volume(mode, weight, dims, config),
            resolution.estimated,
            route_rate is None,
        ),
    )


def estimate_packages(
    request: MultiPackageEstimateRequest,
    config: PricingConfiguration,
    distances: Optional[DistanceTable] = None,
    route_rate: Optional[float] = None,
    default_distance_km: float = DEFAULT_DISTANCE_KM,
    delivery_reference_km: float = DELIVERY_REFERENCE_DISTANCE_KM,
    currency: str = "EUR",
) -> MultiPackageEstimateResult:
    """Price every package at standard priority, then apply priority once on the sum."""
    mode = select_transport_mode(request.transport_mode)
    priority = coerce_enum(Priority, request.priority or Priority.STANDARD, "priority")
    origin = require_country(request.origin_country, "origin_country")
    destination = require_country(request.destination_country, "destination_country")
    if not request.packages:
        raise QuoteValidationError("At least one package is required", field="packages")

    resolution = resolve_distance(origin, destination, distances, default_distance_km)

    lines = []
    cargo_counts = {}
    total_before_priority = D("0")
    priority_base = 0.0
    total_weight = 0.0
    total_count = 0
    billed_on_volume = False

    for package in request.packages:
        quantity = package.quantity
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise QuoteValidationError("quantity must be a positive integer", field="quantity", value=quantity)
        weight = require_positive(package.weight, "weight")
        cargo_type = coerce_enum(CargoType, package.cargo_type, "cargo_type")
        dims = package.dimensions
        check_dimensions(dims)

        line_request = QuoteEstimateRequest.model_construct(
            origin_country=origin,
            destination_country=destination,
            cargo_type=cargo_type,
            weight=weight,
            transport_mode=[mode],
            priority=Priority.STANDARD,
        )
        weight_billed = chargeable_weight(mode, weight, dims, config)
        cost = estimate_cost(line_request, config, weight_billed, resolution.distance_km, route_rate)

        unit_price = D(str(cost.estimated_cost))
        line_total = unit_price * quantity
        lines.append(PackageLineResult(
            description=package.description,
            quantity=quantity,
            cargo_type=cargo_type,
            weight=weight,
            chargeable_weight=float(round_money(weight_billed)),
            unit_price=float(unit_price),
            line_total=float(line_total),
            breakdown=cost.breakdown,
        ))

        total_before_priority += line_total
        priority_base += cost.subtotal * quantity
        total_weight += weight * quantity
        total_count += quantity
        cargo_counts[cargo_type] = cargo_counts.get(cargo_type, 0) + quantity
        billed_on_volume = billed_on_volume or is_billed_on_volume(mode, weight, dims, config)

    priority_coefficient = lookup_with_default(
        config.priority_surcharges, priority, DEFAULT_PRICING_CONFIG["priority_surcharges"][priority]
    )
    priority_surcharge = round_money(priority_base * priority_coefficient)
    days = estimate_delivery_days(
        mode,
        resolution.distance_km,
        config,
        estimated=resolution.estimated,
        reference_km=delivery_reference_km,
    )

    return MultiPackageEstimateResult(
        lines=lines,
        total_package_count=total_count,
        total_weight=float(round_money(total_weight)),
        total_before_priority=float(total_before_priority),
        priority_surcharge=float(priority_surcharge),
        estimated_cost=float(total_before_priority + priority_surcharge),
        estimated_delivery_days=days,
        dominant_cargo_type=max(cargo_counts, key=cargo_counts.get),
        currency=currency,
        transport_mode=mode,
        distance_km=resolution.distance_km,
        notices=build_notices(
            mode,
            list(cargo_counts),
            billed_on_volume,
            resolution.estimated,
            route_rate is None,
        ),
    )
