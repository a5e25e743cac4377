"""Chargeable weight rules.

Low-density cargo is billed on the greater of its real weight and a
weight-equivalent derived from its volume. Maritime freight is exempt: it is
billed by payable unit (weight-or-measure), so its chargeable weight is
always the real weight.
"""
import logging
import math
from typing import Optional

from freight_pricing.core.enums import TransportMode
from freight_pricing.schemas.pricing_config import PricingConfiguration
from freight_pricing.schemas.quote import Dimensions
from freight_pricing.services.pricing_config import DEFAULT_PRICING_CONFIG, lookup_with_default

logger = logging.getLogger(__name__)

CM3_PER_M3 = 1_000_000
KG_PER_TONNE = 1000


def valid_dimensions(dims: Optional[Dimensions]) -> bool:
    if dims is None:
        return False
    for side in (dims.length, dims.width, dims.height):
        if side is None or not math.isfinite(side) or side <= 0:
            return False
    return True


def compute_volume_m3(dims: Optional[Dimensions]) -> Optional[float]:
    """Volume in m3 from dimensions in cm, ``None`` when it cannot be computed."""
    if not valid_dimensions(dims):
        return None
    return (dims.length * dims.width * dims.height) / CM3_PER_M3


def uses_volumetric_weight(mode: TransportMode, config: PricingConfiguration) -> bool:
    if mode == TransportMode.SEA:
        return False
    return lookup_with_default(
        config.use_volumetric_weight_per_mode,
        mode,
        DEFAULT_PRICING_CONFIG["use_volumetric_weight_per_mode"][mode],
    )


def volumetric_weight(mode: TransportMode, dims: Optional[Dimensions], config: PricingConfiguration) -> float:
    volume = compute_volume_m3(dims)
    if volume is None or not uses_volumetric_weight(mode, config):
        return 0.0
    ratio = lookup_with_default(
        config.volumetric_weight_ratios,
        mode,
        DEFAULT_PRICING_CONFIG["volumetric_weight_ratios"][mode],
    )
    return volume * ratio


def chargeable_weight(
    mode: TransportMode,
    real_weight_kg: float,
    dims: Optional[Dimensions],
    config: PricingConfiguration,
) -> float:
    if dims is not None and not valid_dimensions(dims):
        logger.debug(f"Ignoring unusable dimensions {dims!r}, billing on real weight")
    return max(real_weight_kg, volumetric_weight(mode, dims, config))


def is_billed_on_volume(
    mode: TransportMode,
    real_weight_kg: float,
    dims: Optional[Dimensions],
    config: PricingConfiguration,
) -> bool:
    return volumetric_weight(mode, dims, config) > real_weight_kg


def payable_units(real_weight_kg: float, dims: Optional[Dimensions]) -> float:
    """Maritime weight-or-measure: the greater of tonnes and cubic metres."""
    tonnes = real_weight_kg / KG_PER_TONNE
    volume = compute_volume_m3(dims)
    if volume is None:
        return tonnes
    return max(tonnes, volume)
