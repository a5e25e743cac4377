"""Resolve the active pricing configuration, filling gaps from defaults.

Persisted configuration rows are edited field by field from the admin
settings screen, so any of them may be missing a key, carry a key for a mode
that no longer exists, or hold a value outside the accepted range. The
resolver never fails on such data: each entry is validated on its own and
replaced by the default when unusable, so the engine always receives a
complete ``PricingConfiguration``.
"""
import copy
import logging
import math
from enum import Enum
from typing import Any, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import ValidationError

from freight_pricing.core.enums import CargoType, Priority, TransportMode
from freight_pricing.schemas.pricing_config import DeliverySpeed, PricingConfiguration

logger = logging.getLogger(__name__)

V = TypeVar("V")

DEFAULT_PRICING_CONFIG = {
    "base_rate_per_kg": 0.5,
    "default_rate_per_kg": 1.0,
    "default_rate_per_m3": 200.0,
    "distance_rate_per_1000_km": 0.1,
    "transport_multipliers": {
        TransportMode.ROAD: 1.0,
        TransportMode.SEA: 0.6,
        TransportMode.AIR: 3.0,
        TransportMode.RAIL: 0.8,
    },
    "cargo_type_surcharges": {
        CargoType.GENERAL: 0.0,
        CargoType.DANGEROUS: 0.5,
        CargoType.PERISHABLE: 0.4,
        CargoType.FRAGILE: 0.3,
        CargoType.BULK: -0.1,
        CargoType.CONTAINER: 0.2,
        CargoType.PALLETIZED: 0.15,
        CargoType.OTHER: 0.1,
    },
    "priority_surcharges": {
        Priority.STANDARD: 0.0,
        Priority.NORMAL: 0.1,
        Priority.EXPRESS: 0.5,
        Priority.URGENT: 0.3,
    },
    # kg per m3; SEA is billed by payable unit, its ratio is never applied
    "volumetric_weight_ratios": {
        TransportMode.AIR: 167.0,
        TransportMode.ROAD: 333.0,
        TransportMode.RAIL: 250.0,
        TransportMode.SEA: 1.0,
    },
    "use_volumetric_weight_per_mode": {
        TransportMode.AIR: True,
        TransportMode.ROAD: True,
        TransportMode.RAIL: True,
        TransportMode.SEA: False,
    },
    "delivery_speeds_per_mode": {
        TransportMode.ROAD: {"min": 3, "max": 7},
        TransportMode.SEA: {"min": 20, "max": 45},
        TransportMode.AIR: {"min": 1, "max": 3},
        TransportMode.RAIL: {"min": 7, "max": 14},
    },
}

SCALAR_BOUNDS = {
    "base_rate_per_kg": (0.01, 100.0),
    "default_rate_per_kg": (0.01, 100.0),
    "default_rate_per_m3": (1.0, 10000.0),
    "distance_rate_per_1000_km": (0.0, 10.0),
}

NUMERIC_MAP_FIELDS = {
    "transport_multipliers": (TransportMode, (0.1, 10.0)),
    "cargo_type_surcharges": (CargoType, (-1.0, 5.0)),
    "priority_surcharges": (Priority, (-1.0, 5.0)),
    "volumetric_weight_ratios": (TransportMode, (0.1, 1000.0)),
}


def lookup_with_default(mapping: Optional[Mapping[Any, V]], key: Any, default: V) -> V:
    """Total map accessor: a missing mapping, key or ``None`` value yields ``default``."""
    if mapping is None:
        return default
    value = mapping.get(key)
    return default if value is None else value


def _coerce_key(enum_cls: Type[Enum], key: Any) -> Optional[Enum]:
    if isinstance(key, enum_cls):
        return key
    try:
        return enum_cls(str(key).strip().upper())
    except ValueError:
        return None


def _is_number_in(value: Any, bounds: Tuple[float, float]) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if not math.isfinite(value):
        return False
    low, high = bounds
    return low <= value <= high


def _resolve_scalar(record: Mapping[str, Any], name: str) -> float:
    default = DEFAULT_PRICING_CONFIG[name]
    value = record.get(name)
    if value is None:
        logger.debug(f"Pricing config field {name} unset, using default {default}")
        return default
    if not _is_number_in(value, SCALAR_BOUNDS[name]):
        logger.warning(f"Pricing config field {name}={value!r} out of range, using default {default}")
        return default
    return float(value)


def _persisted_entries(record: Mapping[str, Any], name: str, enum_cls: Type[Enum]) -> dict:
    raw = record.get(name)
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        logger.warning(f"Pricing config field {name} is not a mapping, using defaults")
        return {}

    entries = {}
    for key, value in raw.items():
        member = _coerce_key(enum_cls, key)
        if member is None:
            logger.warning(f"Pricing config field {name} has unknown key {key!r}, ignoring it")
            continue
        entries[member] = value
    return entries


def _resolve_numeric_map(record: Mapping[str, Any], name: str) -> dict:
    enum_cls, bounds = NUMERIC_MAP_FIELDS[name]
    entries = _persisted_entries(record, name, enum_cls)
    resolved = {}
    for member in enum_cls:
        default = DEFAULT_PRICING_CONFIG[name][member]
        value = entries.get(member)
        if value is None:
            resolved[member] = default
        elif _is_number_in(value, bounds):
            resolved[member] = float(value)
        else:
            logger.warning(f"Pricing config {name}[{member}]={value!r} out of range, using default {default}")
            resolved[member] = default
    return resolved


def _resolve_flags(record: Mapping[str, Any]) -> dict:
    name = "use_volumetric_weight_per_mode"
    entries = _persisted_entries(record, name, TransportMode)
    resolved = {}
    for mode in TransportMode:
        value = entries.get(mode)
        resolved[mode] = value if isinstance(value, bool) else DEFAULT_PRICING_CONFIG[name][mode]
    return resolved


def _resolve_delivery_speeds(record: Mapping[str, Any]) -> dict:
    name = "delivery_speeds_per_mode"
    entries = _persisted_entries(record, name, TransportMode)
    resolved = {}
    for mode in TransportMode:
        default = DeliverySpeed(**DEFAULT_PRICING_CONFIG[name][mode])
        value = entries.get(mode)
        if value is None:
            resolved[mode] = default
            continue
        try:
            resolved[mode] = value if isinstance(value, DeliverySpeed) else DeliverySpeed.model_validate(value)
        except ValidationError:
            logger.warning(f"Pricing config {name}[{mode}]={value!r} invalid, using default")
            resolved[mode] = default
    return resolved


def default_config() -> PricingConfiguration:
    return resolve_config(None)


def resolve_config(record: Optional[Mapping[str, Any]] = None) -> PricingConfiguration:
    """Merge a persisted configuration record over the defaults.

    ``record`` is a plain mapping of column name to value (the JSON maps keyed
    by enum name). ``None`` means no configuration has been saved yet.
    """
    if record is None:
        record = {}
    else:
        record = copy.deepcopy(dict(record))

    return PricingConfiguration(
        base_rate_per_kg=_resolve_scalar(record, "base_rate_per_kg"),
        default_rate_per_kg=_resolve_scalar(record, "default_rate_per_kg"),
        default_rate_per_m3=_resolve_scalar(record, "default_rate_per_m3"),
        distance_rate_per_1000_km=_resolve_scalar(record, "distance_rate_per_1000_km"),
        transport_multipliers=_resolve_numeric_map(record, "transport_multipliers"),
        cargo_type_surcharges=_resolve_numeric_map(record, "cargo_type_surcharges"),
        priority_surcharges=_resolve_numeric_map(record, "priority_surcharges"),
        volumetric_weight_ratios=_resolve_numeric_map(record, "volumetric_weight_ratios"),
        use_volumetric_weight_per_mode=_resolve_flags(record),
        delivery_speeds_per_mode=_resolve_delivery_speeds(record),
    )
