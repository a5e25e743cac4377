import logging
from typing import Mapping, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)

# Used when neither the distance table nor the built-in table knows the pair.
DEFAULT_DISTANCE_KM = 1000.0
DOMESTIC_DISTANCE_KM = 100.0

DistanceTable = Mapping[Tuple[str, str], float]

DEFAULT_COUNTRY_DISTANCES = {
    "FR": {"DE": 800, "ES": 1000, "IT": 1100, "BE": 300, "NL": 500, "GB": 450, "PL": 1500, "CN": 8200, "US": 6200, "IN": 7000},
    "DE": {"FR": 800, "ES": 1800, "IT": 1200, "BE": 700, "NL": 600, "GB": 900, "PL": 600, "CN": 7500, "US": 6500, "IN": 6500},
    "ES": {"FR": 1000, "DE": 1800, "IT": 1400, "BE": 1300, "NL": 1500, "GB": 1300, "PL": 2500, "CN": 10500, "US": 6500, "IN": 8500},
    "IT": {"FR": 1100, "DE": 1200, "ES": 1400, "BE": 1200, "NL": 1300, "GB": 1600, "PL": 1300, "CN": 8000, "US": 7000, "IN": 6000},
    "BE": {"FR": 300, "DE": 700, "ES": 1300, "IT": 1200, "NL": 200, "GB": 400, "PL": 1200, "CN": 8000, "US": 6200, "IN": 7200},
    "NL": {"FR": 500, "DE": 600, "ES": 1500, "IT": 1300, "BE": 200, "GB": 500, "PL": 1100, "CN": 7800, "US": 6000, "IN": 7000},
    "GB": {"FR": 450, "DE": 900, "ES": 1300, "IT": 1600, "BE": 400, "NL": 500, "PL": 1700, "CN": 8500, "US": 5500, "IN": 7500},
    "PL": {"FR": 1500, "DE": 600, "ES": 2500, "IT": 1300, "BE": 1200, "NL": 1100, "GB": 1700, "CN": 7000, "US": 7500, "IN": 6000},
    "CN": {"FR": 8200, "DE": 7500, "ES": 10500, "IT": 8000, "BE": 8000, "NL": 7800, "GB": 8500, "PL": 7000, "US": 11000, "IN": 3800},
    "US": {"FR": 6200, "DE": 6500, "ES": 6500, "IT": 7000, "BE": 6200, "NL": 6000, "GB": 5500, "PL": 7500, "CN": 11000, "IN": 13000},
    "IN": {"FR": 7000, "DE": 6500, "ES": 8500, "IT": 6000, "BE": 7200, "NL": 7000, "GB": 7500, "PL": 6000, "CN": 3800, "US": 13000},
}


class DistanceResolution(NamedTuple):
    distance_km: float
    estimated: bool


def _usable(distance: Optional[float]) -> bool:
    return distance is not None and distance > 0


def resolve_distance(
    origin: str,
    destination: str,
    distances: Optional[DistanceTable] = None,
    default_km: float = DEFAULT_DISTANCE_KM,
) -> DistanceResolution:
    """Directional distance lookup; the reverse pair is never consulted."""
    origin = origin.upper()
    destination = destination.upper()

    if origin == destination:
        return DistanceResolution(DOMESTIC_DISTANCE_KM, False)

    if distances:
        stored = distances.get((origin, destination))
        if _usable(stored):
            return DistanceResolution(float(stored), False)

    built_in = DEFAULT_COUNTRY_DISTANCES.get(origin, {}).get(destination)
    if _usable(built_in):
        return DistanceResolution(float(built_in), False)

    logger.warning(f"No distance known for {origin} -> {destination}, using default {default_km} km")
    return DistanceResolution(default_km, True)


def resolve_distance_km(
    origin: str,
    destination: str,
    distances: Optional[DistanceTable] = None,
    default_km: float = DEFAULT_DISTANCE_KM,
) -> float:
    return resolve_distance(origin, destination, distances, default_km).distance_km
