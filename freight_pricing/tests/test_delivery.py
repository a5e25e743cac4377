import pytest

from freight_pricing.core.enums import TransportMode
from freight_pricing.services.delivery import delivery_speed, estimate_delivery_days
from freight_pricing.services.pricing_config import resolve_config


@pytest.mark.unit
class TestDeliveryDays:

    @pytest.mark.parametrize("mode,distance,expected", [
        (TransportMode.AIR, 0.0, 1),
        (TransportMode.AIR, 7500.0, 2),
        (TransportMode.AIR, 15000.0, 3),
        (TransportMode.ROAD, 500.0, 3),
        (TransportMode.RAIL, 7500.0, 11),
        (TransportMode.SEA, 15000.0, 45),
    ])
    def test_interpolates_over_range(self, pricing_config, mode, distance, expected):
        assert estimate_delivery_days(mode, distance, pricing_config) == expected

    def test_far_routes_are_clamped(self, pricing_config):
        assert estimate_delivery_days(TransportMode.ROAD, 30000.0, pricing_config) == 7

    def test_estimated_distance_uses_midpoint(self, pricing_config):
        # (20 + 45) / 2 = 32.5, rounded half up
        assert estimate_delivery_days(TransportMode.SEA, 1000.0, pricing_config, estimated=True) == 33

    def test_missing_distance_uses_midpoint(self, pricing_config):
        assert estimate_delivery_days(TransportMode.ROAD, None, pricing_config) == 5

    @pytest.mark.parametrize("mode", list(TransportMode))
    def test_always_within_range(self, pricing_config, mode):
        speed = delivery_speed(mode, pricing_config)
        for distance in (0.0, 1.0, 999.0, 8000.0, 15000.0, 100000.0):
            days = estimate_delivery_days(mode, distance, pricing_config)
            assert speed.min <= days <= speed.max

    def test_custom_reference_distance(self, pricing_config):
        assert estimate_delivery_days(TransportMode.AIR, 1000.0, pricing_config, reference_km=1000.0) == 3

    def test_configured_speed(self):
        config = resolve_config({"delivery_speeds_per_mode": {"AIR": {"min": 2, "max": 2}}})

        assert estimate_delivery_days(TransportMode.AIR, 12000.0, config) == 2
