import pytest

from freight_pricing.core.enums import TransportMode
from freight_pricing.schemas.quote import Dimensions
from freight_pricing.services.pricing_config import resolve_config
from freight_pricing.services.volumetric import (
    chargeable_weight,
    compute_volume_m3,
    is_billed_on_volume,
    payable_units,
    uses_volumetric_weight,
    volumetric_weight,
)


def dims(length, width, height):
    return Dimensions.model_construct(length=length, width=width, height=height)


@pytest.mark.pricing
class TestChargeableWeight:

    def test_air_light_bulky_cargo(self, pricing_config):
        """One cubic metre on air weighs 167 kg for billing"""
        weight = chargeable_weight(TransportMode.AIR, 100.0, dims(100, 100, 100), pricing_config)

        assert weight == pytest.approx(167.0)
        assert is_billed_on_volume(TransportMode.AIR, 100.0, dims(100, 100, 100), pricing_config)

    def test_sea_ignores_volume(self, pricing_config):
        weight = chargeable_weight(TransportMode.SEA, 5000.0, dims(1000, 1000, 1000), pricing_config)

        assert weight == 5000.0
        assert not is_billed_on_volume(TransportMode.SEA, 5000.0, dims(1000, 1000, 1000), pricing_config)

    def test_sea_ignores_volume_even_when_enabled(self):
        config = resolve_config({"use_volumetric_weight_per_mode": {"SEA": True}})

        assert not uses_volumetric_weight(TransportMode.SEA, config)
        assert chargeable_weight(TransportMode.SEA, 10.0, dims(500, 500, 500), config) == 10.0

    def test_dense_cargo_uses_real_weight(self, pricing_config):
        # 0.06 m3 on road is 19.98 kg volumetric
        weight = chargeable_weight(TransportMode.ROAD, 500.0, dims(50, 40, 30), pricing_config)

        assert weight == 500.0

    def test_road_and_rail_ratios(self, pricing_config):
        cube = dims(100, 100, 100)

        assert volumetric_weight(TransportMode.ROAD, cube, pricing_config) == pytest.approx(333.0)
        assert volumetric_weight(TransportMode.RAIL, cube, pricing_config) == pytest.approx(250.0)

    def test_disabled_mode_uses_real_weight(self):
        config = resolve_config({"use_volumetric_weight_per_mode": {"ROAD": False}})

        assert chargeable_weight(TransportMode.ROAD, 10.0, dims(200, 200, 200), config) == 10.0

    def test_custom_ratio(self):
        config = resolve_config({"volumetric_weight_ratios": {"AIR": 200}})

        assert chargeable_weight(TransportMode.AIR, 1.0, dims(100, 100, 100), config) == pytest.approx(200.0)

    def test_without_dimensions(self, pricing_config):
        assert chargeable_weight(TransportMode.AIR, 42.0, None, pricing_config) == 42.0

    @pytest.mark.parametrize("bad", [
        (0, 100, 100),
        (100, -1, 100),
        (100, 100, None),
    ])
    def test_unusable_dimensions_bill_real_weight(self, pricing_config, bad):
        assert chargeable_weight(TransportMode.AIR, 42.0, dims(*bad), pricing_config) == 42.0

    @pytest.mark.parametrize("mode", list(TransportMode))
    def test_never_below_real_weight(self, pricing_config, mode):
        for size in (1, 10, 50, 120, 300):
            box = dims(size, size, size)
            assert chargeable_weight(mode, 75.0, box, pricing_config) >= 75.0


@pytest.mark.unit
class TestVolume:

    def test_volume_in_cubic_metres(self):
        assert compute_volume_m3(dims(50, 40, 30)) == pytest.approx(0.06)

    def test_no_volume_without_dimensions(self):
        assert compute_volume_m3(None) is None
        assert compute_volume_m3(dims(10, 0, 10)) is None
        assert compute_volume_m3(dims(10, float("nan"), 10)) is None

    def test_payable_units_measure(self):
        assert payable_units(5000.0, dims(1000, 1000, 1000)) == pytest.approx(1000.0)

    def test_payable_units_weight(self):
        assert payable_units(3000.0, dims(100, 100, 100)) == pytest.approx(3.0)

    def test_payable_units_without_dimensions(self):
        assert payable_units(2500.0, None) == pytest.approx(2.5)
