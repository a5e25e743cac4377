import pytest

from freight_pricing.core.enums import CargoType, Priority, TransportMode
from freight_pricing.schemas.pricing_config import DeliverySpeed
from freight_pricing.services.pricing_config import (
    DEFAULT_PRICING_CONFIG,
    default_config,
    lookup_with_default,
    resolve_config,
)


@pytest.mark.unit
class TestDefaults:

    def test_no_record_gives_complete_defaults(self):
        config = resolve_config(None)

        assert config.default_rate_per_kg == 1.0
        assert config.default_rate_per_m3 == 200.0
        assert set(config.transport_multipliers) == set(TransportMode)
        assert set(config.cargo_type_surcharges) == set(CargoType)
        assert set(config.priority_surcharges) == set(Priority)
        assert set(config.volumetric_weight_ratios) == set(TransportMode)
        assert set(config.use_volumetric_weight_per_mode) == set(TransportMode)
        assert set(config.delivery_speeds_per_mode) == set(TransportMode)

    def test_documented_default_values(self):
        config = default_config()

        assert config.transport_multipliers == {
            TransportMode.ROAD: 1.0,
            TransportMode.SEA: 0.6,
            TransportMode.AIR: 3.0,
            TransportMode.RAIL: 0.8,
        }
        assert config.volumetric_weight_ratios[TransportMode.AIR] == 167
        assert config.volumetric_weight_ratios[TransportMode.ROAD] == 333
        assert config.volumetric_weight_ratios[TransportMode.RAIL] == 250
        assert config.use_volumetric_weight_per_mode[TransportMode.SEA] is False
        assert config.cargo_type_surcharges[CargoType.BULK] == -0.1
        assert config.priority_surcharges[Priority.URGENT] == 0.3
        assert config.delivery_speeds_per_mode[TransportMode.SEA] == DeliverySpeed(min=20, max=45)

    def test_empty_record_equals_defaults(self):
        assert resolve_config({}) == default_config()

    def test_defaults_are_not_shared(self):
        first = default_config()
        first.transport_multipliers[TransportMode.AIR] = 9.0

        assert default_config().transport_multipliers[TransportMode.AIR] == 3.0
        assert DEFAULT_PRICING_CONFIG["transport_multipliers"][TransportMode.AIR] == 3.0


@pytest.mark.unit
class TestMerge:

    def test_partial_map_is_filled_from_defaults(self):
        config = resolve_config({"transport_multipliers": {"AIR": 2.5}})

        assert config.transport_multipliers[TransportMode.AIR] == 2.5
        assert config.transport_multipliers[TransportMode.ROAD] == 1.0
        assert config.transport_multipliers[TransportMode.SEA] == 0.6

    def test_record_missing_a_priority_level(self):
        record = {"priority_surcharges": {"STANDARD": 0, "EXPRESS": 0.5, "URGENT": 1.0}}
        config = resolve_config(record)

        assert config.priority_surcharges[Priority.NORMAL] == 0.1
        assert config.priority_surcharges[Priority.URGENT] == 1.0

    def test_keys_are_case_insensitive(self):
        config = resolve_config({"cargo_type_surcharges": {"fragile": 0.45}})

        assert config.cargo_type_surcharges[CargoType.FRAGILE] == 0.45

    def test_enum_keys_are_accepted(self):
        config = resolve_config({"volumetric_weight_ratios": {TransportMode.ROAD: 300}})

        assert config.volumetric_weight_ratios[TransportMode.ROAD] == 300.0

    def test_unknown_keys_are_ignored(self):
        config = resolve_config({"transport_multipliers": {"SPACE": 12.0, "RAIL": 0.9}})

        assert TransportMode.RAIL in config.transport_multipliers
        assert config.transport_multipliers[TransportMode.RAIL] == 0.9
        assert len(config.transport_multipliers) == len(TransportMode)

    @pytest.mark.parametrize("value", [50, 0.0, -1, float("nan"), float("inf"), "3.0", True, None])
    def test_unusable_multiplier_falls_back(self, value):
        config = resolve_config({"transport_multipliers": {"SEA": value}})

        assert config.transport_multipliers[TransportMode.SEA] == 0.6

    def test_negative_surcharge_is_a_valid_discount(self):
        config = resolve_config({"cargo_type_surcharges": {"BULK": -0.25}})

        assert config.cargo_type_surcharges[CargoType.BULK] == -0.25

    def test_surcharge_below_minus_one_falls_back(self):
        config = resolve_config({"cargo_type_surcharges": {"BULK": -2}})

        assert config.cargo_type_surcharges[CargoType.BULK] == -0.1

    def test_non_mapping_field_falls_back(self):
        config = resolve_config({"priority_surcharges": [0.1, 0.2]})

        assert config.priority_surcharges == default_config().priority_surcharges

    def test_scalar_fields(self):
        config = resolve_config({"default_rate_per_kg": 2.0, "default_rate_per_m3": "lots"})

        assert config.default_rate_per_kg == 2.0
        assert config.default_rate_per_m3 == 200.0

    def test_volumetric_flags_require_booleans(self):
        config = resolve_config({"use_volumetric_weight_per_mode": {"ROAD": False, "AIR": "yes"}})

        assert config.use_volumetric_weight_per_mode[TransportMode.ROAD] is False
        assert config.use_volumetric_weight_per_mode[TransportMode.AIR] is True

    def test_delivery_speeds(self):
        config = resolve_config({
            "delivery_speeds_per_mode": {
                "AIR": {"min": 2, "max": 4},
                "ROAD": {"min": 9, "max": 2},
                "RAIL": {"min": 0, "max": 5},
            }
        })

        assert config.delivery_speeds_per_mode[TransportMode.AIR] == DeliverySpeed(min=2, max=4)
        assert config.delivery_speeds_per_mode[TransportMode.ROAD] == DeliverySpeed(min=3, max=7)
        assert config.delivery_speeds_per_mode[TransportMode.RAIL] == DeliverySpeed(min=7, max=14)

    def test_record_is_not_mutated(self):
        record = {"transport_multipliers": {"air": 2.0, "SPACE": 1.0}}
        resolve_config(record)

        assert record == {"transport_multipliers": {"air": 2.0, "SPACE": 1.0}}


@pytest.mark.unit
class TestLookupWithDefault:

    def test_present_key(self):
        assert lookup_with_default({"a": 1}, "a", 5) == 1

    def test_missing_key(self):
        assert lookup_with_default({"a": 1}, "b", 5) == 5

    def test_none_value(self):
        assert lookup_with_default({"a": None}, "a", 5) == 5

    def test_missing_mapping(self):
        assert lookup_with_default(None, "a", 5) == 5

    def test_falsy_values_are_kept(self):
        assert lookup_with_default({"a": 0.0}, "a", 5) == 0.0
        assert lookup_with_default({"a": False}, "a", True) is False
