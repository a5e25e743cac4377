from typing import Dict

from pydantic import BaseModel, Field, model_validator

from freight_pricing.core.enums import CargoType, Priority, TransportMode


class DeliverySpeed(BaseModel):
    min: int = Field(ge=1, le=365)
    max: int = Field(ge=1, le=365)

    @model_validator(mode="after")
    def check_range(self):
        if self.max < self.min:
            raise ValueError("max delivery days must be greater than or equal to min")
        return self


class PricingConfiguration(BaseModel):
    base_rate_per_kg: float
    default_rate_per_kg: float
    default_rate_per_m3: float
    distance_rate_per_1000_km: float
    transport_multipliers: Dict[TransportMode, float]
    cargo_type_surcharges: Dict[CargoType, float]
    priority_surcharges: Dict[Priority, float]
    volumetric_weight_ratios: Dict[TransportMode, float]
    use_volumetric_weight_per_mode: Dict[TransportMode, bool]
    delivery_speeds_per_mode: Dict[TransportMode, DeliverySpeed]
