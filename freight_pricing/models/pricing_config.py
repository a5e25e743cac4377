from sqlalchemy import JSON, Column, Float
from freight_pricing.models.base import BaseModel

CONFIG_FIELDS = (
    "base_rate_per_kg",
    "default_rate_per_kg",
    "default_rate_per_m3",
    "distance_rate_per_1000_km",
    "transport_multipliers",
    "cargo_type_surcharges",
    "priority_surcharges",
    "volumetric_weight_ratios",
    "use_volumetric_weight_per_mode",
    "delivery_speeds_per_mode",
)


class PricingConfigRecord(BaseModel):
    __tablename__ = "pricing_config"

    base_rate_per_kg = Column(Float, nullable=True)
    default_rate_per_kg = Column(Float, nullable=True)
    default_rate_per_m3 = Column(Float, nullable=True)
    distance_rate_per_1000_km = Column(Float, nullable=True)

    # JSON maps keyed by enum name, e.g. {"ROAD": 1.0, "AIR": 3.0}
    transport_multipliers = Column(JSON, nullable=True)
    cargo_type_surcharges = Column(JSON, nullable=True)
    priority_surcharges = Column(JSON, nullable=True)
    volumetric_weight_ratios = Column(JSON, nullable=True)
    use_volumetric_weight_per_mode = Column(JSON, nullable=True)
    delivery_speeds_per_mode = Column(JSON, nullable=True)

    def to_record(self) -> dict:
        return {field: getattr(self, field) for field in CONFIG_FIELDS}
