from sqlalchemy import Boolean, Column, Enum, Float, String, UniqueConstraint
from freight_pricing.models.base import BaseModel
from freight_pricing.core.enums import TransportMode


class TransportRate(BaseModel):
    __tablename__ = "transport_rates"
    __table_args__ = (
        UniqueConstraint(
            "origin_country", "destination_country", "transport_mode", name="uq_transport_rate_route_mode"
        ),
    )

    origin_country = Column(String(2), nullable=False, index=True)
    destination_country = Column(String(2), nullable=False)
    transport_mode = Column(Enum(TransportMode), nullable=False)
    rate_per_kg = Column(Float, nullable=False)
    rate_per_m3 = Column(Float, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    notes = Column(String, nullable=True)
