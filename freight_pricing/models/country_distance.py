from sqlalchemy import CheckConstraint, Column, Float, String, UniqueConstraint
from freight_pricing.models.base import BaseModel


class CountryDistance(BaseModel):
    __tablename__ = "country_distances"
    __table_args__ = (
        UniqueConstraint("origin_country", "destination_country", name="uq_country_distance_route"),
        CheckConstraint("distance_km > 0", name="ck_country_distance_positive"),
    )

    origin_country = Column(String(2), nullable=False, index=True)
    destination_country = Column(String(2), nullable=False)
    distance_km = Column(Float, nullable=False)
