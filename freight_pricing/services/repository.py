"""Database reads feeding the pricing engine"""
import logging
from typing import Dict, Optional, Tuple

from asyncpg import InterfaceError, PostgresError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from freight_pricing.core.enums import TransportMode
from freight_pricing.core.metrics import track_db_operation
from freight_pricing.models.country_distance import CountryDistance
from freight_pricing.models.pricing_config import PricingConfigRecord
from freight_pricing.models.transport_rate import TransportRate
from freight_pricing.schemas.pricing_config import PricingConfiguration
from freight_pricing.services.pricing_config import default_config, resolve_config

logger = logging.getLogger(__name__)

# Connection failures can surface from asyncpg unwrapped
DB_ERRORS = (SQLAlchemyError, PostgresError, InterfaceError, OSError)


class PricingRepository:
    """Loads configuration, distances and route rates.

    Lookup failures degrade to the engine defaults instead of failing the
    estimate: a quote priced on defaults is more useful than no quote.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @track_db_operation("select", "pricing_config")
    async def _latest_config(self) -> Optional[PricingConfigRecord]:
        res = await self.db.execute(
            select(PricingConfigRecord)
            .order_by(PricingConfigRecord.created_at.desc(), PricingConfigRecord.id.desc())
            .limit(1)
        )
        return res.scalars().first()

    @track_db_operation("select", "country_distances")
    async def _distance_row(self, origin: str, destination: str) -> Optional[CountryDistance]:
        res = await self.db.execute(
            select(CountryDistance).where(
                CountryDistance.origin_country == origin,
                CountryDistance.destination_country == destination,
            )
        )
        return res.scalars().first()

    @track_db_operation("select", "transport_rates")
    async def _rate_row(self, origin: str, destination: str, mode: TransportMode) -> Optional[TransportRate]:
        res = await self.db.execute(
            select(TransportRate).where(
                TransportRate.origin_country == origin,
                TransportRate.destination_country == destination,
                TransportRate.transport_mode == mode,
                TransportRate.is_active.is_(True),
            )
        )
        return res.scalars().first()

    async def get_pricing_config(self) -> PricingConfiguration:
        try:
            record = await self._latest_config()
        except DB_ERRORS as e:
            logger.error(f"Loading pricing config failed, using defaults: {e}")
            return default_config()

        if record is None:
            logger.info("No pricing config saved, using defaults")
            return default_config()
        return resolve_config(record.to_record())

    async def get_distances(self, origin: str, destination: str) -> Dict[Tuple[str, str], float]:
        origin, destination = origin.upper(), destination.upper()
        try:
            row = await self._distance_row(origin, destination)
        except DB_ERRORS as e:
            logger.error(f"Distance lookup {origin} -> {destination} failed: {e}")
            return {}

        if row is None:
            return {}
        return {(origin, destination): row.distance_km}

    async def get_route_rate(self, origin: str, destination: str, mode: TransportMode) -> Optional[float]:
        origin, destination = origin.upper(), destination.upper()
        try:
            row = await self._rate_row(origin, destination, mode)
        except DB_ERRORS as e:
            logger.error(f"Route rate lookup {origin} -> {destination} ({mode}) failed: {e}")
            return None

        if row is None or not row.rate_per_kg or row.rate_per_kg <= 0:
            return None
        return row.rate_per_kg
