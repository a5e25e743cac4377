from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from freight_pricing.db.session import get_db
from freight_pricing.services.repository import PricingRepository
from freight_pricing.services.quote_service import QuoteService


def get_pricing_repository(db: AsyncSession = Depends(get_db)) -> PricingRepository:
    return PricingRepository(db)


def get_quote_service(repository: PricingRepository = Depends(get_pricing_repository)) -> QuoteService:
    return QuoteService(repository)
