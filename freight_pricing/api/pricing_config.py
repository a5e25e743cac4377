from fastapi import APIRouter, Depends
from freight_pricing.api.deps import get_pricing_repository
from freight_pricing.schemas.pricing_config import PricingConfiguration
from freight_pricing.services.repository import PricingRepository

router = APIRouter(prefix="/pricing-config", tags=["pricing-config"])


@router.get("", response_model=PricingConfiguration)
async def read_pricing_config(repository: PricingRepository = Depends(get_pricing_repository)):
    """The configuration estimates are currently priced with, defaults filled in."""
    return await repository.get_pricing_config()
