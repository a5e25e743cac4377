from typing import Annotated, Any, List, Optional

from pydantic import AfterValidator, BaseModel, Field

from freight_pricing.core.enums import CargoType, Priority, QuoteNotice, TransportMode

MAX_WEIGHT_KG = 100_000
MAX_PACKAGES = 50


def normalise_country(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("country must be a string")
    code = value.strip().upper()
    if len(code) != 2 or not code.isalpha():
        raise ValueError("country must be an ISO 3166-1 alpha-2 code")
    return code


CountryCode = Annotated[str, AfterValidator(normalise_country)]


class Dimensions(BaseModel):
    """Package dimensions in centimetres."""
    length: float = Field(gt=0, allow_inf_nan=False)
    width: float = Field(gt=0, allow_inf_nan=False)
    height: float = Field(gt=0, allow_inf_nan=False)


def _dimensions_of(item) -> Optional[Dimensions]:
    if item.length is None or item.width is None or item.height is None:
        return None
    return Dimensions.model_construct(length=item.length, width=item.width, height=item.height)


class QuoteEstimateRequest(BaseModel):
    origin_country: CountryCode
    destination_country: CountryCode
    cargo_type: CargoType
    weight: float = Field(gt=0, le=MAX_WEIGHT_KG, allow_inf_nan=False)
    length: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    width: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    height: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    transport_mode: List[TransportMode] = Field(min_length=1)
    priority: Priority = Priority.STANDARD

    @property
    def dimensions(self) -> Optional[Dimensions]:
        return _dimensions_of(self)


class PriceBreakdown(BaseModel):
    base_cost: float
    distance_factor: float
    transport_mode_cost: float
    cargo_type_surcharge: float
    priority_surcharge: float

    def total(self) -> float:
        return (
            self.base_cost
            + self.distance_factor
            + self.transport_mode_cost
            + self.cargo_type_surcharge
            + self.priority_surcharge
        )


class QuoteEstimateResult(BaseModel):
    estimated_cost: float
    estimated_delivery_days: int
    breakdown: PriceBreakdown
    currency: str = "EUR"
    transport_mode: TransportMode
    chargeable_weight: float
    volume_m3: Optional[float] = None
    payable_units: Optional[float] = None
    distance_km: float
    notices: List[QuoteNotice] = []


class PackageLine(BaseModel):
    description: Optional[str] = None
    quantity: int = Field(default=1, ge=1)
    cargo_type: CargoType
    weight: float = Field(gt=0, le=MAX_WEIGHT_KG, allow_inf_nan=False)
    length: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    width: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    height: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)

    @property
    def dimensions(self) -> Optional[Dimensions]:
        return _dimensions_of(self)


class MultiPackageEstimateRequest(BaseModel):
    origin_country: CountryCode
    destination_country: CountryCode
    transport_mode: List[TransportMode] = Field(min_length=1)
    priority: Priority = Priority.STANDARD
    packages: List[PackageLine] = Field(min_length=1, max_length=MAX_PACKAGES)


class PackageLineResult(BaseModel):
    description: Optional[str] = None
    quantity: int
    cargo_type: CargoType
    weight: float
    chargeable_weight: float
    unit_price: float
    line_total: float
    breakdown: PriceBreakdown


class MultiPackageEstimateResult(BaseModel):
    lines: List[PackageLineResult]
    total_package_count: int
    total_weight: float
    total_before_priority: float
    priority_surcharge: float
    estimated_cost: float
    estimated_delivery_days: int
    dominant_cargo_type: CargoType
    currency: str = "EUR"
    transport_mode: TransportMode
    distance_km: float
    notices: List[QuoteNotice] = []
