"""
Request / response models

Voice platforms send function arguments either at the top level of the
body or nested under ``args``; everything is normalized into these models
before any lookup runs.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional


def unwrap_args(body: Any) -> Dict[str, Any]:
    """
    Extract the function arguments from a raw request body

    Accepts ``{"args": {...}}`` (Retell custom functions) or a flat object.
    Anything that is not a JSON object yields an empty dict.
    """
    if not isinstance(body, dict):
        return {}
    args = body.get("args")
    if isinstance(args, dict):
        return args
    return body


class VoiceArgs(BaseModel):
    """Base for inbound argument payloads: coerce scalars, drop blanks"""

    model_config = {"extra": "ignore"}

    @field_validator("*", mode="before")
    @classmethod
    def _clean(cls, value):
        if value is None:
            return None
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value


class SearchQuery(VoiceArgs):
    """What the caller asked for; every field optional"""
    year: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    part_type: Optional[str] = None
    query: Optional[str] = None
    part_number: Optional[str] = None
    stock_number: Optional[str] = None

    def is_empty(self) -> bool:
        return not any(
            [self.year, self.make, self.model, self.part_type,
             self.query, self.part_number, self.stock_number]
        )

    def search_text(self) -> str:
        """Year, make, model, part type and free text joined with spaces"""
        fields = [self.year, self.make, self.model, self.part_type, self.query]
        return " ".join(f for f in fields if f)

    def vehicle_description(self) -> str:
        return " ".join(f for f in [self.year, self.make, self.model] if f)

    def vehicle_terms(self) -> List[str]:
        """Lower-cased terms that must all appear in a vehicle listing"""
        return self.vehicle_description().lower().split()

    def has_vehicle(self) -> bool:
        return bool(self.year or self.make or self.model)


class InquiryRequest(VoiceArgs):
    """Contact payload collected by the voice agent"""
    customer_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    year: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    part_needed: Optional[str] = None
    message: Optional[str] = None


class PartResult(BaseModel):
    """One part candidate from the store"""
    name: str
    price: Optional[str] = None  # display string, e.g. "$19.99"
    regular_price: Optional[str] = None
    on_sale: bool = False
    sku: Optional[str] = None
    in_stock: bool = True
    url: Optional[str] = None
    image: Optional[str] = None
    part_number: Optional[str] = None
    stock_count: Optional[int] = None
    part_type: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    description: Optional[str] = None


class VehicleListing(BaseModel):
    """A vehicle being parted out, parsed from free-form markup"""
    description: str
    stock_number: Optional[str] = None
    vin: Optional[str] = None


class ChainResult(BaseModel):
    """Output of one strategy (or the whole chain)"""
    method: Optional[str] = None
    parts: List[PartResult] = Field(default_factory=list)
    vehicles: List[VehicleListing] = Field(default_factory=list)

    @property
    def found(self) -> bool:
        return bool(self.parts or self.vehicles)


class SearchPartsResponse(BaseModel):
    success: bool
    count: int
    message: str
    search_method: Optional[str] = None
    results: List[PartResult] = Field(default_factory=list)
    vehicles: List[VehicleListing] = Field(default_factory=list)


class VehicleCheckResponse(BaseModel):
    success: bool
    count: int
    message: str
    vehicles: List[VehicleListing] = Field(default_factory=list)


class InquiryResponse(BaseModel):
    success: bool
    message: str


class BusinessHours(BaseModel):
    weekdays: str
    saturday: str
    sunday: str


class BusinessInfo(BaseModel):
    """Static facts the agent can read back to callers"""
    model_config = {"frozen": True}

    name: str
    phone: str
    email: str
    address: str
    hours: BusinessHours
    warranty: str
    shipping: str
    return_policy: str
    website: str
    ebay_store: str
    specialties: List[str]


class HealthResponse(BaseModel):
    status: str
    timestamp: str
