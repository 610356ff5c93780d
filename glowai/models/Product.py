from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, computed_field

from glowai.models.Skin import SkinConcern, SkinType


class ProductCategory(Enum):
    CLEANSER = "cleanser"
    TONER = "toner"
    SERUM = "serum"
    MOISTURIZER = "moisturizer"
    SUNSCREEN = "sunscreen"
    EYE_CREAM = "eye-cream"
    MASK = "mask"
    EXFOLIANT = "exfoliant"
    OIL = "oil"
    SPOT_TREATMENT = "spot-treatment"
    ESSENCE = "essence"
    MIST = "mist"
    LIP_CARE = "lip-care"
    RETINOL = "retinol"
    VITAMIN_C = "vitamin-c"


class PriceRange(Enum):
    BUDGET = "budget"
    MID_RANGE = "mid-range"
    PREMIUM = "premium"
    LUXURY = "luxury"


# Highest price that still fits each budget tier
BUDGET_THRESHOLDS: Dict[PriceRange, float] = {
    PriceRange.BUDGET: 25,
    PriceRange.MID_RANGE: 60,
    PriceRange.PREMIUM: 120,
    PriceRange.LUXURY: float("inf"),
}


def price_range_for(price: float) -> PriceRange:
    for tier, ceiling in BUDGET_THRESHOLDS.items():
        if price <= ceiling:
            return tier
    return PriceRange.LUXURY


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    brand: str
    category: ProductCategory
    description: str = ""
    image_url: str = ""
    price: float = Field(ge=0)
    currency: str = "USD"
    rating: float = Field(ge=0, le=5)
    review_count: int = Field(ge=0)
    ingredients: List[str] = Field(default_factory=list)
    key_ingredients: List[str] = Field(default_factory=list)
    target_concerns: List[SkinConcern] = Field(default_factory=list)
    suitable_skin_types: List[SkinType] = Field(default_factory=list)
    is_natural: bool = False
    is_cruelty_free: bool = False
    is_vegan: bool = False
    is_fragrance_free: bool = False
    how_to_use: str = ""
    size: str = ""

    @computed_field
    @property
    def price_range(self) -> PriceRange:
        return price_range_for(self.price)


class ProductRecommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    product: Product
    match_score: int = Field(ge=0, le=100)
    match_reasons: List[str] = Field(default_factory=list, max_length=4)
    alternative_ids: List[str] = Field(default_factory=list, max_length=2)
