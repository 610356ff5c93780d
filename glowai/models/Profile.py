from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from glowai.models.Product import PriceRange
from glowai.models.Skin import SkinConcern, SkinTone, SkinType


class AgeRange(Enum):
    EARLY_TWENTIES = "18-22"
    MID_TWENTIES = "23-27"
    LATE_TWENTIES = "28-32"
    EARLY_THIRTIES = "33-35"
    MATURE = "36+"


class Gender(Enum):
    FEMALE = "female"
    MALE = "male"
    NON_BINARY = "non-binary"
    PREFER_NOT_TO_SAY = "prefer-not-to-say"


class StylePreference(Enum):
    MINIMAL = "minimal"
    GLASS_SKIN = "glass-skin"
    NATURAL_GLOW = "natural-glow"
    FULL_COVERAGE = "full-coverage"
    DEWY = "dewy"
    MATTE = "matte"
    K_BEAUTY = "k-beauty"
    CLEAN_BEAUTY = "clean-beauty"
    ANTI_AGING = "anti-aging"
    ACNE_FIGHTING = "acne-fighting"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class UserPreferences(BaseModel):
    budget_range: Optional[PriceRange] = PriceRange.MID_RANGE
    prefer_natural: bool = False
    prefer_fragrance_free: bool = False
    prefer_cruelty_free: bool = False
    prefer_vegan: bool = False
    style_preferences: List[StylePreference] = Field(default_factory=list)
    skin_goals: List[str] = Field(default_factory=list)

    @field_validator("budget_range", mode="before")
    @classmethod
    def unknown_budget_is_no_preference(cls, value):
        if value is None or isinstance(value, PriceRange):
            return value
        try:
            return PriceRange(value)
        except ValueError:
            return None


class UserProfile(BaseModel):
    """Profile built by the skin quiz. Defaults match an unanswered quiz."""

    id: str = Field(default_factory=lambda: f"user_{uuid4().hex[:12]}")
    name: str = "Beautiful"
    age: AgeRange = AgeRange.MID_TWENTIES
    gender: Gender = Gender.PREFER_NOT_TO_SAY
    skin_type: SkinType = SkinType.NORMAL
    skin_tone: SkinTone = SkinTone.MEDIUM
    concerns: List[SkinConcern] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    @field_validator("concerns")
    @classmethod
    def drop_duplicate_concerns(cls, value: List[SkinConcern]) -> List[SkinConcern]:
        return list(dict.fromkeys(value))

    def with_updates(self, **changes) -> "UserProfile":
        """Returns an edited copy; this profile is left untouched."""
        changes["updated_at"] = _now()
        return self.model_validate({**self.model_dump(), **changes})
