from typing import List, Optional

from pydantic import BaseModel, Field

from glowai.models.Profile import UserProfile
from glowai.models.Response import SkinAnalysisResult
from glowai.models.Skin import SkinConcern


class ImageReference(BaseModel):
    """Opaque handle to a captured selfie. `data` is only needed by real inference backends."""
    uri: str
    data: Optional[bytes] = None
    media_type: str = "image/jpeg"


class CategoryRecommendationRequest(BaseModel):
    concerns: List[SkinConcern] = Field(default_factory=list)
    profile: Optional[UserProfile] = None
    analysis: Optional[SkinAnalysisResult] = None


class RecommendationRequest(CategoryRecommendationRequest):
    limit: int = Field(default=10, ge=1, le=100)
