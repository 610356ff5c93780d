from datetime import datetime
from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, Field

from glowai.models.Product import ProductCategory
from glowai.models.Skin import Severity, SkinConcern, SkinTone, SkinType

Channel = Annotated[int, Field(ge=0, le=100)]

HISTORY_LIMIT = 50


class SkinMetrics(BaseModel):
    """
    Normalized skin measurements, every channel an integer in [0, 100].

    Higher is better for every channel except oiliness, whose ideal sits
    around 45. texture: higher = smoother, pigmentation: higher = more
    even, pore_size: higher = smaller pores.
    """
    model_config = ConfigDict(frozen=True)

    hydration: Channel
    oiliness: Channel
    sensitivity: Channel
    elasticity: Channel
    texture: Channel
    pigmentation: Channel
    pore_size: Channel
    radiance: Channel


class DetectedConcern(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: SkinConcern
    severity: Severity
    confidence: float = Field(ge=0, le=1)
    description: str
    affected_area: str
    recommendation: str


class RoutineStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    order: int = Field(ge=1)
    category: ProductCategory
    description: str
    duration: str
    tips: str
    is_optional: bool = False


class WeeklyTreatment(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    frequency: str
    description: str


class RoutineSuggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    morning: List[RoutineStep]
    evening: List[RoutineStep]
    weekly: List[WeeklyTreatment]


class SkinAnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    image_uri: str
    timestamp: datetime
    overall_score: int = Field(ge=0, le=100)
    skin_tone_detected: SkinTone
    skin_type_detected: SkinType
    concerns: List[DetectedConcern] = Field(max_length=6)
    metrics: SkinMetrics
    recommendations: List[str] = Field(max_length=5)
    routine_suggestion: RoutineSuggestion


class AnalysisHistory(BaseModel):
    """Past analyses, most recent first."""
    model_config = ConfigDict(frozen=True)

    results: List[SkinAnalysisResult] = Field(default_factory=list)

    def add(self, result: SkinAnalysisResult) -> "AnalysisHistory":
        return AnalysisHistory(results=[result, *self.results][:HISTORY_LIMIT])

    @property
    def latest(self):
        return self.results[0] if self.results else None
