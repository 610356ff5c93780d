import math
from dataclasses import dataclass
from typing import Dict, List, Literal, Tuple

from glowai.models.Response import SkinMetrics
from glowai.models.Skin import SkinTone, SkinType

# oiliness scores by distance from this value, both extremes are penalized
IDEAL_OILINESS = 45

SCORE_WEIGHTS: Dict[str, float] = {
    "hydration": 0.18,
    "oiliness": 0.08,
    "sensitivity": 0.10,
    "elasticity": 0.15,
    "texture": 0.15,
    "pigmentation": 0.12,
    "pore_size": 0.07,
    "radiance": 0.15,
}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


def overall_score(metrics: SkinMetrics) -> int:
    """Composite 0-100 skin health score from a fixed weighted sum."""
    score = 0.0
    score += metrics.hydration * SCORE_WEIGHTS["hydration"]
    score += (100 - abs(metrics.oiliness - IDEAL_OILINESS)) * SCORE_WEIGHTS["oiliness"]
    score += (100 - metrics.sensitivity) * SCORE_WEIGHTS["sensitivity"]
    score += metrics.elasticity * SCORE_WEIGHTS["elasticity"]
    score += metrics.texture * SCORE_WEIGHTS["texture"]
    score += metrics.pigmentation * SCORE_WEIGHTS["pigmentation"]
    score += metrics.pore_size * SCORE_WEIGHTS["pore_size"]
    score += metrics.radiance * SCORE_WEIGHTS["radiance"]

    return round_half_up(clamp(score))


def detect_skin_type(metrics: SkinMetrics) -> SkinType:
    if metrics.sensitivity > 70:
        return SkinType.SENSITIVE
    if metrics.oiliness > 65 and metrics.hydration < 45:
        return SkinType.COMBINATION
    if metrics.oiliness > 60:
        return SkinType.OILY
    if metrics.hydration < 40:
        return SkinType.DRY
    return SkinType.NORMAL


@dataclass(frozen=True)
class SkinToneProfile:
    tone: SkinTone
    lightness_range: Tuple[float, float]
    undertone: Literal["warm", "cool", "neutral"]
    fitzpatrick_scale: int


SKIN_TONE_PROFILES: List[SkinToneProfile] = [
    SkinToneProfile(SkinTone.FAIR, (0.78, 1.0), "cool", 1),
    SkinToneProfile(SkinTone.LIGHT, (0.68, 0.78), "neutral", 2),
    SkinToneProfile(SkinTone.MEDIUM, (0.55, 0.68), "warm", 3),
    SkinToneProfile(SkinTone.OLIVE, (0.45, 0.55), "warm", 3),
    SkinToneProfile(SkinTone.TAN, (0.35, 0.45), "warm", 4),
    SkinToneProfile(SkinTone.DARK, (0.22, 0.35), "warm", 5),
    SkinToneProfile(SkinTone.DEEP, (0.0, 0.22), "neutral", 6),
]

DEFAULT_TONE_PROFILE = SKIN_TONE_PROFILES[2]


def detect_skin_tone(average_lightness: float) -> SkinToneProfile:
    """Finds the band whose [low, high) interval holds the lightness; medium otherwise."""
    for profile in SKIN_TONE_PROFILES:
        low, high = profile.lightness_range
        if low <= average_lightness < high:
            return profile
    return DEFAULT_TONE_PROFILE


def reference_lightness(tone: SkinTone) -> float:
    for profile in SKIN_TONE_PROFILES:
        if profile.tone == tone:
            return profile.lightness_range[0]
    return DEFAULT_TONE_PROFILE.lightness_range[0]
