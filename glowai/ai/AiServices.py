import logging
import random
from datetime import datetime, timezone
from typing import List, Optional

from glowai import config
from glowai.ai.ConcernRules import detect_concerns
from glowai.ai.MetricExtractor import MetricExtractor, SimulatedMetricExtractor
from glowai.ai.Routine import build_routine
from glowai.ai.SkinModel import (
    detect_skin_tone,
    detect_skin_type,
    overall_score,
    reference_lightness,
)
from glowai.models.Profile import UserProfile
from glowai.models.Request import ImageReference
from glowai.models.Response import DetectedConcern, SkinAnalysisResult, SkinMetrics
from glowai.models.Skin import SkinConcern, SkinType

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 5

SUNSCREEN_TIP = "Never skip sunscreen, it's the single most effective anti-aging step."
CONSISTENCY_TIP = (
    "Consistency is more important than having the most expensive products. "
    "Stick with your routine!"
)


class AnalysisUnavailableError(Exception):
    """Raised instead of returning a partial result when metrics cannot be produced."""


def get_default_extractor() -> MetricExtractor:
    """Extractor selected by GLOW_METRIC_BACKEND."""
    if config.METRIC_BACKEND == "agent":
        # imported lazily so the simulated backend runs without model credentials
        from glowai.ai.AgentExtractor import AgentMetricExtractor

        return AgentMetricExtractor()
    return SimulatedMetricExtractor()


def generate_top_recommendations(
    concerns: List[DetectedConcern], metrics: SkinMetrics, skin_type: SkinType
) -> List[str]:
    """
    Short, general advice for the result screen.

    The sunscreen and consistency reminders are always present; the
    consistency reminder closes the list.
    """
    present = {c.type for c in concerns}
    tips: List[str] = []

    if metrics.hydration < 50:
        tips.append("Boost hydration with a hyaluronic acid serum and drink more water throughout the day.")
    if metrics.radiance < 50:
        tips.append("Add a Vitamin C serum to your morning routine for a natural glow.")

    tips.append(SUNSCREEN_TIP)

    if SkinConcern.ACNE in present:
        tips.append("Avoid touching your face and change your pillowcase frequently to reduce breakouts.")
    if skin_type == SkinType.SENSITIVE:
        tips.append("Patch test new products and introduce them one at a time over 2 weeks.")
    if SkinConcern.FINE_LINES in present:
        tips.append(
            "Start with a low-concentration retinol (0.3%) at night, the gold standard for anti-aging."
        )

    return tips[:MAX_RECOMMENDATIONS - 1] + [CONSISTENCY_TIP]


def new_analysis_id(rng: random.Random) -> str:
    millis = int(datetime.now(timezone.utc).timestamp() * 1000)
    return f"analysis_{millis}_{rng.getrandbits(24):06x}"


async def analyze_skin(
    image: ImageReference,
    profile: Optional[UserProfile] = None,
    extractor: Optional[MetricExtractor] = None,
    rng: Optional[random.Random] = None,
) -> SkinAnalysisResult:
    """
    Runs a full skin analysis for one selfie.

    Args:
        image: Opaque reference to the captured image
        profile: Quiz profile; used to bias metrics and reconcile concerns
        extractor: Metric backend, the configured default when omitted
        rng: Random source for confidence jitter and synthetic lightness

    Returns:
        SkinAnalysisResult: Complete assessment with routine suggestion

    Raises:
        AnalysisUnavailableError: If the metric backend fails to load or to answer
    """
    extractor = extractor or get_default_extractor()
    rng = rng or random.Random()

    logger.info(f"[ANALYSIS] Started - image: {image.uri}, profile: {profile.id if profile else 'none'}")

    try:
        if not extractor.is_ready:
            await extractor.load()
        metrics = await extractor.extract_metrics(image, profile)
    except Exception as e:
        logger.error(f"[ANALYSIS] Metric extraction failed for {image.uri}: {e}")
        raise AnalysisUnavailableError(f"Skin analysis unavailable: {e}") from e

    concerns = detect_concerns(metrics, profile, rng)

    skin_type = profile.skin_type if profile else detect_skin_type(metrics)

    synthetic_lightness = 0.3 + rng.random() * 0.5
    lightness = reference_lightness(profile.skin_tone) if profile else synthetic_lightness
    tone_profile = detect_skin_tone(lightness)

    result = SkinAnalysisResult(
        id=new_analysis_id(rng),
        image_uri=image.uri,
        timestamp=datetime.now(timezone.utc),
        overall_score=overall_score(metrics),
        skin_tone_detected=tone_profile.tone,
        skin_type_detected=skin_type,
        concerns=concerns,
        metrics=metrics,
        recommendations=generate_top_recommendations(concerns, metrics, skin_type),
        routine_suggestion=build_routine(concerns, skin_type),
    )

    logger.info(
        f"[ANALYSIS] Done - {result.id}: score {result.overall_score}, "
        f"type {skin_type.value}, {len(concerns)} concerns"
    )
    return result
