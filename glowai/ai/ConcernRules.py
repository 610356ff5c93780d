import random
from dataclasses import dataclass
from typing import Callable, List, Optional

from glowai.models.Profile import UserProfile
from glowai.models.Response import DetectedConcern, SkinMetrics
from glowai.models.Skin import Severity, SkinConcern

MAX_CONCERNS = 6

FALLBACK_CONFIDENCE = (0.55, 0.2)


@dataclass(frozen=True)
class ConcernRule:
    """
    One independent threshold rule.

    `grade` maps the metrics (and optionally the profile) to a severity, or
    None when the rule does not fire. Confidence is drawn from
    [base_confidence, base_confidence + jitter).
    """
    concern: SkinConcern
    grade: Callable[[SkinMetrics, Optional[UserProfile]], Optional[Severity]]
    base_confidence: float
    jitter: float
    affected_area: str
    recommendation: str
    descriptions: Callable[[Severity], str]

    def evaluate(
        self,
        metrics: SkinMetrics,
        profile: Optional[UserProfile] = None,
        rng: Optional[random.Random] = None,
    ) -> Optional[DetectedConcern]:
        severity = self.grade(metrics, profile)
        if severity is None:
            return None

        rng = rng or random
        return DetectedConcern(
            type=self.concern,
            severity=severity,
            confidence=self.base_confidence + rng.random() * self.jitter,
            description=self.descriptions(severity),
            affected_area=self.affected_area,
            recommendation=self.recommendation,
        )


def _grade_acne(metrics: SkinMetrics, _profile=None) -> Optional[Severity]:
    if metrics.oiliness > 75 and metrics.texture < 40:
        return Severity.SEVERE
    if metrics.oiliness > 55 and metrics.texture < 60:
        return Severity.MODERATE
    if metrics.oiliness > 40 and metrics.texture < 70:
        return Severity.MILD
    return None


def _below(channel: str, fires_under: int, moderate_under: int):
    def grade(metrics: SkinMetrics, _profile=None) -> Optional[Severity]:
        value = getattr(metrics, channel)
        if value >= fires_under:
            return None
        return Severity.MODERATE if value < moderate_under else Severity.MILD
    return grade


def _above(channel: str, fires_over: int, moderate_over: int):
    def grade(metrics: SkinMetrics, _profile=None) -> Optional[Severity]:
        value = getattr(metrics, channel)
        if value <= fires_over:
            return None
        return Severity.MODERATE if value > moderate_over else Severity.MILD
    return grade


def _grade_dryness(metrics: SkinMetrics, _profile=None) -> Optional[Severity]:
    if metrics.hydration >= 45:
        return None
    if metrics.hydration < 25:
        return Severity.SEVERE
    if metrics.hydration < 35:
        return Severity.MODERATE
    return Severity.MILD


# uneven-tone and dark-circles are always reported as mild
def _grade_uneven_tone(metrics: SkinMetrics, _profile=None) -> Optional[Severity]:
    if metrics.pigmentation < 55 and metrics.radiance < 55:
        return Severity.MILD
    return None


def _grade_dark_circles(metrics: SkinMetrics, _profile=None) -> Optional[Severity]:
    if metrics.hydration < 50 and metrics.elasticity < 60:
        return Severity.MILD
    return None


def _by_severity(mild: str, moderate: str, severe: Optional[str] = None) -> Callable[[Severity], str]:
    texts = {Severity.MILD: mild, Severity.MODERATE: moderate, Severity.SEVERE: severe or moderate}
    return texts.__getitem__


def _fixed(text: str) -> Callable[[Severity], str]:
    return lambda _severity: text


CONCERN_RULES: List[ConcernRule] = [
    ConcernRule(
        concern=SkinConcern.ACNE,
        grade=_grade_acne,
        base_confidence=0.72,
        jitter=0.15,
        affected_area="T-zone and cheeks",
        recommendation="Consider a gentle salicylic acid cleanser and niacinamide serum.",
        descriptions=_by_severity(
            mild="Minor breakouts detected. Mostly comedonal (non-inflammatory) acne.",
            moderate="Some active breakouts detected. A mix of comedonal and inflammatory acne.",
            severe="Active breakouts detected across multiple areas. Inflammatory acne present.",
        ),
    ),
    ConcernRule(
        concern=SkinConcern.DARK_SPOTS,
        grade=_below("pigmentation", 60, 35),
        base_confidence=0.68,
        jitter=0.2,
        affected_area="Cheeks and forehead",
        recommendation="Vitamin C serum in the morning and SPF 50+ daily. Consider azelaic acid.",
        descriptions=_by_severity(
            mild="Minor dark spots detected. Early signs of uneven pigmentation.",
            moderate="Noticeable hyperpigmentation in several areas. Could be post-inflammatory or sun-related.",
        ),
    ),
    ConcernRule(
        concern=SkinConcern.FINE_LINES,
        grade=_below("elasticity", 55, 30),
        base_confidence=0.65,
        jitter=0.2,
        affected_area="Eye area and forehead",
        recommendation="Retinol at night (start low), hyaluronic acid for hydration, and daily SPF.",
        descriptions=_by_severity(
            mild="Very fine lines beginning to appear. Normal early signs, a great time to start prevention.",
            moderate="Fine lines visible around the eyes and forehead. Early signs of loss of elasticity.",
        ),
    ),
    ConcernRule(
        concern=SkinConcern.LARGE_PORES,
        grade=_below("pore_size", 50, 30),
        base_confidence=0.7,
        jitter=0.15,
        affected_area="Nose and cheeks",
        recommendation="Niacinamide serum to minimize appearance. BHA exfoliant 2-3x per week.",
        descriptions=_fixed("Enlarged pores detected, particularly in the T-zone area."),
    ),
    ConcernRule(
        concern=SkinConcern.DULLNESS,
        grade=_below("radiance", 50, 30),
        base_confidence=0.75,
        jitter=0.15,
        affected_area="Overall complexion",
        recommendation="AHA exfoliant 2x per week, Vitamin C serum, and hydrating toner.",
        descriptions=_fixed(
            "Skin appears to lack natural glow and radiance. "
            "Could be due to dehydration or dead skin buildup."
        ),
    ),
    ConcernRule(
        concern=SkinConcern.DRYNESS,
        grade=_grade_dryness,
        base_confidence=0.78,
        jitter=0.12,
        affected_area="Cheeks and jawline",
        recommendation="Rich moisturizer with ceramides, hyaluronic acid serum, and avoid harsh cleansers.",
        descriptions=_fixed("Skin barrier appears compromised with visible signs of dehydration."),
    ),
    ConcernRule(
        concern=SkinConcern.OILINESS,
        grade=_above("oiliness", 70, 85),
        base_confidence=0.8,
        jitter=0.1,
        affected_area="T-zone",
        recommendation="Oil-free moisturizer, niacinamide serum, gentle foaming cleanser.",
        descriptions=_fixed(
            "Excess sebum production detected. This can lead to clogged pores if not managed."
        ),
    ),
    ConcernRule(
        concern=SkinConcern.REDNESS,
        grade=_above("sensitivity", 65, 80),
        base_confidence=0.66,
        jitter=0.2,
        affected_area="Cheeks and nose",
        recommendation="Centella asiatica (cica) products, avoid fragrance, use mineral SPF.",
        descriptions=_fixed(
            "Visible redness and irritation detected. Could indicate sensitive or reactive skin."
        ),
    ),
    ConcernRule(
        concern=SkinConcern.UNEVEN_TONE,
        grade=_grade_uneven_tone,
        base_confidence=0.7,
        jitter=0.15,
        affected_area="Overall complexion",
        recommendation="Vitamin C + niacinamide for brightening, AHA for cell turnover, daily SPF.",
        descriptions=_fixed("Uneven skin tone detected with areas of varying pigmentation."),
    ),
    ConcernRule(
        concern=SkinConcern.DARK_CIRCLES,
        grade=_grade_dark_circles,
        base_confidence=0.6,
        jitter=0.15,
        affected_area="Under-eye area",
        recommendation="Caffeine eye cream, retinol eye treatment at night, ensure adequate sleep.",
        descriptions=_fixed("Under-eye area shows signs of fatigue and slight discoloration."),
    ),
]


def reported_concern(concern: SkinConcern, rng: Optional[random.Random] = None) -> DetectedConcern:
    """Mild placeholder for a concern the user reported but no rule picked up."""
    rng = rng or random
    base, jitter = FALLBACK_CONFIDENCE
    return DetectedConcern(
        type=concern,
        severity=Severity.MILD,
        confidence=base + rng.random() * jitter,
        description=f"Mild signs of {concern.label} detected, consistent with your reported concerns.",
        affected_area="Various areas",
        recommendation=f"We've included targeted treatments for {concern.label} in your routine.",
    )


def prioritize(concerns: List[DetectedConcern], limit: int = MAX_CONCERNS) -> List[DetectedConcern]:
    """Severe before moderate before mild, then by descending confidence."""
    ordered = sorted(concerns, key=lambda c: (c.severity.rank, -c.confidence))
    return ordered[:limit]


def detect_concerns(
    metrics: SkinMetrics,
    profile: Optional[UserProfile] = None,
    rng: Optional[random.Random] = None,
) -> List[DetectedConcern]:
    detected: List[DetectedConcern] = []
    for rule in CONCERN_RULES:
        concern = rule.evaluate(metrics, profile, rng)
        if concern is not None:
            detected.append(concern)

    if profile is not None:
        found = {c.type for c in detected}
        for concern in profile.concerns:
            if concern not in found:
                detected.append(reported_concern(concern, rng))
                found.add(concern)

    return prioritize(detected)
