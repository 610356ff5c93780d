from typing import Iterable, List, Set

from glowai.models.Product import ProductCategory
from glowai.models.Response import (
    DetectedConcern,
    RoutineStep,
    RoutineSuggestion,
    WeeklyTreatment,
)
from glowai.models.Skin import SkinConcern, SkinType


def _has_any(present: Set[SkinConcern], *kinds: SkinConcern) -> bool:
    return any(kind in present for kind in kinds)


def _morning(present: Set[SkinConcern], skin_type: SkinType) -> List[RoutineStep]:
    if skin_type == SkinType.OILY:
        cleanser = "Gentle foaming cleanser"
        moisturizer = "Lightweight gel moisturizer"
    elif skin_type == SkinType.DRY:
        cleanser = "Cream or oil-based cleanser"
        moisturizer = "Rich cream moisturizer with ceramides"
    else:
        cleanser = "Gentle gel cleanser"
        moisturizer = "Balanced lotion moisturizer"

    if _has_any(present, SkinConcern.DARK_SPOTS, SkinConcern.DULLNESS):
        serum = "Vitamin C serum (15-20%)"
    elif _has_any(present, SkinConcern.DRYNESS):
        serum = "Hyaluronic acid serum"
    else:
        serum = "Niacinamide serum (5-10%)"

    return [
        RoutineStep(
            order=1,
            category=ProductCategory.CLEANSER,
            description=cleanser,
            duration="60 seconds",
            tips="Use lukewarm water. Massage in circular motions.",
        ),
        RoutineStep(
            order=2,
            category=ProductCategory.TONER,
            description="Hydrating toner or essence",
            duration="30 seconds",
            tips="Pat into skin with hands rather than cotton pads to avoid waste.",
        ),
        RoutineStep(
            order=3,
            category=ProductCategory.SERUM,
            description=serum,
            duration="30 seconds",
            tips="Apply to slightly damp skin for better absorption.",
        ),
        RoutineStep(
            order=4,
            category=ProductCategory.MOISTURIZER,
            description=moisturizer,
            duration="30 seconds",
            tips="Don't forget your neck and decolletage!",
        ),
        RoutineStep(
            order=5,
            category=ProductCategory.SUNSCREEN,
            description="Broad-spectrum SPF 50+ sunscreen",
            duration="30 seconds",
            tips="Apply generously, most people use far too little. Reapply every 2 hours if outdoors.",
        ),
    ]


def _evening(present: Set[SkinConcern], skin_type: SkinType) -> List[RoutineStep]:
    if skin_type == SkinType.OILY:
        second_cleanse = "Gentle foaming cleanser (second cleanse)"
    else:
        second_cleanse = "Gentle gel or cream cleanser (second cleanse)"

    if _has_any(present, SkinConcern.FINE_LINES, SkinConcern.WRINKLES):
        serum = "Retinol serum (start with 0.3%, work up)"
    elif _has_any(present, SkinConcern.ACNE):
        serum = "Salicylic acid or benzoyl peroxide treatment"
    elif _has_any(present, SkinConcern.DARK_SPOTS):
        serum = "Azelaic acid or alpha arbutin serum"
    else:
        serum = "Peptide serum"

    night_cream = "Rich night cream or sleeping mask" if skin_type == SkinType.DRY else "Night moisturizer"

    return [
        RoutineStep(
            order=1,
            category=ProductCategory.CLEANSER,
            description="Oil cleanser or micellar water (first cleanse)",
            duration="60 seconds",
            tips="This removes makeup and SPF. Essential even if you don't wear makeup.",
        ),
        RoutineStep(
            order=2,
            category=ProductCategory.CLEANSER,
            description=second_cleanse,
            duration="60 seconds",
            tips="Double cleansing ensures your skin is truly clean.",
        ),
        RoutineStep(
            order=3,
            category=ProductCategory.TONER,
            description="Hydrating toner",
            duration="30 seconds",
            tips="Preps skin to absorb your treatment products.",
        ),
        RoutineStep(
            order=4,
            category=ProductCategory.SERUM,
            description=serum,
            duration="30 seconds",
            tips="If using retinol, start 2-3x per week and build up tolerance.",
        ),
        RoutineStep(
            order=5,
            category=ProductCategory.EYE_CREAM,
            description="Hydrating eye cream",
            duration="15 seconds",
            tips="Use your ring finger, it applies the least pressure.",
            is_optional=True,
        ),
        RoutineStep(
            order=6,
            category=ProductCategory.MOISTURIZER,
            description=night_cream,
            duration="30 seconds",
            tips="Night is when your skin repairs, don't skip this step.",
        ),
    ]


def _weekly(present: Set[SkinConcern]) -> List[WeeklyTreatment]:
    if _has_any(present, SkinConcern.ACNE, SkinConcern.OILINESS):
        exfoliant = "BHA (salicylic acid) exfoliant to unclog pores"
    else:
        exfoliant = "AHA (glycolic/lactic acid) exfoliant for cell turnover and glow"

    if _has_any(present, SkinConcern.DRYNESS):
        mask = "Hydrating sheet mask or overnight sleeping mask"
    elif _has_any(present, SkinConcern.OILINESS):
        mask = "Clay mask to absorb excess oil and minimize pores"
    else:
        mask = "Brightening or hydrating mask for overall skin health"

    return [
        WeeklyTreatment(name="Chemical Exfoliation", frequency="2-3x per week", description=exfoliant),
        WeeklyTreatment(name="Face Mask", frequency="1-2x per week", description=mask),
        WeeklyTreatment(
            name="Facial Massage",
            frequency="3-5x per week",
            description="Gua sha or facial roller to boost circulation and reduce puffiness.",
        ),
    ]


def build_routine(concerns: Iterable[DetectedConcern], skin_type: SkinType) -> RoutineSuggestion:
    """Morning, evening and weekly template for the detected concerns. Deterministic."""
    present = {concern.type for concern in concerns}
    return RoutineSuggestion(
        morning=_morning(present, skin_type),
        evening=_evening(present, skin_type),
        weekly=_weekly(present),
    )
