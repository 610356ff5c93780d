import pytest

from glowai.ai.Routine import build_routine
from glowai.models.Product import ProductCategory
from glowai.models.Skin import SkinConcern, SkinType
from tests.factories import make_concern


def routine_for(*kinds, skin_type=SkinType.NORMAL):
    return build_routine([make_concern(kind) for kind in kinds], skin_type)


def step(steps, category):
    return next(s for s in steps if s.category == category)


def test_routine_is_deterministic():
    first = routine_for(SkinConcern.ACNE, SkinConcern.DRYNESS, skin_type=SkinType.OILY)
    second = routine_for(SkinConcern.ACNE, SkinConcern.DRYNESS, skin_type=SkinType.OILY)
    assert first == second
    assert first.model_dump_json() == second.model_dump_json()


def test_routine_shape():
    routine = routine_for()

    assert [s.order for s in routine.morning] == [1, 2, 3, 4, 5]
    assert [s.category for s in routine.morning] == [
        ProductCategory.CLEANSER, ProductCategory.TONER, ProductCategory.SERUM,
        ProductCategory.MOISTURIZER, ProductCategory.SUNSCREEN,
    ]
    assert [s.order for s in routine.evening] == [1, 2, 3, 4, 5, 6]
    assert [t.name for t in routine.weekly] == ["Chemical Exfoliation", "Face Mask", "Facial Massage"]


def test_only_the_eye_cream_is_optional():
    routine = routine_for(SkinConcern.FINE_LINES, skin_type=SkinType.DRY)
    optional = [s for s in routine.morning + routine.evening if s.is_optional]
    assert [s.category for s in optional] == [ProductCategory.EYE_CREAM]


@pytest.mark.parametrize("skin_type, cleanser, moisturizer", [
    (SkinType.OILY, "Gentle foaming cleanser", "Lightweight gel moisturizer"),
    (SkinType.DRY, "Cream or oil-based cleanser", "Rich cream moisturizer with ceramides"),
    (SkinType.COMBINATION, "Gentle gel cleanser", "Balanced lotion moisturizer"),
    (SkinType.SENSITIVE, "Gentle gel cleanser", "Balanced lotion moisturizer"),
])
def test_morning_follows_skin_type(skin_type, cleanser, moisturizer):
    routine = routine_for(skin_type=skin_type)
    assert step(routine.morning, ProductCategory.CLEANSER).description == cleanser
    assert step(routine.morning, ProductCategory.MOISTURIZER).description == moisturizer


@pytest.mark.parametrize("kinds, serum", [
    ((SkinConcern.DARK_SPOTS, SkinConcern.DRYNESS), "Vitamin C serum (15-20%)"),
    ((SkinConcern.DULLNESS,), "Vitamin C serum (15-20%)"),
    ((SkinConcern.DRYNESS,), "Hyaluronic acid serum"),
    ((), "Niacinamide serum (5-10%)"),
])
def test_morning_serum(kinds, serum):
    assert step(routine_for(*kinds).morning, ProductCategory.SERUM).description == serum


@pytest.mark.parametrize("kinds, serum", [
    ((SkinConcern.ACNE, SkinConcern.FINE_LINES), "Retinol serum (start with 0.3%, work up)"),
    ((SkinConcern.WRINKLES,), "Retinol serum (start with 0.3%, work up)"),
    ((SkinConcern.ACNE, SkinConcern.DARK_SPOTS), "Salicylic acid or benzoyl peroxide treatment"),
    ((SkinConcern.DARK_SPOTS,), "Azelaic acid or alpha arbutin serum"),
    ((), "Peptide serum"),
])
def test_evening_serum(kinds, serum):
    assert step(routine_for(*kinds).evening, ProductCategory.SERUM).description == serum


def test_evening_follows_skin_type():
    oily = routine_for(skin_type=SkinType.OILY).evening
    dry = routine_for(skin_type=SkinType.DRY).evening

    assert oily[1].description == "Gentle foaming cleanser (second cleanse)"
    assert dry[1].description == "Gentle gel or cream cleanser (second cleanse)"
    assert oily[-1].description == "Night moisturizer"
    assert dry[-1].description == "Rich night cream or sleeping mask"


@pytest.mark.parametrize("kinds, exfoliant, mask", [
    ((SkinConcern.OILINESS,), "BHA", "Clay mask"),
    ((SkinConcern.ACNE, SkinConcern.DRYNESS), "BHA", "Hydrating sheet mask"),
    ((SkinConcern.OILINESS, SkinConcern.DRYNESS), "BHA", "Hydrating sheet mask"),
    ((), "AHA", "Brightening or hydrating mask"),
])
def test_weekly_treatments(kinds, exfoliant, mask):
    weekly = routine_for(*kinds).weekly
    assert weekly[0].description.startswith(exfoliant)
    assert weekly[1].description.startswith(mask)
