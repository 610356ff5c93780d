import pytest
from pydantic import ValidationError

from glowai.models.Product import PriceRange, price_range_for
from glowai.models.Profile import AgeRange, UserPreferences, UserProfile
from glowai.models.Skin import Severity, SkinConcern, SkinType
from tests.factories import make_metrics


def test_unanswered_quiz_defaults():
    profile = UserProfile()
    assert profile.name == "Beautiful"
    assert profile.age == AgeRange.MID_TWENTIES
    assert profile.skin_type == SkinType.NORMAL
    assert profile.preferences.budget_range == PriceRange.MID_RANGE
    assert profile.id.startswith("user_")


def test_profile_concerns_are_unique():
    profile = UserProfile(concerns=["acne", "dryness", "acne"])
    assert profile.concerns == [SkinConcern.ACNE, SkinConcern.DRYNESS]


def test_with_updates_returns_an_edited_copy():
    profile = UserProfile(name="Ana")
    updated = profile.with_updates(skin_type=SkinType.OILY)

    assert profile.skin_type == SkinType.NORMAL
    assert updated.skin_type == SkinType.OILY
    assert updated.name == "Ana"
    assert updated.id == profile.id
    assert updated.created_at == profile.created_at
    assert updated.updated_at >= profile.updated_at


@pytest.mark.parametrize("value, expected", [
    ("budget", PriceRange.BUDGET),
    ("luxury", PriceRange.LUXURY),
    ("platinum", None),
    (None, None),
])
def test_budget_range_coercion(value, expected):
    assert UserPreferences(budget_range=value).budget_range == expected


@pytest.mark.parametrize("price, tier", [
    (0, PriceRange.BUDGET),
    (25, PriceRange.BUDGET),
    (25.01, PriceRange.MID_RANGE),
    (60, PriceRange.MID_RANGE),
    (120, PriceRange.PREMIUM),
    (380, PriceRange.LUXURY),
])
def test_price_range_for(price, tier):
    assert price_range_for(price) == tier


def test_metric_channels_are_bounded():
    with pytest.raises(ValidationError):
        make_metrics(hydration=101)
    with pytest.raises(ValidationError):
        make_metrics(radiance=-1)


def test_concern_label():
    assert SkinConcern.DARK_SPOTS.label == "dark spots"
    assert SkinConcern.ACNE.label == "acne"


def test_severity_rank():
    ordered = sorted(Severity, key=lambda s: s.rank)
    assert ordered == [Severity.SEVERE, Severity.MODERATE, Severity.MILD]
