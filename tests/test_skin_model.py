import pytest

from glowai.ai.SkinModel import (
    SKIN_TONE_PROFILES,
    detect_skin_tone,
    detect_skin_type,
    overall_score,
    reference_lightness,
    round_half_up,
)
from glowai.models.Response import SkinMetrics
from glowai.models.Skin import SkinTone, SkinType
from tests.factories import make_metrics

OILY_DEHYDRATED = SkinMetrics(
    hydration=20, oiliness=80, sensitivity=30, elasticity=60,
    texture=35, pigmentation=70, pore_size=60, radiance=60,
)


def uniform(value: int) -> SkinMetrics:
    return SkinMetrics(**{channel: value for channel in SkinMetrics.model_fields})


def test_overall_score_of_oily_dehydrated_skin():
    # 3.6 + 5.2 + 7 + 9 + 5.25 + 8.4 + 4.2 + 9 = 51.65
    assert overall_score(OILY_DEHYDRATED) == 52


def test_overall_score_extremes():
    assert overall_score(uniform(0)) == 14
    assert overall_score(uniform(100)) == 86


def test_ideal_skin_scores_one_hundred():
    ideal = SkinMetrics(
        hydration=100, oiliness=45, sensitivity=0, elasticity=100,
        texture=100, pigmentation=100, pore_size=100, radiance=100,
    )
    assert overall_score(ideal) == 100


def test_oiliness_is_penalized_on_both_sides():
    balanced = overall_score(make_metrics(oiliness=45))
    assert overall_score(make_metrics(oiliness=5)) < balanced
    assert overall_score(make_metrics(oiliness=95)) < balanced


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(51.65) == 52
    assert round_half_up(51.49) == 51
    assert round_half_up(0.5) == 1


@pytest.mark.parametrize("overrides, expected", [
    (dict(sensitivity=71, oiliness=90, hydration=10), SkinType.SENSITIVE),
    (dict(oiliness=66, hydration=44), SkinType.COMBINATION),
    (dict(oiliness=66, hydration=45), SkinType.OILY),
    (dict(oiliness=61), SkinType.OILY),
    (dict(hydration=39), SkinType.DRY),
    (dict(hydration=40), SkinType.NORMAL),
    (dict(sensitivity=70), SkinType.NORMAL),
])
def test_detect_skin_type(overrides, expected):
    assert detect_skin_type(make_metrics(**overrides)) == expected


@pytest.mark.parametrize("lightness, expected", [
    (0.9, SkinTone.FAIR),
    (0.78, SkinTone.FAIR),
    (0.7, SkinTone.LIGHT),
    (0.6, SkinTone.MEDIUM),
    (0.5, SkinTone.OLIVE),
    (0.4, SkinTone.TAN),
    (0.3, SkinTone.DARK),
    (0.1, SkinTone.DEEP),
    (0.0, SkinTone.DEEP),
])
def test_detect_skin_tone(lightness, expected):
    assert detect_skin_tone(lightness).tone == expected


def test_lightness_outside_every_band_falls_back_to_medium():
    assert detect_skin_tone(1.0).tone == SkinTone.MEDIUM
    assert detect_skin_tone(-0.2).tone == SkinTone.MEDIUM


def test_tone_bands_carry_fitzpatrick_and_undertone():
    fair = detect_skin_tone(0.85)
    assert fair.fitzpatrick_scale == 1
    assert fair.undertone == "cool"
    assert detect_skin_tone(0.05).fitzpatrick_scale == 6


@pytest.mark.parametrize("tone", list(SkinTone))
def test_reference_lightness_maps_back_to_its_tone(tone):
    assert detect_skin_tone(reference_lightness(tone)).tone == tone


def test_tone_bands_are_contiguous():
    ordered = sorted(SKIN_TONE_PROFILES, key=lambda p: p.lightness_range[0])
    for lower, upper in zip(ordered, ordered[1:]):
        assert lower.lightness_range[1] == upper.lightness_range[0]
