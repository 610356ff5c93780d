import random

import pytest

from glowai.ai.AiServices import (
    CONSISTENCY_TIP,
    SUNSCREEN_TIP,
    AnalysisUnavailableError,
    analyze_skin,
    generate_top_recommendations,
)
from glowai.ai.Routine import build_routine
from glowai.ai.SkinModel import detect_skin_type, overall_score
from glowai.models.Profile import UserProfile
from glowai.models.Response import HISTORY_LIMIT, AnalysisHistory
from glowai.models.Skin import Severity, SkinConcern, SkinTone, SkinType
from tests.factories import FailingExtractor, FixedExtractor, make_concern, make_metrics


async def test_analysis_without_profile(image, fast_extractor):
    result = await analyze_skin(image, extractor=fast_extractor, rng=random.Random(1))

    assert result.id.startswith("analysis_")
    assert result.image_uri == image.uri
    assert result.timestamp.tzinfo is not None
    assert 0 <= result.overall_score <= 100
    assert result.overall_score == overall_score(result.metrics)
    assert result.skin_type_detected == detect_skin_type(result.metrics)
    assert len(result.concerns) <= 6
    assert result.routine_suggestion == build_routine(result.concerns, result.skin_type_detected)
    assert fast_extractor.is_ready


async def test_recommendations_keep_sunscreen_and_end_with_consistency(image, fast_extractor):
    result = await analyze_skin(image, extractor=fast_extractor, rng=random.Random(2))

    assert 2 <= len(result.recommendations) <= 5
    assert SUNSCREEN_TIP in result.recommendations
    assert result.recommendations[-1] == CONSISTENCY_TIP


@pytest.mark.parametrize("tone", list(SkinTone))
async def test_declared_profile_wins_over_detection(image, fast_extractor, tone):
    profile = UserProfile(skin_type=SkinType.DRY, skin_tone=tone)
    result = await analyze_skin(image, profile, extractor=fast_extractor, rng=random.Random(3))

    assert result.skin_type_detected == SkinType.DRY
    assert result.skin_tone_detected == tone


async def test_reported_concern_reaches_the_result(image):
    profile = UserProfile(concerns=[SkinConcern.MELASMA])
    result = await analyze_skin(image, profile, extractor=FixedExtractor(make_metrics()), rng=random.Random(4))

    assert [(c.type, c.severity) for c in result.concerns] == [(SkinConcern.MELASMA, Severity.MILD)]


async def test_each_analysis_gets_a_new_id(image, fast_extractor):
    rng = random.Random(5)
    first = await analyze_skin(image, extractor=fast_extractor, rng=rng)
    second = await analyze_skin(image, extractor=fast_extractor, rng=rng)
    assert first.id != second.id


@pytest.mark.parametrize("fail_on_load", [True, False])
async def test_backend_failure_is_reported_not_hidden(image, fail_on_load):
    with pytest.raises(AnalysisUnavailableError) as excinfo:
        await analyze_skin(image, extractor=FailingExtractor(fail_on_load), rng=random.Random(6))
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_top_recommendations_are_capped():
    concerns = [make_concern(SkinConcern.ACNE), make_concern(SkinConcern.FINE_LINES)]
    metrics = make_metrics(hydration=40, radiance=40)

    tips = generate_top_recommendations(concerns, metrics, SkinType.SENSITIVE)

    assert len(tips) == 5
    assert tips[0].startswith("Boost hydration")
    assert tips[1].startswith("Add a Vitamin C serum")
    assert tips[2] == SUNSCREEN_TIP
    assert tips[3].startswith("Avoid touching your face")
    assert tips[4] == CONSISTENCY_TIP


def test_top_recommendations_for_healthy_skin():
    tips = generate_top_recommendations([], make_metrics(), SkinType.NORMAL)
    assert tips == [SUNSCREEN_TIP, CONSISTENCY_TIP]


async def test_history_keeps_the_latest_results(image, fast_extractor):
    result = await analyze_skin(image, extractor=fast_extractor, rng=random.Random(7))
    history = AnalysisHistory()
    assert history.latest is None

    for i in range(HISTORY_LIMIT + 5):
        history = history.add(result.model_copy(update={"id": f"analysis_{i}"}))

    assert len(history.results) == HISTORY_LIMIT
    assert history.latest.id == f"analysis_{HISTORY_LIMIT + 4}"
    assert history.results[-1].id == "analysis_5"
