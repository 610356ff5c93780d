import random

import pytest

from glowai.ai.MetricExtractor import SimulatedMetricExtractor
from glowai.ai.ProductRecommendation import ProductRecommendationService
from glowai.models.Request import ImageReference


@pytest.fixture
def image() -> ImageReference:
    return ImageReference(uri="file:///selfie.jpg", data=b"\xff\xd8\xff fake jpeg", media_type="image/jpeg")


@pytest.fixture
def fast_extractor() -> SimulatedMetricExtractor:
    return SimulatedMetricExtractor(rng=random.Random(7), latency=(0, 0), load_delay=0)


@pytest.fixture
def catalog_service() -> ProductRecommendationService:
    """Service backed by the bundled catalog."""
    return ProductRecommendationService()
