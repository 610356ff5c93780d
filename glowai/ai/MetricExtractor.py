import asyncio
import logging
import random
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from glowai import config
from glowai.ai.SkinModel import clamp, round_half_up
from glowai.models.Profile import AgeRange, UserProfile
from glowai.models.Request import ImageReference
from glowai.models.Response import SkinMetrics
from glowai.models.Skin import SkinType

logger = logging.getLogger(__name__)


class MetricExtractionError(Exception):
    """The inference backend could not produce metrics for an image."""


class MetricExtractor(ABC):
    """
    Turns a selfie into a SkinMetrics vector.

    Implementations may be slow (real inference); callers only rely on the
    async signature and on every channel being an integer in [0, 100].
    """

    def __init__(self):
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    async def load(self) -> None:
        self._ready = True

    @abstractmethod
    async def extract_metrics(
        self, image: ImageReference, profile: Optional[UserProfile] = None
    ) -> SkinMetrics:
        ...


# channel: (low, span), sampled as low + U[0, 1) * span
BASE_RANGES: Dict[str, Tuple[float, float]] = {
    "hydration": (45, 40),
    "oiliness": (25, 50),
    "sensitivity": (15, 50),
    "elasticity": (50, 40),
    "texture": (40, 45),
    "pigmentation": (45, 45),
    "pore_size": (40, 45),
    "radiance": (35, 50),
}

SKIN_TYPE_BIASES: Dict[SkinType, Dict[str, float]] = {
    SkinType.OILY: {"oiliness": 20, "pore_size": -15},
    SkinType.DRY: {"hydration": -20, "oiliness": -15},
    SkinType.SENSITIVE: {"sensitivity": 25},
    SkinType.COMBINATION: {"oiliness": 10, "hydration": -10},
}

AGE_BIASES: Dict[AgeRange, Dict[str, float]] = {
    AgeRange.EARLY_TWENTIES: {"elasticity": 15, "oiliness": 10},
    AgeRange.EARLY_THIRTIES: {"elasticity": -10},
    AgeRange.MATURE: {"elasticity": -10},
}


class SimulatedMetricExtractor(MetricExtractor):
    """
    Stand-in for a trained model: samples plausible metrics and nudges them
    towards what the user reported in the quiz.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        latency: Tuple[float, float] = (config.SIMULATED_LATENCY_MIN, config.SIMULATED_LATENCY_MAX),
        load_delay: float = config.MODEL_LOAD_DELAY,
    ):
        super().__init__()
        self.rng = rng or random.Random()
        self.latency = latency
        self.load_delay = load_delay

    async def load(self) -> None:
        if self.load_delay > 0:
            await asyncio.sleep(self.load_delay)
        await super().load()
        logger.info("Simulated skin model loaded")

    def sample(self, profile: Optional[UserProfile] = None) -> SkinMetrics:
        values = {
            channel: low + self.rng.random() * span
            for channel, (low, span) in BASE_RANGES.items()
        }

        if profile is not None:
            biases = [SKIN_TYPE_BIASES.get(profile.skin_type, {}), AGE_BIASES.get(profile.age, {})]
            for bias in biases:
                for channel, delta in bias.items():
                    values[channel] = clamp(values[channel] + delta)

        return SkinMetrics(**{channel: round_half_up(clamp(value)) for channel, value in values.items()})

    async def extract_metrics(
        self, image: ImageReference, profile: Optional[UserProfile] = None
    ) -> SkinMetrics:
        low, high = self.latency
        delay = low + self.rng.random() * (high - low)
        if delay > 0:
            await asyncio.sleep(delay)
        return self.sample(profile)
