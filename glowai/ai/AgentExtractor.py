import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Union

from pydantic_ai import Agent, BinaryContent, RunContext
from pydantic_ai.exceptions import ModelHTTPError
from pydantic_ai.models import Model

from glowai import config
from glowai.ai.MetricExtractor import MetricExtractionError, MetricExtractor
from glowai.models.Profile import UserProfile
from glowai.models.Request import ImageReference
from glowai.models.Response import SkinMetrics

logger = logging.getLogger(__name__)


@dataclass
class ExtractionDependencies:
    """Context handed to the vision model for one selfie."""
    profile: Optional[UserProfile]


BASE_SYSTEM_PROMPT = """
You are an experienced dermatologist assessing the facial skin of a patient from a selfie.
Measure the skin and answer with exactly eight integer scores between 0 and 100:

- hydration: 100 = perfectly hydrated, 0 = severely dehydrated
- oiliness: amount of visible sebum, 100 = extremely oily, 0 = no oil at all
- sensitivity: visible redness and reactivity, 100 = very reactive
- elasticity: firmness, 100 = no lines or sagging
- texture: smoothness, 100 = perfectly smooth
- pigmentation: evenness of tone, 100 = perfectly even
- pore_size: 100 = invisible pores, 0 = very enlarged pores
- radiance: natural glow, 100 = very radiant

Judge only what is visible in the image. Use the patient's questionnaire as context
when the image is ambiguous, but do not copy it blindly.
"""


metrics_agent = Agent[ExtractionDependencies, SkinMetrics](
    deps_type=ExtractionDependencies,
    output_type=SkinMetrics,
    retries=2,
)


@metrics_agent.system_prompt
async def get_system_prompt(ctx: RunContext[ExtractionDependencies]) -> str:
    """System prompt with the patient's declared profile, when there is one."""
    profile = ctx.deps.profile
    if profile is None:
        return BASE_SYSTEM_PROMPT

    concerns = ", ".join(c.label for c in profile.concerns) or "none reported"
    return f"""
{BASE_SYSTEM_PROMPT}

PATIENT CONTEXT:
- Age range: {profile.age.value}
- Declared skin type: {profile.skin_type.value}
- Declared skin tone: {profile.skin_tone.value}
- Reported concerns: {concerns}
"""


class AgentMetricExtractor(MetricExtractor):
    """Reads metrics from a vision LLM; retries when the provider rate limits us."""

    def __init__(
        self,
        model: Union[str, Model] = config.AGENT_MODEL,
        max_retries: int = config.AGENT_MAX_RETRIES,
        retry_delay: float = config.AGENT_RETRY_DELAY,
    ):
        super().__init__()
        self.model = model
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    async def extract_metrics(
        self, image: ImageReference, profile: Optional[UserProfile] = None
    ) -> SkinMetrics:
        if not image.data:
            raise MetricExtractionError(f"No image data for {image.uri}")

        content = BinaryContent(data=image.data, media_type=image.media_type)
        deps = ExtractionDependencies(profile=profile)

        for attempt in range(self.max_retries):
            try:
                logger.info(f"[METRICS] Attempt {attempt + 1}/{self.max_retries} for {image.uri}")
                result = await metrics_agent.run(
                    ["Assess the skin in this selfie.", content],
                    model=self.model,
                    deps=deps,
                )
                return result.output

            except ModelHTTPError as e:
                if e.status_code == 429 and attempt < self.max_retries - 1:
                    logger.warning(f"[METRICS] Rate limited, waiting {self.retry_delay}s")
                    await asyncio.sleep(self.retry_delay)
                    continue
                raise MetricExtractionError(f"Model request failed: {e}") from e
            except Exception as e:
                raise MetricExtractionError(f"Skin metrics unavailable: {e}") from e

        raise MetricExtractionError("Skin metrics unavailable: no attempts left")
