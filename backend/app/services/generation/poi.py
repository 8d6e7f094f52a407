"""
Point of Information Generator.

WHAT THIS DOES:
While the user is speaking, the client periodically asks whether an AI
speaker on the other bench should stand and offer a Point of Information.
The answer is either a one or two sentence challenge, or nothing.

RULES:
- Only between minute 1 and minute 6 (protected time otherwise)
- If the transcript mentions an example or a study/evidence, challenge it
  directly; otherwise pick a question pitched at the user's skill level
- With MODEL_BACKEND=openai the chat model writes the POI from the live
  transcript; any model failure drops back to the templates

USAGE:
    generator = POIGenerator(make_rng(seed))
    poi = await generator.generate(request)   # None outside the window
"""

import logging
import random

from openai import AsyncOpenAI, OpenAIError

from app.config import get_settings
from app.models.schemas import POIRequest
from app.services.analysis import make_rng

logger = logging.getLogger(__name__)

DEFAULT_SKILL_LEVEL = "intermediate"
TRANSCRIPT_EXCERPT_CHARS = 1500

POI_TEMPLATES = {
    "beginner": [
        "Can you give us a specific example of that?",
        "How do you know that's actually true?",
        "What about people who disagree with you?",
        "Isn't that just your opinion?",
        "Can you prove that will really happen?",
    ],
    "intermediate": [
        "What evidence do you have that this mechanism would work in practice?",
        "How do you respond to the concern that this could harm vulnerable populations?",
        "Can you clarify how this addresses the root cause rather than symptoms?",
        "What safeguards prevent the abuse you've just described?",
        "How do you weigh this against competing moral principles?",
    ],
    "advanced": [
        "How do you account for the endogeneity problem in your causal analysis?",
        "What's your response to the democratic legitimacy concerns this raises?",
        "How do you address the path dependence issues with institutional change?",
        "Can you reconcile this with the empirical evidence from natural experiments?",
        "How do you resolve the tension between your normative and consequentialist claims?",
    ],
}

SKILL_GUIDANCE = {
    "beginner": "Keep it simple and direct. Focus on basic clarification or obvious contradictions.",
    "intermediate": "Use moderate complexity. Challenge assumptions or ask for evidence.",
    "advanced": "Use sophisticated questioning. Challenge methodology, definitions, or strategic implications.",
}

POI_PROMPT = """You are an AI debater listening to a live speech in a British Parliamentary debate.

CONTEXT:
Motion: {motion}
Speaker Role: {role}
Time Spoken: {clock}
Current Speech Content: "{transcript}"

SKILL LEVEL: {skill_upper}

Generate a contextual Point of Information (POI) that:
1. Directly challenges a specific claim the speaker just made
2. Is appropriate for their skill level ({skill})
3. Is concise (1-2 sentences max)
4. Follows BP POI conventions
5. Targets a logical weakness or assumption

{guidance}

Generate only the POI text (no introduction):"""


def format_clock(seconds: float) -> str:
    whole = int(seconds)
    return f"{whole // 60}:{whole % 60:02d}"


def transcript_override(transcript: str, skill_level: str) -> str | None:
    """A targeted challenge when the speaker just leaned on an example or a study."""
    lowered = transcript.lower()
    advanced = skill_level == "advanced"

    if "example" in lowered:
        if advanced:
            return "Is that example representative, or are you cherry-picking supportive cases?"
        return "Can you give us a different example that proves the same point?"

    if "evidence" in lowered or "study" in lowered:
        if advanced:
            return "What's the methodology behind that study, and how do you address selection bias?"
        return "Where does that evidence come from?"

    return None


class POIGenerator:
    """
    Offers Points of Information from templates, or from the chat model when enabled.
    """

    def __init__(self, rng: random.Random, client: AsyncOpenAI | None = None):
        settings = get_settings()
        self.rng = rng
        self.min_seconds = settings.poi_min_seconds
        self.max_seconds = settings.poi_max_seconds
        self.use_model = settings.model_backend == "openai"
        self.model = settings.openai_model
        self.client = client
        if self.use_model and self.client is None:
            self.client = AsyncOpenAI(api_key=settings.openai_api_key)

    def in_window(self, time_spoken: float) -> bool:
        return self.min_seconds <= time_spoken <= self.max_seconds

    async def generate(self, request: POIRequest) -> str | None:
        """
        Return a POI, or None when the speaker is in protected time.
        """
        if not self.in_window(request.time_spoken):
            logger.debug(f"No POI at {request.time_spoken}s (protected time)")
            return None

        skill_level = request.skill_level or DEFAULT_SKILL_LEVEL

        if self.use_model:
            poi = await self._generate_with_model(request, skill_level)
            if poi:
                return poi

        return self.from_templates(request.current_transcript, skill_level)

    def from_templates(self, transcript: str, skill_level: str) -> str:
        override = transcript_override(transcript, skill_level)
        if override:
            return override
        templates = POI_TEMPLATES.get(skill_level, POI_TEMPLATES[DEFAULT_SKILL_LEVEL])
        return self.rng.choice(templates)

    async def _generate_with_model(self, request: POIRequest, skill_level: str) -> str | None:
        prompt = POI_PROMPT.format(
            motion=request.motion,
            role=request.role,
            clock=format_clock(request.time_spoken),
            transcript=request.current_transcript[-TRANSCRIPT_EXCERPT_CHARS:],
            skill_upper=skill_level.upper(),
            skill=skill_level,
            guidance=SKILL_GUIDANCE.get(skill_level, SKILL_GUIDANCE["advanced"]),
        )
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.7,
                max_tokens=120,
            )
        except OpenAIError as e:
            logger.warning(f"POI model call failed ({e}); using templates")
            return None

        poi = (response.choices[0].message.content or "").strip()
        if not poi:
            logger.warning("POI model returned an empty message; using templates")
        return poi or None


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

async def generate_poi(request: POIRequest) -> str | None:
    """
    Convenience function to offer a POI.

    The request seed wins over SCORING_SEED for the template draw.

    Example:
        poi = await generate_poi(POIRequest(current_transcript=..., role="PM", time_spoken=90))
    """
    seed = request.seed if request.seed is not None else get_settings().scoring_seed
    return await POIGenerator(make_rng(seed)).generate(request)
