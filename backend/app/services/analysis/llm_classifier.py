"""
Model-backed Argument Classifier.

WHAT THIS DOES:
Asks an OpenAI chat model to find the arguments in a speech and return them
in the same ArgumentSignal shape the keyword classifier produces.

WHY IT WRAPS THE KEYWORD CLASSIFIER:
The rest of the pipeline must never fail because a model call did. Any
API error or malformed response is logged and the keyword result is
returned instead, so switching MODEL_BACKEND=openai can only improve the
analysis, never break a request.

STRUCTURED OUTPUT:
We use OpenAI's JSON mode. Unknown argument types are dropped, duplicate
types keep their first occurrence, and strengths are clamped to [0, 10].

USAGE:
    classifier = OpenAIArgumentClassifier()
    signals = await classifier.classify(speech_text, "DLO")
"""

import json
import logging
from collections.abc import Iterable

from openai import AsyncOpenAI, OpenAIError

from app.config import get_settings
from app.services.analysis.classifier import TAXONOMY, KeywordArgumentClassifier, assess_strength
from app.services.analysis.models import ArgumentSignal
from app.services.analysis.protocols import BaseArgumentClassifier

logger = logging.getLogger(__name__)

CLASSIFICATION_PROMPT = """You are a British Parliamentary debate adjudicator. Identify the arguments made in the speech below.

ARGUMENT TYPES (use exactly these names):
- economic, rights, social, practical: what the argument is about
- framework: definitions or the lens the debate should be judged through
- mechanism: how the policy works or is enforced
- impact: harms, benefits or consequences
- stakeholder: who is affected

RULES:
1. Only report a type if the speaker actually makes that kind of argument
2. At most one entry per type
3. Quote the speaker's own sentence where one exists; otherwise summarise in under 15 words
4. strength is 0-10: how well evidenced and reasoned the argument is

OUTPUT FORMAT (JSON):
{
  "arguments": [
    {
      "type": "economic",
      "title": "Short argument title",
      "claim": "...",
      "mechanism": "...",
      "evidence": "...",
      "impact": "...",
      "weighing": "...",
      "strength": 6
    }
  ]
}"""


class OpenAIArgumentClassifier(BaseArgumentClassifier):
    """
    Classifier that delegates to a chat model, falling back to keywords.
    """

    def __init__(self, client: AsyncOpenAI | None = None, fallback: KeywordArgumentClassifier | None = None):
        settings = get_settings()
        self.client = client or AsyncOpenAI(api_key=settings.openai_api_key)
        self.model = settings.openai_model
        self.fallback = fallback or KeywordArgumentClassifier()

    @property
    def backend_name(self) -> str:
        return "openai"

    async def classify(
        self,
        text: str,
        source_role: str,
        types: Iterable[str] | None = None,
    ) -> list[ArgumentSignal]:
        wanted = set(types) if types is not None else set(TAXONOMY)

        if not (text or "").strip():
            return []

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": CLASSIFICATION_PROMPT},
                    {"role": "user", "content": f"Speaker role: {source_role}\n\nSpeech:\n{text}"},
                ],
                response_format={"type": "json_object"},
                temperature=0.1,
            )
            if not response.choices:
                raise ValueError("response has no choices")
            payload = json.loads(response.choices[0].message.content or "{}")
            if not isinstance(payload, dict):
                raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
            signals = self._parse(payload, source_role, wanted, text)
        except OpenAIError as e:
            logger.warning(f"Model classification failed ({e}); using keyword classifier")
            return await self.fallback.classify(text, source_role, types)
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            logger.warning(f"Malformed classification response ({e}); using keyword classifier")
            return await self.fallback.classify(text, source_role, types)

        logger.info(f"Model classified {len(signals)} arguments for {source_role}")
        return signals

    def _parse(
        self,
        payload: dict,
        source_role: str,
        wanted: set[str],
        text: str,
    ) -> list[ArgumentSignal]:
        """Turn the model's JSON into signals, keeping only known, requested types."""
        items = payload.get("arguments", [])
        if not isinstance(items, list):
            raise ValueError("'arguments' is not a list")

        by_type: dict[str, ArgumentSignal] = {}
        default_strength = assess_strength(text)

        for item in items:
            if not isinstance(item, dict):
                continue
            arg_type = str(item.get("type", "")).lower()
            if arg_type not in TAXONOMY or arg_type not in wanted or arg_type in by_type:
                continue

            try:
                strength = int(item.get("strength", default_strength))
            except (TypeError, ValueError):
                strength = default_strength

            by_type[arg_type] = ArgumentSignal(
                type=arg_type,
                source_role=source_role,
                title=str(item.get("title") or TAXONOMY[arg_type].fallback_title),
                claim=str(item.get("claim") or f"{arg_type.capitalize()} argument identified"),
                mechanism=str(item.get("mechanism") or f"The mechanism operates through the identified {arg_type} pathway"),
                evidence=str(item.get("evidence") or f"Evidence supporting the {arg_type} argument"),
                impact=str(item.get("impact") or f"The {arg_type} impact as identified in the analysis"),
                weighing=str(item.get("weighing") or f"This {arg_type} consideration is weighted according to strategic priorities"),
                strength=max(0, min(10, strength)),
            )

        # Keep taxonomy order so output is comparable with the keyword backend
        return [by_type[name] for name in TAXONOMY if name in by_type]
